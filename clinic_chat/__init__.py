"""
Clinic Chat

Terminal client for the clinic scheduling prototype: appointment list,
appointment detail and a WebSocket chat with the patient.
"""

__version__ = "1.0.0"
