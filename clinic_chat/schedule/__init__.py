"""
Appointment Schedule

Loads the clinic's appointment list.
"""

from .appointments import load_appointments, group_by_date

__all__ = ["load_appointments", "group_by_date"]
