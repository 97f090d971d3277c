"""
Clinic Chat Client Package

Provides the chat screen and the terminal front end.
"""

from .chat_screen import ChatScreen

__all__ = ["ChatScreen"]
