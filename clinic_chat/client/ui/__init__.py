"""
Client UI Components

Provides user interface components for the clinic chat client using Rich.
"""

from .chat_view import ChatView
from .schedule_view import ScheduleView

__all__ = ["ChatView", "ScheduleView"]
