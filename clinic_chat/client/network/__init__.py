"""
Client Network Layer

Provides the chat transport and message log for the clinic chat client.
"""

from .message_log import MessageLog
from .transport import ChatTransport, TransportConfig

__all__ = ["ChatTransport", "MessageLog", "TransportConfig"]
