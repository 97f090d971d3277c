"""
Custom Exceptions

Defines custom exception classes for the clinic chat client.
"""

from typing import Optional


class ClinicChatError(Exception):
    """Base exception class for all clinic chat errors."""
    pass


class NetworkError(ClinicChatError):
    """Raised when network-related errors occur."""

    def __init__(self, message: str, operation: Optional[str] = None, address: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.address = address


class ConnectionError(NetworkError):
    """Raised when the chat endpoint is malformed or unreachable."""

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message, operation="connect", address=address)


class SendError(NetworkError):
    """Raised when a text frame cannot be transmitted."""

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message, operation="send", address=address)


class NotConnectedError(SendError):
    """Raised when sending while the connection is not open."""
    pass


class ReceiveError(NetworkError):
    """Raised when the connection fails while awaiting a frame."""

    def __init__(self, message: str, address: Optional[str] = None, close_code: Optional[int] = None):
        super().__init__(message, operation="receive", address=address)
        self.close_code = close_code


class ValidationError(ClinicChatError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        if field is not None:
            self.field = field
        if value is not None:
            self.value = value


class MessageValidationError(ValidationError):
    """Raised when chat message validation fails."""
    pass


class ConfigurationError(ClinicChatError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid."""
    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""
    pass


class ScheduleError(ClinicChatError):
    """Base class for appointment schedule errors."""
    pass


class AppointmentLoadError(ScheduleError):
    """Raised when the appointments file cannot be read or decoded."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
