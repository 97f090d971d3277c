"""
Data Models

Defines data classes and models used throughout the clinic chat client.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .constants import APPOINTMENT_FIELDS, CURRENT_USER_ID, REMOTE_USER_ID
from .exceptions import MessageValidationError, ValidationError


class MessageOrigin(Enum):
    """Where a chat entry came from."""
    LOCAL = "local"
    REMOTE = "remote"


class ConnectionState(Enum):
    """Enumeration of chat connection states."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass(frozen=True)
class ChatEntry:
    """A single chat message in the message log."""
    text: str
    origin: MessageOrigin
    entry_id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise MessageValidationError("Message text must be a string", field="text")
        if not self.text:
            raise MessageValidationError("Message cannot be empty", field="text")
        if not isinstance(self.origin, MessageOrigin):
            raise MessageValidationError(f"Unknown message origin: {self.origin!r}", field="origin")

    @classmethod
    def local(cls, text: str) -> "ChatEntry":
        """Create an entry typed by the current user."""
        return cls(text=text, origin=MessageOrigin.LOCAL)

    @classmethod
    def remote(cls, text: str) -> "ChatEntry":
        """Create an entry received from the remote user."""
        return cls(text=text, origin=MessageOrigin.REMOTE)

    @property
    def is_current_user(self) -> bool:
        return self.origin is MessageOrigin.LOCAL

    @property
    def sender_id(self) -> str:
        """Participant identifier for the entry's origin."""
        return CURRENT_USER_ID if self.is_current_user else REMOTE_USER_ID


@dataclass
class LogStats:
    """Statistics for the message log."""
    total_entries: int = 0
    local_entries: int = 0
    remote_entries: int = 0
    last_entry_time: Optional[datetime] = None


@dataclass(frozen=True)
class Appointment:
    """A scheduled clinic appointment."""
    id: uuid.UUID
    period: str
    type: str
    title: str
    patient_name: str
    room: str
    date: str
    start_time: str
    end_time: str
    has_conflict: bool
    patient_info: str

    @property
    def time_range(self) -> str:
        """Get the appointment time as start-end string."""
        return f"{self.start_time}-{self.end_time}"

    @property
    def patient_initial(self) -> str:
        """First letter of the patient's name, used for the avatar."""
        return self.patient_name[:1]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        """
        Create an appointment from a JSON record.

        Args:
            data: Record with the camelCase keys of appointments.json.

        Returns:
            Appointment instance.

        Raises:
            ValidationError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Appointment record must be an object, got {type(data).__name__}")

        missing = [name for name in APPOINTMENT_FIELDS if name not in data]
        if missing:
            raise ValidationError(f"Appointment record is missing fields: {', '.join(missing)}",
                                  field=missing[0])

        try:
            appointment_id = uuid.UUID(str(data["id"]))
        except ValueError:
            raise ValidationError(f"Invalid appointment id: {data['id']!r}", field="id")

        if not isinstance(data["hasConflict"], bool):
            raise ValidationError("hasConflict must be a boolean", field="hasConflict")

        for name in APPOINTMENT_FIELDS:
            if name in ("id", "hasConflict"):
                continue
            if not isinstance(data[name], str):
                raise ValidationError(f"{name} must be a string", field=name)

        return cls(
            id=appointment_id,
            period=data["period"],
            type=data["type"],
            title=data["title"],
            patient_name=data["patientName"],
            room=data["room"],
            date=data["date"],
            start_time=data["startTime"],
            end_time=data["endTime"],
            has_conflict=data["hasConflict"],
            patient_info=data["patientInfo"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the appointment back to its JSON record form."""
        return {
            "id": str(self.id),
            "period": self.period,
            "type": self.type,
            "title": self.title,
            "patientName": self.patient_name,
            "room": self.room,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "hasConflict": self.has_conflict,
            "patientInfo": self.patient_info,
        }
