"""
Data models for JeevesBot
Defines the appointment record, the parsed draft it is built from, and the
result objects returned by the parser and the store.
"""

from dataclasses import dataclass
from datetime import date as dt_date, datetime, time as dt_time, timezone
from typing import Any, Dict, Optional, Tuple

from .datetime_formats import format_date, format_time


@dataclass(frozen=True)
class AppointmentDraft:
    """Parsed appointment that has not been stored yet"""
    date: dt_date
    time: dt_time
    contact_name: str
    category: str

    @property
    def sort_key(self) -> Tuple[dt_date, dt_time]:
        return (self.date, self.time)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with canonical DD-MM-YYYY / HH:MM strings"""
        return {
            "date": format_date(self.date),
            "time": format_time(self.time),
            "contactName": self.contact_name,
            "category": self.category,
        }


@dataclass(frozen=True)
class Appointment:
    """Stored appointment. Immutable: corrections are delete + re-add."""
    id: str
    date: dt_date
    time: dt_time
    contact_name: str
    category: str
    created_at: str

    @property
    def sort_key(self) -> Tuple[dt_date, dt_time]:
        return (self.date, self.time)

    @property
    def weekday(self) -> str:
        return self.date.strftime("%A")

    @classmethod
    def from_draft(cls, draft: AppointmentDraft, appointment_id: str,
                   created_at: Optional[str] = None) -> 'Appointment':
        """Promote a draft to a stored record"""
        return cls(
            id=appointment_id,
            date=draft.date,
            time=draft.time,
            contact_name=draft.contact_name,
            category=draft.category,
            created_at=created_at or datetime.now(timezone.utc).isoformat(),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Appointment':
        """
        Create Appointment from a persisted JSON record.

        Raises:
            KeyError: A required field is missing
            ValueError: date/time are not in canonical form or not valid
        """
        return cls(
            id=str(data["id"]),
            date=datetime.strptime(data["date"], "%d-%m-%Y").date(),
            time=datetime.strptime(data["time"], "%H:%M").time(),
            contact_name=data["contactName"],
            category=data["category"],
            created_at=data.get("createdAt", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": format_date(self.date),
            "time": format_time(self.time),
            "contactName": self.contact_name,
            "category": self.category,
            "createdAt": self.created_at,
        }


@dataclass
class ParseResult:
    """Outcome of parsing raw appointment input: a draft or an error message"""
    appointment: Optional[AppointmentDraft] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.appointment is not None

    @classmethod
    def ok(cls, appointment: AppointmentDraft) -> 'ParseResult':
        return cls(appointment=appointment)

    @classmethod
    def fail(cls, error: str) -> 'ParseResult':
        return cls(error=error)


@dataclass
class DeleteResult:
    """Outcome of deleting by position"""
    success: bool
    deleted_appointment: Optional[Appointment] = None
    error: Optional[str] = None
