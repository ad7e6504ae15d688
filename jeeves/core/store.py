"""
Calendar store for JeevesBot
Owns the durable collection of appointments.

Two implementations share one interface:
- JsonFileCalendarStore: a single JSON document on disk
- InMemoryCalendarStore: a plain list, for tests and throwaway sessions

Every operation loads the full collection and every mutation writes the
full collection back. Callers always see appointments in chronological
order (date, then time); the order on disk is insertion order.

Positions used by delete_at_position() are 1-based indexes into list() at
the moment of the call. Two clients that list, then delete by position,
can remove different appointments if a write lands in between. The API
stays position-based for compatibility with the chat commands.
"""

import json
import logging
import os
import tempfile
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import Appointment, AppointmentDraft, DeleteResult


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the store cannot persist a change"""


class CalendarStore(ABC):
    """
    Abstract appointment store.

    Subclasses provide _load() and _save(); all ordering, filtering and
    position handling lives here.
    """

    @abstractmethod
    def _load(self) -> List[Appointment]:
        """Return all appointments in insertion order. Never raises."""
        pass

    @abstractmethod
    def _save(self, appointments: List[Appointment]) -> None:
        """
        Replace the stored collection.

        Raises:
            StoreError: The collection could not be written
        """
        pass

    def add(self, draft: AppointmentDraft) -> Appointment:
        """
        Store a draft as a new appointment.

        Args:
            draft: Validated appointment draft

        Returns:
            The stored Appointment with its new id and createdAt
        """
        appointments = self._load()
        appointment = Appointment.from_draft(
            draft,
            appointment_id=self._generate_id(),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        appointments.append(appointment)
        self._save(appointments)
        logger.info(f"Added appointment {appointment.id} on {appointment.to_dict()['date']}")
        return appointment

    def list(self) -> List[Appointment]:
        """All appointments, chronological. Ties keep insertion order."""
        return sorted(self._load(), key=lambda a: a.sort_key)

    def list_in_range(self, start: date, end: date) -> List[Appointment]:
        """
        Appointments whose date falls within [start, end].

        Only the calendar day is compared, so an appointment at 23:59 on
        the end day is included.
        """
        return [a for a in self.list() if start <= a.date <= end]

    def list_upcoming(self, days: int = 7, today: Optional[date] = None) -> List[Appointment]:
        """Appointments from today through today + days - 1."""
        today = today or date.today()
        return self.list_in_range(today, today + timedelta(days=max(days, 1) - 1))

    def list_for_day(self, day: Optional[date] = None) -> List[Appointment]:
        day = day or date.today()
        return self.list_in_range(day, day)

    def delete_at_position(self, position: int) -> DeleteResult:
        """
        Delete the appointment shown at a 1-based position in list().

        Args:
            position: 1-based index into the chronological view

        Returns:
            DeleteResult with the removed appointment, or an error naming
            the valid range (nothing is modified in that case)
        """
        appointments = self._load()
        ordered = sorted(appointments, key=lambda a: a.sort_key)

        if position < 1 or position > len(ordered):
            if ordered:
                valid = f"Please use a number between 1 and {len(ordered)}."
            else:
                valid = "There are no appointments to delete."
            return DeleteResult(
                success=False,
                error=f"Invalid appointment number: {position}. {valid}",
            )

        target = ordered[position - 1]
        remaining = [a for a in appointments if a.id != target.id]
        self._save(remaining)
        logger.info(f"Deleted appointment {target.id} at position {position}")
        return DeleteResult(success=True, deleted_appointment=target)

    def position_of(self, appointment_id: str) -> Optional[int]:
        """1-based position of an appointment id in list(), or None."""
        return self.positions().get(appointment_id)

    def positions(self) -> Dict[str, int]:
        """Appointment id -> 1-based position in list()."""
        return {a.id: index for index, a in enumerate(self.list(), start=1)}

    def count(self) -> int:
        return len(self._load())

    @staticmethod
    def _generate_id() -> str:
        return uuid.uuid4().hex


class InMemoryCalendarStore(CalendarStore):
    """Store that keeps appointments in process memory only"""

    def __init__(self, appointments: Optional[List[Appointment]] = None):
        self._appointments: List[Appointment] = list(appointments or [])

    def _load(self) -> List[Appointment]:
        return list(self._appointments)

    def _save(self, appointments: List[Appointment]) -> None:
        self._appointments = list(appointments)

    def clear(self) -> None:
        self._appointments = []


class JsonFileCalendarStore(CalendarStore):
    """
    Store backed by a single JSON document:

        {"appointments": [{id, date, time, contactName, category, createdAt}, ...]}

    Writes go to a temporary file in the same directory which then
    replaces the document, so a crash mid-write leaves the previous
    version intact.
    """

    def __init__(self, file_path: Path):
        """
        Initialize the file store

        Args:
            file_path: Location of the calendar JSON document
        """
        self.file_path = Path(file_path)

    def initialize(self) -> None:
        """Create the data directory and an empty document if missing."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists():
            self._write_document({"appointments": []})
            logger.info(f"Calendar data file initialized at {self.file_path}")

    def _load(self) -> List[Appointment]:
        if not self.file_path.exists():
            return []

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load calendar data from {self.file_path}: {e}")
            return []

        records = document.get("appointments") if isinstance(document, dict) else None
        if not isinstance(records, list):
            logger.error(f"Calendar data in {self.file_path} has no appointments list")
            return []

        appointments = []
        for record in records:
            try:
                appointments.append(Appointment.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed appointment record {record!r}: {e}")
        return appointments

    def _save(self, appointments: List[Appointment]) -> None:
        self._write_document({"appointments": [a.to_dict() for a in appointments]})

    def _write_document(self, document: Dict[str, Any]) -> None:
        tmp_path = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            logger.error(f"Failed to save calendar data to {self.file_path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreError(f"Could not write calendar data: {e}") from e
