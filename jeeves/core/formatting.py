"""
Plain-text rendering of appointments for chat replies and reminders
"""

from typing import Dict, List, Optional

from .models import Appointment
from .datetime_formats import format_date, format_time


EMPTY_MESSAGE = "No appointments found."


def format_appointment(appointment: Appointment) -> str:
    """e.g. 'Friday 21-11-2025 14:30 - Peter van der Meer (Ghostin 06)'"""
    return (
        f"{appointment.weekday} {format_date(appointment.date)} "
        f"{format_time(appointment.time)} - "
        f"{appointment.contact_name} ({appointment.category})"
    )


def format_appointments(appointments: List[Appointment],
                        positions: Optional[Dict[str, int]] = None) -> str:
    """
    Numbered list; the numbers are the positions accepted by /delcal.

    A filtered view passes positions (appointment id -> position in the
    full chronological list) so its numbers stay valid for /delcal.
    """
    if not appointments:
        return EMPTY_MESSAGE

    lines = []
    for index, appointment in enumerate(appointments, start=1):
        number = positions[appointment.id] if positions else index
        lines.append(f"{number}. {format_appointment(appointment)}")
    return "\n".join(lines)
