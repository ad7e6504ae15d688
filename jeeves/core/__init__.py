"""
Core module for JeevesBot
Contains configuration, models, date/time normalization, the appointment
parser and the calendar store.
"""

from .config import Config
from .models import Appointment, AppointmentDraft, ParseResult, DeleteResult
from .appointment_parser import parse_appointment_input, parse_appointment_fields
from .store import CalendarStore, JsonFileCalendarStore, InMemoryCalendarStore, StoreError
from .memory import ConversationMemory

__all__ = [
    'Config',
    'Appointment',
    'AppointmentDraft',
    'ParseResult',
    'DeleteResult',
    'parse_appointment_input',
    'parse_appointment_fields',
    'CalendarStore',
    'JsonFileCalendarStore',
    'InMemoryCalendarStore',
    'StoreError',
    'ConversationMemory',
]
