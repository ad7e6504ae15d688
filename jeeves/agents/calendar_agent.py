"""
Calendar Agent for JeevesBot
Handles all appointment operations: parsing input, adding, listing,
range views and deleting.

Both the Telegram bot and the REST API go through this agent, so input
validation and error wording are identical in chat and on the web.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from .base_agent import BaseAgent, AgentResponse
from ..core.appointment_parser import parse_appointment_input, parse_appointment_fields
from ..core.formatting import format_appointments
from ..core.models import Appointment
from ..core.store import CalendarStore, StoreError


class CalendarAgent(BaseAgent):
    """
    Specialized agent for appointment management.

    Handles intents:
    - add_appointment: Parse and store a new appointment
    - parse_appointment: Parse input without storing it
    - list_appointments: All appointments in chronological order
    - list_upcoming: Appointments from today through the next N-1 days
    - list_today: Today's appointments
    - delete_appointment: Delete by 1-based position in the list
    - delete_appointment_by_id: Delete by appointment id
    """

    INTENTS = [
        "add_appointment",
        "parse_appointment",
        "list_appointments",
        "list_upcoming",
        "list_today",
        "delete_appointment",
        "delete_appointment_by_id",
    ]

    DEFAULT_UPCOMING_DAYS = 7

    def __init__(self, store: CalendarStore, config):
        """Initialize the Calendar Agent."""
        super().__init__(store, config, "calendar")

    def get_supported_intents(self) -> List[str]:
        """Return list of supported intents."""
        return self.INTENTS

    def can_handle(self, intent: str, context: Dict[str, Any]) -> bool:
        """Check if this agent can handle the given intent."""
        return intent in self.INTENTS

    def process(self, intent: str, context: Dict[str, Any]) -> AgentResponse:
        """
        Process a calendar-related intent.

        Args:
            intent: One of the supported calendar intents
            context: Request context with parameters

        Returns:
            AgentResponse with operation result
        """
        self.log_action(f"processing_{intent}", {"context_keys": list(context.keys())})

        handlers = {
            "add_appointment": self._handle_add_appointment,
            "parse_appointment": self._handle_parse_appointment,
            "list_appointments": self._handle_list_appointments,
            "list_upcoming": self._handle_list_upcoming,
            "list_today": self._handle_list_today,
            "delete_appointment": self._handle_delete_appointment,
            "delete_appointment_by_id": self._handle_delete_appointment_by_id,
        }

        handler = handlers.get(intent)
        if not handler:
            return AgentResponse.error(f"Unknown intent: {intent}")

        try:
            return handler(context)
        except StoreError as e:
            self.logger.error(f"Store failure while processing {intent}: {e}")
            return AgentResponse.error(
                f"Failed to {intent.replace('_', ' ')}. Please try again.",
                data={"error_code": "store_error"}
            )

    # =========================================================================
    # Intent Handlers
    # =========================================================================

    def _handle_add_appointment(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Handle appointment creation.

        Supports two modes:
        1. Raw text: "DATE. TIME. Contact Name. Category" in context["text"]
        2. Structured: date, time, contact_name, category fields

        Both modes apply the same date/time format rules.
        """
        parse_response = self._parse(context)
        if not parse_response.success:
            return parse_response

        draft = parse_response.data["draft"]
        appointment = self.store.add(draft)

        return AgentResponse.ok(
            message="Appointment added successfully",
            data={"appointment": appointment.to_dict()},
            suggestions=["View all appointments", "View the next 7 days"]
        )

    def _handle_parse_appointment(self, context: Dict[str, Any]) -> AgentResponse:
        """Parse input and return the canonical draft; nothing is stored."""
        parse_response = self._parse(context)
        if not parse_response.success:
            return parse_response

        draft = parse_response.data["draft"]
        return AgentResponse.ok(
            message="Appointment input parsed",
            data={"appointment": draft.to_dict()}
        )

    def _handle_list_appointments(self, context: Dict[str, Any]) -> AgentResponse:
        appointments = self.store.list()
        return self._list_response(appointments, "No appointments found")

    def _handle_list_upcoming(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Appointments in the window [today, today + days - 1].

        Context params:
            days (int): Window length including today (default from
                preferences, normally 7)
            today (date): Override for the current day
        """
        days = int(context.get("days") or self.get_config_value(
            "upcoming_days", default=self.DEFAULT_UPCOMING_DAYS
        ))
        days = max(days, 1)
        today = self._today(context)
        appointments = self.store.list_upcoming(days=days, today=today)

        response = self._list_response(
            appointments, f"No appointments for the next {days} days",
            positions=self.store.positions(),
        )
        response.data["date_range"] = {
            "start": today.strftime("%d-%m-%Y"),
            "end": (today + timedelta(days=days - 1)).strftime("%d-%m-%Y"),
        }
        return response

    def _handle_list_today(self, context: Dict[str, Any]) -> AgentResponse:
        today = self._today(context)
        appointments = self.store.list_for_day(today)
        return self._list_response(appointments, "No appointments for today",
                                   positions=self.store.positions())

    def _handle_delete_appointment(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Delete by position in the chronological list.

        Context params:
            position (int): 1-based number as shown by list_appointments
        """
        validation = self.validate_required_params(context, ["position"])
        if validation:
            return validation

        try:
            position = int(context["position"])
        except (TypeError, ValueError):
            return AgentResponse.error(
                f"Invalid number: {context['position']}. Please provide a valid number.",
                data={"error_code": "invalid_input"}
            )

        result = self.store.delete_at_position(position)
        if not result.success:
            return AgentResponse.error(result.error, data={"error_code": "invalid_position"})

        return AgentResponse.ok(
            message=f"Appointment #{position} has been removed from your calendar",
            data={
                "deleted_appointment": result.deleted_appointment.to_dict(),
                "position": position,
            }
        )

    def _handle_delete_appointment_by_id(self, context: Dict[str, Any]) -> AgentResponse:
        """
        Delete by id: the id is translated to its current position first.

        Context params:
            appointment_id (str): Id of the appointment to delete
        """
        validation = self.validate_required_params(context, ["appointment_id"])
        if validation:
            return validation

        position = self.store.position_of(str(context["appointment_id"]))
        if position is None:
            return AgentResponse.error(
                "Appointment not found",
                data={"error_code": "not_found"}
            )

        return self._handle_delete_appointment({"position": position})

    # =========================================================================
    # Helpers
    # =========================================================================

    def _parse(self, context: Dict[str, Any]) -> AgentResponse:
        """Run the parser on raw text or structured fields."""
        if context.get("text") is not None:
            result = parse_appointment_input(context["text"])
        else:
            result = parse_appointment_fields(
                context.get("date"),
                context.get("time"),
                context.get("contact_name"),
                context.get("category"),
            )

        if not result.success:
            return AgentResponse.error(result.error, data={"error_code": "invalid_input"})
        return AgentResponse.ok("parsed", data={"draft": result.appointment})

    def _list_response(self, appointments: List[Appointment], empty_message: str,
                       positions: Optional[Dict[str, int]] = None) -> AgentResponse:
        data = {
            "appointments": [a.to_dict() for a in appointments],
            "count": len(appointments),
            "formatted": format_appointments(appointments, positions),
        }
        if not appointments:
            return AgentResponse.ok(message=empty_message, data=data)
        return AgentResponse.ok(message=f"Found {len(appointments)} appointment(s)", data=data)

    def _today(self, context: Dict[str, Any]) -> date:
        """Current day in the configured timezone, unless the context pins it."""
        today: Optional[date] = context.get("today")
        if today is not None:
            return today
        return datetime.now(self.config.get_timezone()).date()
