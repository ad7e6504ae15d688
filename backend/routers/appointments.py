"""
Appointment API endpoints.

Provides list, range view, create, delete and parse operations, all
delegated to the CalendarAgent so the rules match the Telegram bot.
Every route requires an authenticated user.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_user
from backend.dependencies import get_calendar_agent
from backend.schemas import (
    AgentResponseSchema,
    AppointmentCreate,
    AppointmentListResponse,
    AppointmentParseRequest,
    AppointmentResponse,
)
from jeeves.agents import AgentResponse, CalendarAgent

router = APIRouter(
    prefix="/api/appointments",
    tags=["appointments"],
    dependencies=[Depends(require_user)],
)

ERROR_STATUS = {
    "invalid_input": 400,
    "invalid_position": 400,
    "not_found": 404,
    "store_error": 500,
}


def _raise_for_error(response: AgentResponse) -> None:
    """Translate a failed AgentResponse into an HTTPException."""
    if response.success:
        return
    status_code = ERROR_STATUS.get(response.error_code, 400)
    raise HTTPException(status_code=status_code, detail=response.message)


def _to_list_response(appointments: List[dict]) -> AppointmentListResponse:
    return AppointmentListResponse(
        appointments=[AppointmentResponse(**a) for a in appointments],
        total=len(appointments),
    )


def _to_schema(response: AgentResponse) -> AgentResponseSchema:
    return AgentResponseSchema(
        success=response.success,
        message=response.message,
        data=response.data,
        suggestions=response.suggestions,
    )


@router.get("", response_model=AppointmentListResponse)
async def list_appointments(agent: CalendarAgent = Depends(get_calendar_agent)):
    """List all appointments in chronological order."""
    response = agent.process("list_appointments", {})
    _raise_for_error(response)
    return _to_list_response(response.data["appointments"])


@router.get("/upcoming", response_model=AgentResponseSchema)
async def list_upcoming(
    days: int = Query(7, ge=1, le=366, description="Window length including today"),
    agent: CalendarAgent = Depends(get_calendar_agent),
):
    """
    Appointments from today through the next days-1 days.

    data contains appointments, count, formatted and date_range.
    """
    response = agent.process("list_upcoming", {"days": days})
    _raise_for_error(response)
    return _to_schema(response)


@router.post("", response_model=AgentResponseSchema, status_code=201)
async def create_appointment(
    appointment: AppointmentCreate,
    agent: CalendarAgent = Depends(get_calendar_agent),
):
    """Create an appointment; date and time follow the parser's format rules."""
    response = agent.process("add_appointment", {
        "date": appointment.date,
        "time": appointment.time,
        "contact_name": appointment.contact_name,
        "category": appointment.category,
    })
    _raise_for_error(response)
    return _to_schema(response)


@router.post("/parse", response_model=AgentResponseSchema)
async def parse_appointment(
    request: AppointmentParseRequest,
    agent: CalendarAgent = Depends(get_calendar_agent),
):
    """Parse raw input without storing anything."""
    response = agent.process("parse_appointment", {"text": request.input})
    _raise_for_error(response)
    return _to_schema(response)


@router.delete("/{appointment_id}", response_model=AgentResponseSchema)
async def delete_appointment(
    appointment_id: str,
    agent: CalendarAgent = Depends(get_calendar_agent),
):
    """Delete an appointment by id."""
    response = agent.process("delete_appointment_by_id", {"appointment_id": appointment_id})
    _raise_for_error(response)
    return _to_schema(response)
