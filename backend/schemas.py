"""
Pydantic schemas for API request/response validation.

Field names on the wire are camelCase (contactName, createdAt) to match
the stored JSON documents; Python code uses snake_case through aliases.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Base Response Schemas
# =============================================================================

class AgentResponseSchema(BaseModel):
    """Standard response from any agent operation."""
    model_config = ConfigDict(from_attributes=True)

    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    suggestions: Optional[List[str]] = None


# =============================================================================
# Appointment Schemas
# =============================================================================

class AppointmentCreate(BaseModel):
    """
    Request body for creating an appointment.

    date and time accept every input format the parser accepts
    (e.g. "24.12.25", "9.30") and are stored in canonical form.
    """
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    contact_name: str = Field(..., alias="contactName", min_length=1)
    category: str = Field(..., min_length=1)


class AppointmentParseRequest(BaseModel):
    """Raw "DATE. TIME. Contact Name. Category" input to parse."""
    input: str


class AppointmentResponse(BaseModel):
    """Stored appointment returned from API."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: str  # DD-MM-YYYY
    time: str  # HH:MM
    contact_name: str = Field(..., alias="contactName")
    category: str
    created_at: str = Field(..., alias="createdAt")


class AppointmentListResponse(BaseModel):
    """List of appointments in chronological order."""
    appointments: List[AppointmentResponse]
    total: int
