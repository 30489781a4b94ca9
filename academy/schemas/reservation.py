# academy/schemas/reservation.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, Field

from academy.schemas.base import CamelModel

ReservationType = Literal["onsite", "online"]
ReservationStatus = Literal["pending", "confirmed", "answered", "cancelled"]


class ReservationCreate(CamelModel):
    schedule_id: int | None = None
    type: ReservationType
    content: str | None = None
    photo_urls: list[str] = Field(default_factory=list)


class TeacherUpdate(CamelModel):
    """PATCH body accepted from a teacher. ``pending`` cannot be set."""

    model_config = ConfigDict(extra="forbid")

    status: Literal["confirmed", "answered", "cancelled"] | None = None
    teacher_feedback: str | None = None


class StudentUpdate(CamelModel):
    """PATCH body accepted from the owning student."""

    model_config = ConfigDict(extra="forbid")

    content: str | None = None
    photo_urls: list[str] | None = None


class ReservationPublic(CamelModel):
    id: int
    user_id: int
    schedule_id: int | None = None
    type: ReservationType
    content: str | None = None
    photo_urls: list[str] = Field(default_factory=list)
    teacher_feedback: str | None = None
    status: ReservationStatus
    created_at: datetime


class ReservationWithDetails(ReservationPublic):
    """Reservation joined with owner and (for onsite) slot display fields."""

    student_name: str
    seat_number: int | None = None
    day: str | None = None
    period: int | None = None


class DeleteResult(CamelModel):
    success: bool = True
