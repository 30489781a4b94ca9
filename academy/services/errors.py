# academy/services/errors.py
"""
Business-rule outcomes.

Expected failures (slot full, quota reached, not on the roster, ...) are
returned as :class:`Rejection` values instead of raised, so callers branch on
``isinstance(result, Rejection)``. Only infrastructure problems raise.
"""
from dataclasses import dataclass
from enum import Enum


class RejectionKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


_STATUS_CODES = {
    RejectionKind.VALIDATION: 400,
    RejectionKind.UNAUTHORIZED: 401,
    RejectionKind.FORBIDDEN: 403,
    RejectionKind.NOT_FOUND: 404,
    RejectionKind.CONFLICT: 409,
}


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind
    code: str
    message: str

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def as_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


def validation(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.VALIDATION, code, message)


def unauthorized(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.UNAUTHORIZED, code, message)


def forbidden(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.FORBIDDEN, code, message)


def not_found(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.NOT_FOUND, code, message)


def conflict(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.CONFLICT, code, message)


# Rejections the API produces; the codes are part of the response body.
SCHEDULE_REQUIRED = validation("schedule_required", "A schedule is required for onsite reservations.")
SCHEDULE_NOT_ALLOWED = validation(
    "schedule_not_allowed", "Online reservations cannot reference a schedule."
)
DAILY_LIMIT = forbidden("daily_limit", "Daily onsite limit of 3 reservations reached.")
SCHEDULE_NOT_FOUND = not_found("schedule_not_found", "Schedule not found.")
SLOT_FULL = conflict("slot_full", "This time slot is full.")
DUPLICATE_RESERVATION = conflict(
    "duplicate_reservation", "You already have a reservation for this time slot."
)

ALREADY_REGISTERED = conflict("already_registered", "This phone number is already registered.")
NOT_ON_ROSTER = forbidden("not_on_roster", "This phone number is not on the student roster.")

UNAUTHENTICATED = unauthorized("unauthenticated", "Not authenticated.")
INVALID_CREDENTIALS = unauthorized("invalid_credentials", "Incorrect phone number or password.")
TEACHER_REQUIRED = forbidden("teacher_only", "Teacher role required.")

RESERVATION_NOT_FOUND = not_found("reservation_not_found", "Reservation not found.")
NOT_OWNER = forbidden("not_owner", "Not allowed to modify this reservation.")
TEACHER_ONLY = forbidden("teacher_only", "Only a teacher can change status or feedback.")
NOT_EDITABLE = conflict("not_editable", "Only pending reservations can be edited.")
FEEDBACK_REQUIRED = validation("feedback_required", "An answer needs feedback text.")
