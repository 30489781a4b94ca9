# academy/services/lifecycle.py
"""
Who may change a reservation, and how.

Teachers drive the status machine and write feedback; the owning student may
only edit content and photos, and only while the reservation is pending.

Teacher transitions::

    pending   -> confirmed | answered | cancelled
    answered  -> confirmed | answered | cancelled
    confirmed -> confirmed | cancelled
    cancelled -> cancelled
"""
from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from academy.models.reservation import (
    STATUS_ANSWERED,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    Reservation,
)
from academy.models.user import User
from academy.schemas.reservation import StudentUpdate, TeacherUpdate
from academy.services import errors, store
from academy.services.errors import Rejection

logger = logging.getLogger(__name__)

CANCELLED_FEEDBACK = "Reservation cancelled by teacher."

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_ANSWERED, STATUS_CANCELLED}),
    STATUS_ANSWERED: frozenset({STATUS_CONFIRMED, STATUS_ANSWERED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_CONFIRMED, STATUS_CANCELLED}),
    STATUS_CANCELLED: frozenset({STATUS_CANCELLED}),
}

_TEACHER_FIELDS = {"status", "teacherFeedback", "teacher_feedback"}


def authorize(
    db: Session, *, reservation_id: int, requester: User
) -> Union[Reservation, Rejection]:
    reservation = store.get_reservation(db, reservation_id)
    if reservation is None:
        return errors.RESERVATION_NOT_FOUND
    if requester.is_teacher or reservation.user_id == requester.id:
        return reservation
    return errors.NOT_OWNER


def _first_error(exc: ValidationError) -> Rejection:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ()))
    message = f"{field}: {err['msg']}" if field else err["msg"]
    return errors.validation("invalid_payload", message)


def _apply_teacher_update(
    reservation: Reservation, update: TeacherUpdate
) -> Union[dict[str, Any], Rejection]:
    changes: dict[str, Any] = {}
    feedback = update.teacher_feedback

    if update.status is not None:
        allowed = ALLOWED_TRANSITIONS[reservation.status]
        if update.status not in allowed:
            return errors.conflict(
                "invalid_transition",
                f"Cannot move a {reservation.status} reservation to {update.status}.",
            )
        changes["status"] = update.status
    elif reservation.status == STATUS_CANCELLED and feedback is not None:
        return errors.conflict(
            "invalid_transition", "A cancelled reservation cannot be changed."
        )

    if update.status == STATUS_ANSWERED:
        answer = feedback if feedback is not None else reservation.teacher_feedback
        if not answer or not answer.strip():
            return errors.FEEDBACK_REQUIRED

    if (
        update.status == STATUS_CANCELLED
        and reservation.status != STATUS_CANCELLED
        and not (feedback and feedback.strip())
    ):
        feedback = CANCELLED_FEEDBACK

    if feedback is not None:
        changes["teacher_feedback"] = feedback
    return changes


def _apply_student_update(
    reservation: Reservation, update: StudentUpdate
) -> Union[dict[str, Any], Rejection]:
    if reservation.status != STATUS_PENDING:
        return errors.NOT_EDITABLE
    return update.model_dump(exclude_unset=True, exclude_none=True)


def update_reservation(
    db: Session,
    *,
    reservation_id: int,
    requester: User,
    payload: dict[str, Any],
) -> Union[Reservation, Rejection]:
    """
    PATCH a reservation. ``payload`` is the raw JSON body; it is validated here
    against the update shape of the requester's role.
    """
    reservation = authorize(db, reservation_id=reservation_id, requester=requester)
    if isinstance(reservation, Rejection):
        return reservation

    try:
        if requester.is_teacher:
            changes = _apply_teacher_update(reservation, TeacherUpdate.model_validate(payload))
        else:
            if _TEACHER_FIELDS & payload.keys():
                logger.info(
                    "User %s tried to set teacher fields on reservation %s",
                    requester.id, reservation_id,
                )
                return errors.TEACHER_ONLY
            changes = _apply_student_update(reservation, StudentUpdate.model_validate(payload))
    except ValidationError as e:
        return _first_error(e)

    if isinstance(changes, Rejection):
        return changes

    if changes:
        reservation = store.update_reservation(db, reservation_id, **changes)
        db.commit()
        db.refresh(reservation)
        logger.info(
            "Reservation %s updated by %s %s: %s",
            reservation_id, requester.role, requester.id, sorted(changes),
        )
    return reservation


def delete_reservation(
    db: Session, *, reservation_id: int, requester: User
) -> Union[None, Rejection]:
    reservation = authorize(db, reservation_id=reservation_id, requester=requester)
    if isinstance(reservation, Rejection):
        return reservation
    store.delete_reservation(db, reservation_id)
    db.commit()
    logger.info("Reservation %s deleted by %s %s", reservation_id, requester.role, requester.id)
    return None
