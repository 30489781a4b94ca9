# academy/services/admission.py
"""
Admission / capacity control for new reservations.

Onsite reservations consume a seat in a Schedule slot and count against the
student's daily quota; online questions do neither. Checks run in a fixed
order, cheapest and most restrictive first:

    schedule given -> daily quota -> schedule exists -> capacity -> duplicate

``create_reservation`` runs the checks and the insert in one transaction with
the user row and then the schedule row locked, so concurrent requests cannot
both pass the capacity or quota check on stale counts.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from academy.core import clock
from academy.models.reservation import (
    STATUS_PENDING,
    TYPE_ONLINE,
    TYPE_ONSITE,
    Reservation,
)
from academy.models.schedule import Schedule
from academy.models.user import User
from academy.schemas.reservation import ReservationCreate
from academy.services import errors, store
from academy.services.errors import Rejection

logger = logging.getLogger(__name__)

DAILY_ONSITE_LIMIT = 3


def try_admit(
    db: Session,
    *,
    user_id: int,
    type: str,
    schedule_id: int | None,
    now: datetime | None = None,
) -> Union[Optional[Schedule], Rejection]:
    """
    Decide whether a reservation may be created; performs no writes.

    Returns the target Schedule for an admitted onsite request, ``None`` for an
    admitted online request, or a Rejection.
    """
    if type == TYPE_ONLINE:
        if schedule_id is not None:
            return errors.SCHEDULE_NOT_ALLOWED
        return None

    if schedule_id is None:
        return errors.SCHEDULE_REQUIRED

    now = now or clock.now()
    if store.get_daily_onsite_count(db, user_id, now) >= DAILY_ONSITE_LIMIT:
        return errors.DAILY_LIMIT

    schedule = store.lock_schedule(db, schedule_id)
    if schedule is None:
        return errors.SCHEDULE_NOT_FOUND

    if store.get_reservation_count(db, schedule_id) >= schedule.capacity:
        return errors.SLOT_FULL

    if store.check_user_reserved(db, user_id, schedule_id):
        return errors.DUPLICATE_RESERVATION

    return schedule


def create_reservation(
    db: Session,
    *,
    user: User,
    obj_in: ReservationCreate,
    now: datetime | None = None,
) -> Union[Reservation, Rejection]:
    """
    Admit and persist a reservation. Status always starts as ``pending`` and
    teacher feedback as empty, whatever the client sent.
    """
    now = now or clock.now()

    if obj_in.type == TYPE_ONSITE:
        # user first, then schedule (inside try_admit): one lock order everywhere
        store.lock_user(db, user.id)

    admitted = try_admit(
        db,
        user_id=user.id,
        type=obj_in.type,
        schedule_id=obj_in.schedule_id,
        now=now,
    )
    if isinstance(admitted, Rejection):
        db.rollback()
        logger.info(
            "Reservation rejected for user %s (%s, schedule=%s): %s",
            user.id, obj_in.type, obj_in.schedule_id, admitted.code,
        )
        return admitted

    try:
        reservation = store.create_reservation(
            db,
            user_id=user.id,
            schedule_id=obj_in.schedule_id if obj_in.type == TYPE_ONSITE else None,
            type=obj_in.type,
            content=obj_in.content,
            photo_urls=obj_in.photo_urls,
            status=STATUS_PENDING,
            teacher_feedback=None,
            created_at=now,
        )
    except store.DuplicateError:
        db.rollback()
        logger.info(
            "Duplicate onsite reservation for user %s schedule %s caught by index",
            user.id, obj_in.schedule_id,
        )
        return errors.DUPLICATE_RESERVATION

    db.commit()
    db.refresh(reservation)
    logger.info(
        "Created %s reservation %s for user %s", reservation.type, reservation.id, user.id
    )
    return reservation
