# academy/services/store.py
"""
Data access for the four record kinds.

Functions here flush but never commit; the calling service owns the
transaction so that checks and writes can share one.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core import clock
from academy.models.allowed_student import AllowedStudent
from academy.models.reservation import TYPE_ONSITE, Reservation
from academy.models.schedule import Schedule
from academy.models.user import User
from academy.schemas.reservation import ReservationPublic, ReservationWithDetails

# Monday first; labels are stored as entered by the seed / admin
DAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class StoreError(Exception):
    pass


class DuplicateError(StoreError):
    pass


class ReservationNotFound(StoreError):
    pass


# --- users -----------------------------------------------------------------

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_phone(db: Session, phone_number: str) -> Optional[User]:
    return db.query(User).filter(User.phone_number == phone_number).first()


def lock_user(db: Session, user_id: int) -> Optional[User]:
    return (
        db.query(User)
        .filter(User.id == user_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def create_user(
    db: Session,
    *,
    phone_number: str,
    password_hash: str,
    name: str,
    seat_number: int | None,
    role: str,
) -> User:
    user = User(
        phone_number=phone_number,
        password_hash=password_hash,
        name=name,
        seat_number=seat_number,
        role=role,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as e:
        raise DuplicateError(f"user with phone {phone_number} already exists") from e
    return user


# --- roster ----------------------------------------------------------------

def get_allowed_student(db: Session, phone_number: str) -> Optional[AllowedStudent]:
    return (
        db.query(AllowedStudent)
        .filter(AllowedStudent.phone_number == phone_number)
        .first()
    )


def list_allowed_students(db: Session) -> List[AllowedStudent]:
    return db.query(AllowedStudent).order_by(AllowedStudent.seat_number.asc()).all()


def count_allowed_students(db: Session) -> int:
    return db.query(func.count(AllowedStudent.id)).scalar()


def create_allowed_student(
    db: Session, *, name: str, phone_number: str, seat_number: int
) -> AllowedStudent:
    entry = AllowedStudent(name=name, phone_number=phone_number, seat_number=seat_number)
    db.add(entry)
    try:
        db.flush()
    except IntegrityError as e:
        raise DuplicateError(f"roster entry for {phone_number} already exists") from e
    return entry


# --- schedules -------------------------------------------------------------

def get_schedule(db: Session, schedule_id: int) -> Optional[Schedule]:
    return db.get(Schedule, schedule_id)


def lock_schedule(db: Session, schedule_id: int) -> Optional[Schedule]:
    """SELECT ... FOR UPDATE on the slot; held until the transaction ends."""
    return (
        db.query(Schedule)
        .filter(Schedule.id == schedule_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def get_schedules(db: Session) -> List[Schedule]:
    schedules = db.query(Schedule).all()

    def sort_key(s: Schedule):
        day = DAY_ORDER.index(s.day_of_week) if s.day_of_week in DAY_ORDER else len(DAY_ORDER)
        return day, s.period_number, s.id

    return sorted(schedules, key=sort_key)


def create_schedule(
    db: Session, *, day_of_week: str, period_number: int, capacity: int
) -> Schedule:
    schedule = Schedule(day_of_week=day_of_week, period_number=period_number, capacity=capacity)
    db.add(schedule)
    try:
        db.flush()
    except IntegrityError as e:
        raise DuplicateError(f"schedule {day_of_week} period {period_number} already exists") from e
    return schedule


# --- counts ----------------------------------------------------------------

def get_reservation_count(db: Session, schedule_id: int) -> int:
    """Onsite reservations holding a seat in the slot."""
    return (
        db.query(func.count(Reservation.id))
        .filter(
            Reservation.schedule_id == schedule_id,
            Reservation.type == TYPE_ONSITE,
        )
        .scalar()
    )


def get_reservation_counts(db: Session) -> dict[int, int]:
    rows = (
        db.query(Reservation.schedule_id, func.count(Reservation.id))
        .filter(Reservation.type == TYPE_ONSITE)
        .group_by(Reservation.schedule_id)
        .all()
    )
    return {schedule_id: count for schedule_id, count in rows}


def get_daily_onsite_count(db: Session, user_id: int, day: date | datetime) -> int:
    start, end = clock.day_bounds(day)
    return (
        db.query(func.count(Reservation.id))
        .filter(
            Reservation.user_id == user_id,
            Reservation.type == TYPE_ONSITE,
            Reservation.created_at >= start,
            Reservation.created_at <= end,
        )
        .scalar()
    )


def check_user_reserved(db: Session, user_id: int, schedule_id: int) -> bool:
    existing = (
        db.query(Reservation.id)
        .filter(
            Reservation.user_id == user_id,
            Reservation.schedule_id == schedule_id,
            Reservation.type == TYPE_ONSITE,
        )
        .first()
    )
    return existing is not None


def get_user_reserved_schedule_ids(db: Session, user_id: int) -> set[int]:
    rows = (
        db.query(Reservation.schedule_id)
        .filter(Reservation.user_id == user_id, Reservation.type == TYPE_ONSITE)
        .all()
    )
    return {schedule_id for (schedule_id,) in rows}


# --- reservations ----------------------------------------------------------

def create_reservation(
    db: Session,
    *,
    user_id: int,
    schedule_id: int | None,
    type: str,
    content: str | None,
    photo_urls: list[str],
    status: str,
    teacher_feedback: str | None,
    created_at: datetime | None = None,
) -> Reservation:
    reservation = Reservation(
        user_id=user_id,
        schedule_id=schedule_id,
        type=type,
        content=content,
        photo_urls=list(photo_urls),
        status=status,
        teacher_feedback=teacher_feedback,
        created_at=created_at or clock.now(),
    )
    db.add(reservation)
    try:
        db.flush()
    except IntegrityError as e:
        raise DuplicateError(
            f"user {user_id} already holds schedule {schedule_id}"
        ) from e
    return reservation


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return db.get(Reservation, reservation_id)


def update_reservation(db: Session, reservation_id: int, **fields) -> Reservation:
    reservation = get_reservation(db, reservation_id)
    if reservation is None:
        raise ReservationNotFound(f"reservation {reservation_id} not found")
    for field, value in fields.items():
        setattr(reservation, field, value)
    db.flush()
    return reservation


def delete_reservation(db: Session, reservation_id: int) -> None:
    reservation = get_reservation(db, reservation_id)
    if reservation is not None:
        db.delete(reservation)
        db.flush()


def _details_query(db: Session):
    return (
        db.query(
            Reservation,
            User.name,
            User.seat_number,
            Schedule.day_of_week,
            Schedule.period_number,
        )
        .join(User, Reservation.user_id == User.id)
        .outerjoin(Schedule, Reservation.schedule_id == Schedule.id)
    )


def _with_details(row) -> ReservationWithDetails:
    reservation, student_name, seat_number, day, period = row
    return ReservationWithDetails(
        **ReservationPublic.model_validate(reservation).model_dump(),
        student_name=student_name,
        seat_number=seat_number,
        day=day,
        period=period,
    )


def get_user_reservations(db: Session, user_id: int) -> List[ReservationWithDetails]:
    rows = (
        _details_query(db)
        .filter(Reservation.user_id == user_id)
        .order_by(Reservation.created_at.desc(), Reservation.id.desc())
        .all()
    )
    return [_with_details(row) for row in rows]


def get_reservations_for_teacher(
    db: Session,
    *,
    day: str | None = None,
    period: int | None = None,
) -> List[ReservationWithDetails]:
    query = _details_query(db)
    if day is not None:
        query = query.filter(Schedule.day_of_week == day)
    if period is not None:
        query = query.filter(Schedule.period_number == period)
    rows = query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).all()
    return [_with_details(row) for row in rows]
