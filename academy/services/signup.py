# academy/services/signup.py
"""Roster-gated signup, login and roster maintenance."""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from academy.core.security import get_password_hash, verify_password
from academy.models.allowed_student import AllowedStudent
from academy.models.user import ROLE_STUDENT, User
from academy.schemas.allowed_student import AllowedStudentCreate
from academy.services import errors, store
from academy.services.errors import Rejection

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[^0-9A-Za-z]")


def normalize_phone(raw: str) -> str:
    """'010-1234-5678' / '010 1234 5678' -> '01012345678'"""
    return _SEPARATORS.sub("", raw)


def try_signup(
    db: Session,
    *,
    phone_number: str,
    password: str,
) -> Union[User, Rejection]:
    phone = normalize_phone(phone_number)

    if store.get_user_by_phone(db, phone) is not None:
        return errors.ALREADY_REGISTERED

    roster_entry = store.get_allowed_student(db, phone)
    if roster_entry is None:
        logger.info("Signup refused for %s: not on roster", phone)
        return errors.NOT_ON_ROSTER

    try:
        user = store.create_user(
            db,
            phone_number=phone,
            password_hash=get_password_hash(password),
            name=roster_entry.name,
            seat_number=roster_entry.seat_number,
            role=ROLE_STUDENT,
        )
    except store.DuplicateError:
        # registered concurrently between the check and the insert
        db.rollback()
        return errors.ALREADY_REGISTERED

    db.commit()
    db.refresh(user)
    logger.info("Registered student %s (seat %s)", user.id, user.seat_number)
    return user


def authenticate(db: Session, phone_number: str, password: str) -> Optional[User]:
    user = store.get_user_by_phone(db, normalize_phone(phone_number))
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def list_roster(db: Session) -> List[AllowedStudent]:
    return store.list_allowed_students(db)


def add_to_roster(
    db: Session, *, obj_in: AllowedStudentCreate
) -> Union[AllowedStudent, Rejection]:
    phone = normalize_phone(obj_in.phone_number)
    if not phone:
        return errors.validation("invalid_phone", "Phone number has no digits.")
    try:
        entry = store.create_allowed_student(
            db, name=obj_in.name, phone_number=phone, seat_number=obj_in.seat_number
        )
    except store.DuplicateError:
        db.rollback()
        return errors.conflict("already_on_roster", "This phone number is already on the roster.")
    db.commit()
    db.refresh(entry)
    return entry
