# academy/db/seed.py
"""
Reference data: the student roster, the weekly slots and the teacher account.

``ensure_seed_data`` is called once from application startup. Each group is
inserted only when missing, so running it again is harmless.
"""
import logging

from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.core.security import get_password_hash
from academy.models.schedule import DEFAULT_CAPACITY
from academy.models.user import ROLE_TEACHER
from academy.services import store

logger = logging.getLogger(__name__)

ROSTER = [
    {"name": "Hong Gildong", "phone_number": "1234567890", "seat_number": 1},
    {"name": "Kim Cheolsu", "phone_number": "0987654321", "seat_number": 24},
    {"name": "Lee Younghee", "phone_number": "1112223333", "seat_number": 5},
]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
PERIODS = [1, 2, 3]


def _seed_roster(db: Session) -> int:
    if store.count_allowed_students(db) > 0:
        return 0
    for entry in ROSTER:
        store.create_allowed_student(db, **entry)
    return len(ROSTER)


def _seed_schedules(db: Session) -> int:
    existing = {(s.day_of_week, s.period_number) for s in store.get_schedules(db)}
    created = 0
    for day in WEEKDAYS:
        for period in PERIODS:
            if (day, period) not in existing:
                store.create_schedule(
                    db, day_of_week=day, period_number=period, capacity=DEFAULT_CAPACITY
                )
                created += 1
    return created


def _seed_teacher(db: Session) -> int:
    if store.get_user_by_phone(db, settings.SEED_TEACHER_PHONE) is not None:
        return 0
    store.create_user(
        db,
        phone_number=settings.SEED_TEACHER_PHONE,
        password_hash=get_password_hash(settings.SEED_TEACHER_PASSWORD),
        name=settings.SEED_TEACHER_NAME,
        seat_number=None,
        role=ROLE_TEACHER,
    )
    return 1


def ensure_seed_data(db: Session) -> dict:
    created = {}
    for name, seed_group in (
        ("allowed_students", _seed_roster),
        ("schedules", _seed_schedules),
        ("teacher", _seed_teacher),
    ):
        # 每组单独提交；另一个 worker 抢先写入时跳过该组
        try:
            created[name] = seed_group(db)
            db.commit()
        except store.DuplicateError:
            db.rollback()
            logger.info(f"Seed group {name} already inserted by another process")
            created[name] = 0

    if any(created.values()):
        logger.info(f"Seed data inserted: {created}")
    return created
