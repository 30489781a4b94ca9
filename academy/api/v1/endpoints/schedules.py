# academy/api/v1/endpoints/schedules.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.core.security import get_current_user_optional
from academy.db.session import get_db
from academy.models.user import User
from academy.schemas.schedule import ScheduleWithCount
from academy.services import store

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("", response_model=List[ScheduleWithCount])
def list_schedules(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """
    All slots with their onsite head count; ``isReservedByUser`` is false for
    anonymous callers.
    """
    counts = store.get_reservation_counts(db)
    reserved = (
        store.get_user_reserved_schedule_ids(db, current_user.id) if current_user else set()
    )
    return [
        ScheduleWithCount(
            id=s.id,
            day_of_week=s.day_of_week,
            period_number=s.period_number,
            capacity=s.capacity,
            current_count=counts.get(s.id, 0),
            is_reserved_by_user=s.id in reserved,
        )
        for s in store.get_schedules(db)
    ]
