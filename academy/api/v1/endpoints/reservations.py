# academy/api/v1/endpoints/reservations.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from academy.api.errors import raise_for_rejection
from academy.core.security import get_current_teacher, get_current_user
from academy.db.session import get_db
from academy.models.user import User
from academy.schemas.reservation import (
    DeleteResult,
    ReservationCreate,
    ReservationPublic,
    ReservationWithDetails,
)
from academy.services import admission, lifecycle, store
from academy.services.errors import Rejection

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("", response_model=ReservationPublic, status_code=status.HTTP_201_CREATED)
def create_reservation(
    obj_in: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    学生预约：onsite 需要 scheduleId（名额 / 每日 3 次 / 不可重复），online 不占名额。

    An online request must not carry a ``scheduleId``; one that does is
    rejected with 400 ``schedule_not_allowed``.
    """
    reservation = admission.create_reservation(db, user=current_user, obj_in=obj_in)
    if isinstance(reservation, Rejection):
        raise_for_rejection(reservation)
    return reservation


@router.get("/mine", response_model=List[ReservationWithDetails])
@router.get("/history", response_model=List[ReservationWithDetails], include_in_schema=False)
def list_my_reservations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return store.get_user_reservations(db, current_user.id)


@router.get("", response_model=List[ReservationWithDetails])
def list_all_reservations(
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
    day: Optional[str] = Query(default=None),
    period: Optional[int] = Query(default=None, ge=1),
):
    """
    老师查看所有预约，可按星期 / 节次筛选。
    """
    return store.get_reservations_for_teacher(db, day=day, period=period)


@router.patch("/{reservation_id}", response_model=ReservationPublic)
def update_reservation(
    reservation_id: int,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    teacher: {status?, teacherFeedback?}; owning student: {content?, photoUrls?}
    """
    reservation = lifecycle.update_reservation(
        db, reservation_id=reservation_id, requester=current_user, payload=payload
    )
    if isinstance(reservation, Rejection):
        raise_for_rejection(reservation)
    return reservation


@router.delete("/{reservation_id}", response_model=DeleteResult)
def delete_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = lifecycle.delete_reservation(
        db, reservation_id=reservation_id, requester=current_user
    )
    if isinstance(result, Rejection):
        raise_for_rejection(result)
    return DeleteResult(success=True)
