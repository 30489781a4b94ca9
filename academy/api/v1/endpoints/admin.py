# academy/api/v1/endpoints/admin.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.api.errors import raise_for_rejection
from academy.core.security import get_current_teacher
from academy.db.session import get_db
from academy.models.user import User
from academy.schemas.allowed_student import AllowedStudentCreate, AllowedStudentPublic
from academy.services import signup
from academy.services.errors import Rejection

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/allowed-students", response_model=List[AllowedStudentPublic])
def list_allowed_students(
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return signup.list_roster(db)


@router.post(
    "/allowed-students",
    response_model=AllowedStudentPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_allowed_student(
    obj_in: AllowedStudentCreate,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    entry = signup.add_to_roster(db, obj_in=obj_in)
    if isinstance(entry, Rejection):
        raise_for_rejection(entry)
    return entry
