# academy/schemas/allowed_student.py
from pydantic import Field

from academy.schemas.base import CamelModel


class AllowedStudentCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    phone_number: str = Field(min_length=1, max_length=32)
    seat_number: int = Field(ge=0)


class AllowedStudentPublic(AllowedStudentCreate):
    id: int
