# academy/schemas/user.py
from datetime import datetime

from academy.schemas.base import CamelModel


class UserPublic(CamelModel):
    id: int
    phone_number: str
    name: str
    seat_number: int | None = None
    role: str  # "teacher" / "student"
    created_at: datetime | None = None
