# academy/schemas/schedule.py
from academy.schemas.base import CamelModel


class SchedulePublic(CamelModel):
    id: int
    day_of_week: str
    period_number: int
    capacity: int


class ScheduleWithCount(SchedulePublic):
    current_count: int
    is_reserved_by_user: bool = False
