# academy/models/schedule.py
from sqlalchemy import Column, Integer, String, UniqueConstraint
from academy.db.base_class import Base

DEFAULT_CAPACITY = 4


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        UniqueConstraint("day_of_week", "period_number", name="uq_schedules_day_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    day_of_week = Column(String(20), nullable=False)
    period_number = Column(Integer, nullable=False)
    capacity = Column(Integer, nullable=False, default=DEFAULT_CAPACITY)
