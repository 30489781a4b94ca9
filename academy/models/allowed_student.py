# academy/models/allowed_student.py
from sqlalchemy import Column, Integer, String
from academy.db.base_class import Base


class AllowedStudent(Base):
    """Roster entry; a phone number listed here may sign up."""

    __tablename__ = "allowed_students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone_number = Column(String(32), unique=True, nullable=False, index=True)
    seat_number = Column(Integer, nullable=False)
