# academy/models/user.py
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func
from academy.db.base_class import Base

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String(32), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)  # copied from the roster
    seat_number = Column(Integer, nullable=True)
    role = Column(String(20), nullable=False, default=ROLE_STUDENT)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER
