# academy/models/reservation.py
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from academy.core import clock
from academy.db.base_class import Base

TYPE_ONSITE = "onsite"
TYPE_ONLINE = "online"

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_ANSWERED = "answered"
STATUS_CANCELLED = "cancelled"


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("type IN ('onsite', 'online')", name="ck_reservations_type"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'answered', 'cancelled')",
            name="ck_reservations_status",
        ),
        # onsite needs a slot, online never has one
        CheckConstraint(
            "(type = 'onsite' AND schedule_id IS NOT NULL)"
            " OR (type = 'online' AND schedule_id IS NULL)",
            name="ck_reservations_type_schedule",
        ),
        Index(
            "uq_reservations_onsite_user_schedule",
            "user_id",
            "schedule_id",
            unique=True,
            postgresql_where=text("type = 'onsite'"),
            sqlite_where=text("type = 'onsite'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=True, index=True)

    type = Column(String(10), nullable=False)
    content = Column(Text, nullable=True)
    photo_urls = Column(JSON, nullable=False, default=list)

    teacher_feedback = Column(Text, nullable=True)
    # 状态：pending / confirmed / answered / cancelled
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=clock.now, index=True)
