"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 10:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "allowed_students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=False),
        sa.Column("seat_number", sa.Integer(), nullable=False),
    )
    op.create_index(
        "ix_allowed_students_phone_number", "allowed_students", ["phone_number"], unique=True
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("phone_number", sa.String(length=32), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("seat_number", sa.Integer(), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now()
        ),
        sa.CheckConstraint("role IN ('student', 'teacher')", name="ck_users_role"),
    )
    op.create_index("ix_users_phone_number", "users", ["phone_number"], unique=True)

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("day_of_week", sa.String(length=20), nullable=False),
        sa.Column("period_number", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.UniqueConstraint("day_of_week", "period_number", name="uq_schedules_day_period"),
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("schedule_id", sa.Integer(), sa.ForeignKey("schedules.id"), nullable=True),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("photo_urls", sa.JSON(), nullable=False),
        sa.Column("teacher_feedback", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("type IN ('onsite', 'online')", name="ck_reservations_type"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'answered', 'cancelled')",
            name="ck_reservations_status",
        ),
        sa.CheckConstraint(
            "(type = 'onsite' AND schedule_id IS NOT NULL)"
            " OR (type = 'online' AND schedule_id IS NULL)",
            name="ck_reservations_type_schedule",
        ),
    )
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_schedule_id", "reservations", ["schedule_id"])
    op.create_index("ix_reservations_status", "reservations", ["status"])
    op.create_index("ix_reservations_created_at", "reservations", ["created_at"])
    op.create_index(
        "uq_reservations_onsite_user_schedule",
        "reservations",
        ["user_id", "schedule_id"],
        unique=True,
        postgresql_where=sa.text("type = 'onsite'"),
        sqlite_where=sa.text("type = 'onsite'"),
    )


def downgrade() -> None:
    op.drop_index("uq_reservations_onsite_user_schedule", table_name="reservations")
    op.drop_table("reservations")
    op.drop_table("schedules")
    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_allowed_students_phone_number", table_name="allowed_students")
    op.drop_table("allowed_students")
