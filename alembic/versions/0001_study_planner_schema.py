"""Create users, subjects, tasks and timetable_slots tables.

Revision ID: 0001_study_planner_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_study_planner_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.Column("study_hours_per_day", sa.Float(), nullable=False, server_default="6"),
        sa.Column("preferred_time", sa.String(length=5), nullable=False, server_default="09:00"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False, server_default="#4f46e5"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_subjects_user_id_users"),
    )
    op.create_index("ix_subjects_user_id", "subjects", ["user_id"], unique=False)

    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("preferred_time", sa.String(length=5), nullable=False, server_default="09:00"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_tasks_user_id_users"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], name="fk_tasks_subject_id_subjects"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_tasks_duration_positive"),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"], unique=False)
    op.create_index("ix_tasks_subject_id", "tasks", ["subject_id"], unique=False)
    op.create_index("ix_tasks_due_date", "tasks", ["due_date"], unique=False)

    op.create_table(
        "timetable_slots",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("auto_generated", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_timetable_slots_user_id_users"),
        sa.ForeignKeyConstraint(
            ["task_id"], ["tasks.id"], name="fk_timetable_slots_task_id_tasks", ondelete="SET NULL"
        ),
        sa.CheckConstraint("end_at > start_at", name="ck_timetable_slots_end_after_start"),
    )
    op.create_index("ix_timetable_slots_user_id", "timetable_slots", ["user_id"], unique=False)
    op.create_index("ix_timetable_slots_task_id", "timetable_slots", ["task_id"], unique=False)
    op.create_index("ix_timetable_slots_user_id_start_at", "timetable_slots", ["user_id", "start_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_timetable_slots_user_id_start_at", table_name="timetable_slots")
    op.drop_index("ix_timetable_slots_task_id", table_name="timetable_slots")
    op.drop_index("ix_timetable_slots_user_id", table_name="timetable_slots")
    op.drop_table("timetable_slots")

    op.drop_index("ix_tasks_due_date", table_name="tasks")
    op.drop_index("ix_tasks_subject_id", table_name="tasks")
    op.drop_index("ix_tasks_user_id", table_name="tasks")
    op.drop_table("tasks")

    op.drop_index("ix_subjects_user_id", table_name="subjects")
    op.drop_table("subjects")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
