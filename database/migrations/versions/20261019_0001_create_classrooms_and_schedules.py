"""create classrooms and class schedules

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


day_of_week_enum = sa.Enum(
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", name="day_of_week"
)
break_type_enum = sa.Enum("Lunch", "Short Break", "Assembly", "Free Period", name="break_type")


def upgrade() -> None:
    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("school_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("division", sa.String(length=20), nullable=True),
        sa.Column("class_teacher", sa.String(length=200), nullable=True),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_classrooms_school_id", "classrooms", ["school_id"])

    op.create_table(
        "class_schedules",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("school_id", sa.String(length=36), nullable=False),
        sa.Column(
            "classroom_id",
            sa.String(length=36),
            sa.ForeignKey("classrooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("day_of_week", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("is_break_period", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("break_type", break_type_enum, nullable=True),
        sa.Column("subject_name", sa.String(length=200), nullable=True),
        sa.Column("teacher_name", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_class_schedules_school_id", "class_schedules", ["school_id"])
    op.create_index("ix_class_schedules_classroom_id", "class_schedules", ["classroom_id"])


def downgrade() -> None:
    op.drop_index("ix_class_schedules_classroom_id", table_name="class_schedules")
    op.drop_index("ix_class_schedules_school_id", table_name="class_schedules")
    op.drop_table("class_schedules")
    op.drop_index("ix_classrooms_school_id", table_name="classrooms")
    op.drop_table("classrooms")
    break_type_enum.drop(op.get_bind(), checkfirst=True)
    day_of_week_enum.drop(op.get_bind(), checkfirst=True)
