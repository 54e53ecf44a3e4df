"""Initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


order_status_enum = sa.Enum("pending", "confirmed", name="order_status_enum", native_enum=False)
payment_status_enum = sa.Enum("pending", "paid", name="payment_status_enum", native_enum=False)
outbox_status_enum = sa.Enum("pending", "processed", "failed", name="outbox_status_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=64), primary_key=True, nullable=False),
        _created_col(),
        _updated_col(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("instructor_id", sa.String(length=64), nullable=False),
        sa.Column("instructor_name", sa.String(length=255), nullable=False),
        sa.Column("pricing", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"], unique=False)

    op.create_table(
        "course_students",
        _id_col(),
        sa.Column("course_id", sa.String(length=64), nullable=False),
        sa.Column("student_id", sa.String(length=64), nullable=False),
        sa.Column("student_name", sa.String(length=255), nullable=False),
        sa.Column("student_email", sa.String(length=255), nullable=False),
        sa.Column("paid_amount", sa.Numeric(10, 2), nullable=False),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], name="fk_course_students_course_id_courses", ondelete="CASCADE"),
        sa.UniqueConstraint("course_id", "student_id", name="uq_course_students_course_id_student_id"),
    )
    op.create_index("ix_course_students_course_id", "course_students", ["course_id"], unique=False)
    op.create_index("ix_course_students_student_id", "course_students", ["student_id"], unique=False)

    op.create_table(
        "orders",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.Column("user_email", sa.String(length=255), nullable=False),
        sa.Column("course_id", sa.String(length=64), nullable=False),
        sa.Column("course_title", sa.String(length=255), nullable=False),
        sa.Column("course_image", sa.String(length=1024), nullable=True),
        sa.Column("course_pricing", sa.Numeric(10, 2), nullable=False),
        sa.Column("instructor_id", sa.String(length=64), nullable=False),
        sa.Column("instructor_name", sa.String(length=255), nullable=False),
        sa.Column("order_status", order_status_enum, nullable=False),
        sa.Column("payment_method", sa.String(length=32), nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("payment_id", sa.String(length=128), nullable=True),
        sa.Column("payer_id", sa.String(length=128), nullable=True),
        sa.Column("order_date", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"], unique=False)
    op.create_index("ix_orders_course_id", "orders", ["course_id"], unique=False)

    op.create_table(
        "student_courses",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.UniqueConstraint("user_id", name="uq_student_courses_user_id"),
    )

    op.create_table(
        "student_course_entries",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("record_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("course_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("instructor_id", sa.String(length=64), nullable=False),
        sa.Column("instructor_name", sa.String(length=255), nullable=False),
        sa.Column("date_of_purchase", sa.DateTime(timezone=True), nullable=False),
        sa.Column("course_image", sa.String(length=1024), nullable=True),
        sa.ForeignKeyConstraint(
            ["record_id"],
            ["student_courses.id"],
            name="fk_student_course_entries_record_id_student_courses",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("record_id", "course_id", name="uq_student_course_entries_record_id_course_id"),
    )
    op.create_index("ix_student_course_entries_record_id", "student_course_entries", ["record_id"], unique=False)
    op.create_index("ix_student_course_entries_course_id", "student_course_entries", ["course_id"], unique=False)

    op.create_table(
        "audit_logs",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("actor_id", sa.String(length=64), nullable=True),
        sa.Column("action", sa.String(length=128), nullable=False),
        sa.Column("entity_type", sa.String(length=128), nullable=False),
        sa.Column("entity_id", sa.String(length=128), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    )
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)

    op.create_table(
        "outbox_events",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("aggregate_type", sa.String(length=128), nullable=False),
        sa.Column("aggregate_id", sa.String(length=128), nullable=False),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("status", outbox_status_enum, nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retries", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
    )
    op.create_index("ix_outbox_events_aggregate_type", "outbox_events", ["aggregate_type"], unique=False)
    op.create_index("ix_outbox_events_aggregate_id", "outbox_events", ["aggregate_id"], unique=False)
    op.create_index("ix_outbox_events_event_type", "outbox_events", ["event_type"], unique=False)
    op.create_index("ix_outbox_events_status", "outbox_events", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_outbox_events_status", table_name="outbox_events")
    op.drop_index("ix_outbox_events_event_type", table_name="outbox_events")
    op.drop_index("ix_outbox_events_aggregate_id", table_name="outbox_events")
    op.drop_index("ix_outbox_events_aggregate_type", table_name="outbox_events")
    op.drop_table("outbox_events")

    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_actor_id", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("ix_student_course_entries_course_id", table_name="student_course_entries")
    op.drop_index("ix_student_course_entries_record_id", table_name="student_course_entries")
    op.drop_table("student_course_entries")
    op.drop_table("student_courses")

    op.drop_index("ix_orders_course_id", table_name="orders")
    op.drop_index("ix_orders_user_id", table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_course_students_student_id", table_name="course_students")
    op.drop_index("ix_course_students_course_id", table_name="course_students")
    op.drop_table("course_students")

    op.drop_index("ix_courses_instructor_id", table_name="courses")
    op.drop_table("courses")
