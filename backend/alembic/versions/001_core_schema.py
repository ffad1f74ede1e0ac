# backend/alembic/versions/001_core_schema.py
"""Core schema - tenants, users, centers, students, groups, sessions, audit

Revision ID: 001_core_schema
Revises:
Create Date: 2025-02-10 00:00:00.000000

Creates every table used by session generation. The unique constraint on
sessions (tenant, tutor, center, start instant) is what commit relies on to
detect sessions created concurrently after a plan was built.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001_core_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(26), primary_key=True)


def _tenant_fk() -> sa.Column:
    return sa.Column(
        "tenant_id", sa.String(26), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )


def upgrade() -> None:
    """Create the core schema."""
    print("Creating core schema...")

    op.create_table(
        "tenants",
        _id(),
        sa.Column("slug", sa.String(64), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        _created_at(),
    )
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=True),
        _created_at(),
    )
    op.create_table(
        "tenant_memberships",
        _id(),
        _tenant_fk(),
        sa.Column("user_id", sa.String(26), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        _created_at(),
        sa.UniqueConstraint("tenant_id", "user_id", "role", name="uq_tenant_memberships_tenant_user_role"),
    )
    op.create_index("ix_tenant_memberships_tenant_user", "tenant_memberships", ["tenant_id", "user_id"])

    op.create_table(
        "centers",
        _id(),
        _tenant_fk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False, server_default="America/Edmonton"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_index("ix_centers_tenant", "centers", ["tenant_id"])

    op.create_table(
        "staff_centers",
        _id(),
        _tenant_fk(),
        sa.Column("user_id", sa.String(26), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("center_id", sa.String(26), sa.ForeignKey("centers.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("tenant_id", "user_id", "center_id", name="uq_staff_centers_tenant_user_center"),
    )

    op.create_table(
        "students",
        _id(),
        _tenant_fk(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        _created_at(),
    )
    op.create_index("ix_students_tenant_last_name", "students", ["tenant_id", "last_name"])

    op.create_table(
        "groups",
        _id(),
        _tenant_fk(),
        sa.Column("center_id", sa.String(26), sa.ForeignKey("centers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("capacity", sa.Integer(), nullable=True),
        _created_at(),
        sa.CheckConstraint("type IN ('GROUP', 'CLASS')", name="ck_groups_type"),
    )
    op.create_index("ix_groups_tenant_center", "groups", ["tenant_id", "center_id"])

    op.create_table(
        "group_students",
        _id(),
        _tenant_fk(),
        sa.Column("group_id", sa.String(26), sa.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", sa.String(26), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("tenant_id", "group_id", "student_id", name="uq_group_students_tenant_group_student"),
    )
    op.create_index("ix_group_students_tenant_group", "group_students", ["tenant_id", "group_id"])

    print("Creating sessions...")
    op.create_table(
        "sessions",
        _id(),
        _tenant_fk(),
        sa.Column("center_id", sa.String(26), sa.ForeignKey("centers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("tutor_id", sa.String(26), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("session_type", sa.String(20), nullable=False),
        sa.Column("group_id", sa.String(26), sa.ForeignKey("groups.id", ondelete="SET NULL"), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("timezone", sa.String(64), nullable=False),
        sa.Column("zoom_link", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "tenant_id", "tutor_id", "center_id", "start_at", name="uq_sessions_tenant_tutor_center_start"
        ),
        sa.CheckConstraint(
            "session_type IN ('ONE_ON_ONE', 'GROUP', 'CLASS')", name="ck_sessions_session_type"
        ),
        sa.CheckConstraint("end_at > start_at", name="ck_sessions_time_order"),
    )
    op.create_index("ix_sessions_tenant_start", "sessions", ["tenant_id", "start_at"])
    op.create_index("ix_sessions_tenant_center_start", "sessions", ["tenant_id", "center_id", "start_at"])
    op.create_index("ix_sessions_tenant_tutor_start", "sessions", ["tenant_id", "tutor_id", "start_at"])

    op.create_table(
        "session_students",
        _id(),
        _tenant_fk(),
        sa.Column("session_id", sa.String(26), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", sa.String(26), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "tenant_id", "session_id", "student_id", name="uq_session_students_tenant_session_student"
        ),
    )
    op.create_index("ix_session_students_tenant_session", "session_students", ["tenant_id", "session_id"])
    op.create_index("ix_session_students_tenant_student", "session_students", ["tenant_id", "student_id"])

    print("Creating audit_log...")
    op.create_table(
        "audit_log",
        _id(),
        sa.Column("tenant_id", sa.String(26), nullable=False),
        sa.Column("actor_id", sa.String(26), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=True),
        sa.Column("result", sa.String(10), nullable=False),
        sa.Column("metadata", JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_log_tenant_occurred", "audit_log", ["tenant_id", "occurred_at"])

    print("Core schema created successfully!")


def downgrade() -> None:
    """Drop the core schema."""
    print("Dropping core schema...")

    for table in (
        "audit_log",
        "session_students",
        "sessions",
        "group_students",
        "groups",
        "students",
        "staff_centers",
        "centers",
        "tenant_memberships",
        "users",
        "tenants",
    ):
        op.drop_table(table)

    print("Core schema dropped successfully!")
