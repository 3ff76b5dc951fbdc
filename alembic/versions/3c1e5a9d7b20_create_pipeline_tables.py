"""Create source, referrer and candidate tables

Revision ID: 3c1e5a9d7b20
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c1e5a9d7b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Order matters: it is the sort order of the enum type
PIPELINE_STAGES = (
    "new",
    "qualifying",
    "interview_scheduled",
    "interview_done",
    "tests_scheduled",
    "tests_done",
    "mock_scheduled",
    "mock_done",
    "onboarding_assigned",
    "onboarding_done",
    "probation_start",
    "probation_end",
)
OWNER_ROLES = ("sourcer", "interviewer", "chatting_managers")

pipeline_stage = postgresql.ENUM(*PIPELINE_STAGES, name="pipeline_stage", create_type=False)
owner_role = postgresql.ENUM(*OWNER_ROLES, name="owner_role", create_type=False)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    pipeline_stage.create(bind, checkfirst=True)
    owner_role.create(bind, checkfirst=True)

    op.create_table(
        "source",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_source_created_at", "source", ["created_at"], unique=False)

    op.create_table(
        "referrer",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("external_id", sa.String(length=50), nullable=True),
        sa.Column("telegram", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "external_id", name="uq_referrer_name_external_id"),
    )
    op.create_index("ix_referrer_created_at", "referrer", ["created_at"], unique=False)
    op.create_index("ix_referrer_name", "referrer", ["name"], unique=False)
    op.create_index("ix_referrer_external_id", "referrer", ["external_id"], unique=False)

    op.create_table(
        "candidate",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("telegram", sa.String(length=50), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("timezone", sa.String(length=50), nullable=True),
        sa.Column("source_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("referrer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("current_stage", pipeline_stage, nullable=False),
        sa.Column("current_owner", owner_role, nullable=True),
        sa.Column("interview_rating", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["source_id"], ["source.id"]),
        sa.ForeignKeyConstraint(["referrer_id"], ["referrer.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "interview_rating IS NULL OR (interview_rating BETWEEN 1 AND 5)",
            name="ck_candidate_interview_rating_range",
        ),
    )
    op.create_index("ix_candidate_created_at", "candidate", ["created_at"], unique=False)
    op.create_index("ix_candidate_current_stage_updated_at", "candidate", ["current_stage", "updated_at"], unique=False)
    op.create_index("ix_candidate_source_id", "candidate", ["source_id"], unique=False)
    op.create_index("ix_candidate_referrer_id", "candidate", ["referrer_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_candidate_referrer_id", table_name="candidate")
    op.drop_index("ix_candidate_source_id", table_name="candidate")
    op.drop_index("ix_candidate_current_stage_updated_at", table_name="candidate")
    op.drop_index("ix_candidate_created_at", table_name="candidate")
    op.drop_table("candidate")

    op.drop_index("ix_referrer_external_id", table_name="referrer")
    op.drop_index("ix_referrer_name", table_name="referrer")
    op.drop_index("ix_referrer_created_at", table_name="referrer")
    op.drop_table("referrer")

    op.drop_index("ix_source_created_at", table_name="source")
    op.drop_table("source")

    bind = op.get_bind()
    owner_role.drop(bind, checkfirst=True)
    pipeline_stage.drop(bind, checkfirst=True)
