"""
Candidate model.

Represents a person moving through the hiring pipeline.
"""

import uuid
from typing import Optional, TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hiring.models.base_model import TimestampedModel
from hiring.models.enums import OwnerRole, PipelineStage

if TYPE_CHECKING:
    from hiring.models.referrer import Referrer
    from hiring.models.source import Source


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Candidate(TimestampedModel):
    """
    Candidate table.

    current_stage and interview_rating drive every derived statistic.
    """

    __tablename__ = "candidate"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Contact information
    telegram: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    country: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    timezone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    source_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("source.id"),
        nullable=True,
    )

    referrer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("referrer.id"),
        nullable=True,
    )

    # Pipeline position
    current_stage: Mapped[PipelineStage] = mapped_column(
        Enum(PipelineStage, name="pipeline_stage", values_callable=_enum_values),
        nullable=False,
        default=PipelineStage.NEW,
    )

    current_owner: Mapped[Optional[OwnerRole]] = mapped_column(
        Enum(OwnerRole, name="owner_role", values_callable=_enum_values),
        nullable=True,
    )

    # 1-2 passed, 3 for consideration, 4-5 failed
    interview_rating: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    source: Mapped[Optional["Source"]] = relationship(
        "Source",
        lazy="selectin",
    )

    referrer: Mapped[Optional["Referrer"]] = relationship(
        "Referrer",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "interview_rating IS NULL OR (interview_rating BETWEEN 1 AND 5)",
            name="ck_candidate_interview_rating_range",
        ),
        Index("ix_candidate_current_stage_updated_at", "current_stage", "updated_at"),
        Index("ix_candidate_source_id", "source_id"),
        Index("ix_candidate_referrer_id", "referrer_id"),
    )
