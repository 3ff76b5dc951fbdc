"""
Source model.

A named lead channel (job board, community, ad campaign) that candidates
enter the pipeline through.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hiring.models.base_model import TimestampedModel


class Source(TimestampedModel):
    """Source table - where a candidate came from."""

    __tablename__ = "source"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    # Free-text tag, e.g. "job_board", "referral", "social"
    type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
