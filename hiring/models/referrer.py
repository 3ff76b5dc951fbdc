"""
Referrer model.

An external person credited for introducing candidates. Optionally linked
to an id in another system (e.g. the payroll sheet used for bonuses).
"""

from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hiring.models.base_model import TimestampedModel


class Referrer(TimestampedModel):
    """Referrer table."""

    __tablename__ = "referrer"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    external_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        index=True,
    )

    telegram: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("name", "external_id", name="uq_referrer_name_external_id"),
    )
