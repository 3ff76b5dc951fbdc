"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from hiring.models.enums import OwnerRole, PipelineStage
from hiring.models.source import Source
from hiring.models.referrer import Referrer
from hiring.models.candidate import Candidate

__all__ = [
    "OwnerRole",
    "PipelineStage",
    "Source",
    "Referrer",
    "Candidate",
]
