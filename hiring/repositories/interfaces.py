"""
Structural interfaces for the repositories the services depend on.

Services take these instead of an AsyncSession so tests can hand them an
in-memory double.
"""

from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, Sequence, Tuple
from uuid import UUID

from hiring.models.candidate import Candidate
from hiring.models.enums import PipelineStage
from hiring.schemas.candidate import CandidateFilters


class CandidateReader(Protocol):
    async def scan(
        self,
        filters: Optional[CandidateFilters] = None,
        order_by: Sequence[Tuple[str, str]] = (("created_at", "desc"),),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Candidate]: ...

    async def count(self, filters: Optional[CandidateFilters] = None) -> int: ...

    async def count_by(self, column: str, filters: Optional[CandidateFilters] = None) -> Dict[Any, int]: ...

    async def recent(self, limit: int = 5) -> List[Candidate]: ...


class CandidateStore(CandidateReader, Protocol):
    async def get_by_id(self, candidate_id: UUID) -> Optional[Candidate]: ...

    async def create(self, values: Dict[str, Any]) -> Candidate: ...

    async def update(self, candidate_id: UUID, values: Dict[str, Any]) -> Optional[Candidate]: ...

    async def delete(self, candidate: Candidate) -> None: ...

    async def bulk_update_stage(self, candidate_ids: Sequence[UUID], stage: PipelineStage) -> int: ...

    def savepoint(self) -> AsyncContextManager[Any]: ...
