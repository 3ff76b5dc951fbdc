"""
Stage/owner statistics for the pipeline dashboard.

Computed from scratch on every call: no caching, so the dashboard is never
stale. Every stage and owner key is present in the output even when its
count is zero.
"""

from typing import Any, Dict, Iterable, List

from hiring.models.candidate import Candidate
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.repositories.interfaces import CandidateReader
from hiring.schemas.candidate import (
    CandidateRead,
    CandidateStats,
    SourceBrief,
    StageCandidate,
    StageSummary,
)

RECENT_CANDIDATES_LIMIT = 5

# Stage ascending, most recently touched first inside a stage, id as tie-breaker
STAGE_SUMMARY_ORDER = (
    ("current_stage", "asc"),
    ("updated_at", "desc"),
    ("id", "asc"),
)


def empty_stage_counts() -> Dict[PipelineStage, int]:
    return {stage: 0 for stage in PipelineStage}


def empty_owner_counts() -> Dict[OwnerRole, int]:
    return {owner: 0 for owner in OwnerRole}


def order_for_stage_summary(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Sort by stage position, then updated_at desc, then id (stable sorts, last key first)."""
    ordered = sorted(candidates, key=lambda c: str(c.id))
    ordered.sort(key=lambda c: c.updated_at, reverse=True)
    ordered.sort(key=lambda c: PipelineStage(c.current_stage).position)
    return ordered


def to_stage_candidate(candidate: Candidate) -> StageCandidate:
    source = candidate.source
    return StageCandidate(
        id=candidate.id,
        name=candidate.name,
        telegram=candidate.telegram,
        current_owner=candidate.current_owner,
        interview_rating=candidate.interview_rating,
        notes=candidate.notes,
        updated_at=candidate.updated_at,
        source=SourceBrief(id=source.id, name=source.name) if source is not None else None,
    )


def build_candidate_stats(
    stage_counts: Dict[Any, int],
    owner_counts: Dict[Any, int],
    recent_candidates: Iterable[Candidate],
    stage_candidates: Iterable[Candidate],
) -> CandidateStats:
    """Assemble the stats payload from grouped counts and a full scan."""
    by_stage = empty_stage_counts()
    for stage, count in stage_counts.items():
        by_stage[PipelineStage(stage)] = count

    by_owner = empty_owner_counts()
    for owner, count in owner_counts.items():
        # Unassigned candidates are not reported per owner
        if owner is not None:
            by_owner[OwnerRole(owner)] = count

    stage_summaries = {stage: StageSummary() for stage in PipelineStage}
    for candidate in order_for_stage_summary(stage_candidates):
        summary = stage_summaries[PipelineStage(candidate.current_stage)]
        summary.count += 1
        summary.candidates.append(to_stage_candidate(candidate))

    return CandidateStats(
        total_candidates=sum(by_stage.values()),
        by_stage=by_stage,
        by_owner=by_owner,
        recent_candidates=[CandidateRead.model_validate(c) for c in recent_candidates],
        stage_summaries=stage_summaries,
    )


async def get_candidate_stats(reader: CandidateReader) -> CandidateStats:
    """Scan the candidate table and build the dashboard statistics."""
    stage_counts = await reader.count_by("current_stage")
    owner_counts = await reader.count_by("current_owner")
    recent = await reader.recent(RECENT_CANDIDATES_LIMIT)
    stage_candidates = await reader.scan(order_by=STAGE_SUMMARY_ORDER)

    return build_candidate_stats(stage_counts, owner_counts, recent, stage_candidates)
