"""
Per-source interview insights and conversion/quality analytics.

All rates are percentages rounded half-up to 2 decimals; see round2().
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from hiring.models.candidate import Candidate
from hiring.models.enums import FEEDBACK_DUE_STAGES, PipelineStage
from hiring.models.source import Source
from hiring.repositories.interfaces import CandidateReader
from hiring.schemas.candidate import CandidateFilters
from hiring.schemas.source import (
    ConversionRates,
    InterviewInsights,
    InterviewMetrics,
    PipelineBreakdown,
    SourceAnalytics,
)
from hiring.utils.ratings import (
    FAILING_RATING_MIN,
    PASSING_RATING_MAX,
    is_consideration,
    is_failing,
    is_passing,
    is_rated,
    percentage,
    round2,
)
from hiring.utils.time import as_utc, days_before, utc_now

# Business rules without a documented rationale; candidates for configuration
STALLED_AFTER_DAYS = 30
PASS_WEIGHT = 2


async def build_interview_insights(
    reader: CandidateReader,
    source_ids: Sequence[UUID],
) -> Dict[UUID, InterviewInsights]:
    """
    Interviewed/passed/failed counts for each requested source.

    Three grouped counts over the candidate table; every requested id gets a
    record, zero-filled when the source has no rated candidates.
    """
    if not source_ids:
        return {}

    ids = list(source_ids)
    interviewed = await reader.count_by(
        "source_id", CandidateFilters(source_ids=ids, has_interview_rating=True)
    )
    passed = await reader.count_by(
        "source_id", CandidateFilters(source_ids=ids, max_interview_rating=PASSING_RATING_MAX)
    )
    failed = await reader.count_by(
        "source_id", CandidateFilters(source_ids=ids, min_interview_rating=FAILING_RATING_MIN)
    )

    return {
        source_id: InterviewInsights(
            interviewed=interviewed.get(source_id, 0),
            passed=passed.get(source_id, 0),
            failed=failed.get(source_id, 0),
        )
        for source_id in ids
    }


def quality_score(passed: int, failed: int, interviewed: int) -> float:
    """(2 x passed - failed) / interviewed, 0 when nobody was interviewed."""
    if interviewed <= 0:
        return 0.0
    return round2((passed * PASS_WEIGHT - failed) / interviewed)


def is_stalled(candidate: Candidate, stalled_before: datetime) -> bool:
    """A passing candidate that has not completed and has not moved for a while."""
    return (
        is_passing(candidate.interview_rating)
        and candidate.current_stage != PipelineStage.PROBATION_END
        and as_utc(candidate.updated_at) < stalled_before
    )


def compute_source_analytics(
    source: Source,
    candidates: Sequence[Candidate],
    now: datetime,
) -> SourceAnalytics:
    total = len(candidates)
    ratings = [c.interview_rating for c in candidates]

    interviewed = sum(1 for r in ratings if is_rated(r))
    passed = sum(1 for r in ratings if is_passing(r))
    consideration = sum(1 for r in ratings if is_consideration(r))
    failed = sum(1 for r in ratings if is_failing(r))
    not_rated = sum(
        1
        for c in candidates
        if c.current_stage in FEEDBACK_DUE_STAGES and c.interview_rating is None
    )

    completed = sum(1 for c in candidates if c.current_stage == PipelineStage.PROBATION_END)
    stalled_before = days_before(as_utc(now), STALLED_AFTER_DAYS)
    dropped = sum(1 for c in candidates if is_stalled(c, stalled_before))

    return SourceAnalytics(
        id=source.id,
        name=source.name,
        type=source.type,
        total_candidates=total,
        interview_metrics=InterviewMetrics(
            interviewed=interviewed,
            passed=passed,
            consideration=consideration,
            failed=failed,
            not_rated=not_rated,
        ),
        conversion_rates=ConversionRates(
            interview_rate=percentage(interviewed, total),
            pass_rate=percentage(passed, interviewed),
            fail_rate=percentage(failed, interviewed),
            quality_score=quality_score(passed, failed, interviewed),
        ),
        pipeline=PipelineBreakdown(
            active=total - completed,
            completed=completed,
            dropped=dropped,
        ),
    )


def build_source_analytics(
    sources: Iterable[Source],
    candidates: Iterable[Candidate],
    now: datetime,
) -> List[SourceAnalytics]:
    """Group candidates by source and compute analytics for every source."""
    by_source: Dict[UUID, List[Candidate]] = defaultdict(list)
    for candidate in candidates:
        if candidate.source_id is not None:
            by_source[candidate.source_id].append(candidate)

    return [compute_source_analytics(source, by_source.get(source.id, []), now) for source in sources]


async def get_source_analytics(
    sources: Sequence[Source],
    reader: CandidateReader,
    now: Optional[datetime] = None,
) -> List[SourceAnalytics]:
    if not sources:
        return []

    candidates = await reader.scan(
        CandidateFilters(source_ids=[source.id for source in sources]),
        order_by=(("created_at", "asc"), ("id", "asc")),
    )
    return build_source_analytics(sources, candidates, now or utc_now())
