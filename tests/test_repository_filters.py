"""Search filters: user text is matched literally, never as a LIKE pattern."""

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from hiring.models.candidate import Candidate
from hiring.models.referrer import Referrer
from hiring.models.source import Source
from hiring.repositories import candidate_repository, referrer_repository, source_repository
from hiring.schemas.candidate import CandidateFilters
from hiring.schemas.referrer import ReferrerFilters
from hiring.schemas.source import SourceFilters

pytestmark = pytest.mark.unit


def _compile(query):
    return query.compile(dialect=postgresql.dialect())


@pytest.mark.parametrize(
    "module, model, filters",
    [
        (candidate_repository, Candidate, CandidateFilters(search="50%_off")),
        (source_repository, Source, SourceFilters(search="50%_off")),
        (referrer_repository, Referrer, ReferrerFilters(search="50%_off")),
    ],
)
def test_search_wildcards_are_escaped(module, model, filters):
    compiled = _compile(module._apply_filters(select(model), filters))

    assert "ESCAPE '/'" in str(compiled)
    assert "50/%/_off" in compiled.params.values()
    assert "50%_off" not in compiled.params.values()
