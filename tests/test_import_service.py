"""Import batches: per-row failures, savepoint rollback and name reuse."""

import asyncio

import pytest

from hiring.errors import ValidationFailedError
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.schemas.imports import CandidateImportRow
from hiring.services.import_service import ImportService, build_template, validate_import_row

pytestmark = pytest.mark.unit


@pytest.fixture
def service(repos):
    candidates, sources, referrers = repos
    return ImportService(candidates, sources, referrers)


def test_missing_name_does_not_block_later_rows(repos, service):
    candidates, _, _ = repos
    rows = [
        CandidateImportRow(name="Ann"),
        CandidateImportRow(name="   "),
        CandidateImportRow(name="Cat", current_stage=PipelineStage.MOCK_DONE),
    ]

    result = asyncio.run(service.import_candidates(rows))

    assert result.success is False
    assert result.imported == 2
    assert result.failed == 1
    assert [(e.row, e.error) for e in result.errors] == [(3, "Name is required")]
    assert sorted(c.name for c in candidates.rows.values()) == ["Ann", "Cat"]
    stages = {c.name: c.current_stage for c in result.candidates}
    assert stages == {"Ann": PipelineStage.NEW, "Cat": PipelineStage.MOCK_DONE}


def test_sources_and_referrers_are_reused_by_name(repos, service):
    candidates, sources, referrers = repos
    existing = asyncio.run(sources.create({"name": "LinkedIn", "type": "social"}))
    rows = [
        CandidateImportRow(name="Ann", source="LinkedIn", referrer="Jane"),
        CandidateImportRow(name="Bob", source="LinkedIn", referrer="Jane"),
        CandidateImportRow(name="Cat", source="Job fair", current_owner=OwnerRole.SOURCER),
    ]

    result = asyncio.run(service.import_candidates(rows))

    assert result.success is True
    assert result.imported == 3
    assert sorted(s.name for s in sources.rows.values()) == ["Job fair", "LinkedIn"]
    assert len(referrers.rows) == 1
    by_name = {c.name: c for c in candidates.rows.values()}
    assert by_name["Ann"].source_id == existing.id
    assert by_name["Bob"].referrer_id == by_name["Ann"].referrer_id
    assert by_name["Cat"].current_owner == OwnerRole.SOURCER


def test_failed_row_rolls_back_its_own_writes(repos, service):
    candidates, sources, _ = repos
    candidates.reject_names.add("Broken")
    rows = [
        CandidateImportRow(name="Broken", source="Brand new board"),
        CandidateImportRow(name="Fine", source="Brand new board"),
    ]

    result = asyncio.run(service.import_candidates(rows))

    assert result.imported == 1
    assert result.failed == 1
    assert result.errors[0].row == 2
    assert "Broken" in result.errors[0].error
    # The source created by the failed row was rolled back and created again for the next one
    assert [s.name for s in sources.rows.values()] == ["Brand new board"]
    fine = next(c for c in candidates.rows.values() if c.name == "Fine")
    assert fine.source_id in sources.rows


def test_execute_rejects_empty_sheet(service):
    with pytest.raises(ValidationFailedError):
        asyncio.run(service.execute(b"Name,Stage\n", "empty.csv"))


def test_preview_reports_row_numbers(service):
    content = "Name,Rating\nAnn,1\n,2\nBob,7\n".encode("utf-8")

    preview = asyncio.run(service.preview(content, "sheet.csv"))

    assert preview.total_rows == 3
    assert preview.valid_rows == 2
    assert preview.invalid_rows == 1
    assert [(r.row, r.valid, r.error) for r in preview.candidates] == [
        (2, True, None),
        (3, False, "Name is required"),
        (4, True, None),
    ]
    assert preview.candidates[2].data.interview_rating == 5


def test_validate_import_row():
    assert validate_import_row(CandidateImportRow(name="")) == "Name is required"
    assert validate_import_row(CandidateImportRow(name="Ann", interview_rating=3)) is None


def test_template_lists_vocabularies():
    template = build_template()

    assert template.template.headers[0] == "Name"
    assert template.template.stages == [stage.value for stage in PipelineStage]
    assert template.template.owners == ["sourcer", "interviewer", "chatting_managers"]
    assert template.template.example[6] in template.template.stages
    assert template.template.example[7] in template.template.owners
    assert set(template.instructions) >= {"name", "stage", "owner", "rating"}
