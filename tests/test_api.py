"""
HTTP-level tests.

The app runs with its service providers overridden by services built on
the in-memory repositories, so no database is needed.
"""

import io
import zipfile
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from hiring.core.config import settings
from hiring.core.dependencies import (
    get_candidate_service,
    get_import_service,
    get_referrer_service,
    get_source_service,
)
from hiring.main import app
from hiring.models.enums import PipelineStage
from hiring.services.candidate_service import CandidateService
from hiring.services.import_service import ImportService
from hiring.services.referrer_service import ReferrerService
from hiring.services.source_service import SourceService

pytestmark = pytest.mark.unit

API = "/api/v1"


@pytest.fixture
def client(repos):
    candidates, sources, referrers = repos
    app.dependency_overrides[get_candidate_service] = lambda: CandidateService(candidates, sources, referrers)
    app.dependency_overrides[get_source_service] = lambda: SourceService(sources, candidates)
    app.dependency_overrides[get_referrer_service] = lambda: ReferrerService(referrers, candidates)
    app.dependency_overrides[get_import_service] = lambda: ImportService(candidates, sources, referrers)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_create_and_fetch_candidate(client):
    response = client.post(
        f"{API}/candidates",
        json={"name": "Ann Lee", "telegram": "@ann", "currentOwner": "sourcer", "notes": "  hello "},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Candidate created successfully"
    candidate = body["candidate"]
    assert candidate["currentStage"] == "new"
    assert candidate["currentOwner"] == "sourcer"
    assert candidate["notes"] == "hello"
    assert candidate["source"] is None

    response = client.get(f"{API}/candidates/{candidate['id']}")
    assert response.status_code == 200
    assert response.json() == {"candidate": candidate}


def test_invalid_stage_is_400_invalid_enum(client):
    response = client.post(f"{API}/candidates", json={"name": "Ann Lee", "currentStage": "offer"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "invalid_enum"
    assert error["message"] == "Invalid stage: offer"


def test_request_shape_errors_are_validation_failed(client):
    response = client.post(f"{API}/candidates", json={"telegram": "@nobody"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "validation_failed"
    assert any(e["field"] == "name" for e in error["details"]["errors"])


def test_unknown_candidate_is_404(client):
    response = client.get(f"{API}/candidates/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_bulk_update_counts_existing_rows(client, repos):
    candidates, _, _ = repos
    x = candidates.add(name="X")
    z = candidates.add(name="Z")

    response = client.post(
        f"{API}/candidates/bulk/update-stages",
        json={"candidateIds": [str(x.id), str(uuid4()), str(z.id)], "currentStage": "tests_scheduled"},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Updated 2 candidates successfully", "count": 2}
    assert x.current_stage == PipelineStage.TESTS_SCHEDULED


def test_bulk_update_validation(client):
    response = client.post(
        f"{API}/candidates/bulk/update-stages",
        json={"candidateIds": [], "currentStage": "new"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_failed"

    response = client.post(
        f"{API}/candidates/bulk/update-stages",
        json={"candidateIds": [str(uuid4())], "currentStage": "hired"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_enum"


def test_stats_endpoint_is_idempotent(client, repos):
    candidates, _, _ = repos
    candidates.add(name="Ann", current_stage=PipelineStage.MOCK_DONE, interview_rating=1)
    candidates.add(name="Bob")

    first = client.get(f"{API}/candidates/stats")
    second = client.get(f"{API}/candidates/stats")

    assert first.status_code == 200
    assert first.content == second.content
    body = first.json()
    assert body["totalCandidates"] == 2
    assert len(body["byStage"]) == 12
    assert body["stageSummaries"]["mock_done"]["count"] == 1


def test_list_candidates_filters(client, repos):
    candidates, _, _ = repos
    candidates.add(name="Ann", current_stage=PipelineStage.QUALIFYING, interview_rating=2)
    candidates.add(name="Bob", current_stage=PipelineStage.QUALIFYING)
    candidates.add(name="Cat")

    response = client.get(
        f"{API}/candidates",
        params={"currentStage": "qualifying", "hasInterviewRating": "false", "limit": 10},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["limit"] == 10
    assert body["offset"] == 0
    assert [c["name"] for c in body["data"]] == ["Bob"]

    assert client.get(f"{API}/candidates", params={"limit": 101}).status_code == 400
    assert client.get(f"{API}/candidates", params={"currentOwner": "boss"}).status_code == 400


def test_feedback_and_delete(client, repos):
    candidates, _, _ = repos
    ann = candidates.add(name="Ann", notes="old")

    response = client.patch(f"{API}/candidates/{ann.id}/feedback", json={"interviewRating": 3})
    assert response.status_code == 200
    assert response.json()["candidate"]["interviewRating"] == 3
    assert response.json()["candidate"]["notes"] is None

    response = client.delete(f"{API}/candidates/{ann.id}")
    assert response.json() == {"message": "Candidate deleted successfully"}


def test_source_lifecycle(client, repos):
    candidates, _, _ = repos

    response = client.post(f"{API}/sources", json={"name": "LinkedIn", "type": "social"})
    assert response.status_code == 201
    source = response.json()["source"]
    assert source["candidateCount"] == 0
    assert source["interviewInsights"] == {"interviewed": 0, "passed": 0, "failed": 0}

    duplicate = client.post(f"{API}/sources", json={"name": "LinkedIn"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "conflict"

    candidates.add(name="Ann", source_id=UUID(source["id"]), interview_rating=1)
    fetched = client.get(f"{API}/sources/{source['id']}").json()
    assert fetched["candidateCount"] == 1
    assert fetched["interviewInsights"]["passed"] == 1

    blocked = client.delete(f"{API}/sources/{source['id']}")
    assert blocked.status_code == 409


def test_source_stats_and_analytics(client, repos):
    candidates, sources, _ = repos
    client.post(f"{API}/sources", json={"name": "LinkedIn", "type": "social"})
    client.post(f"{API}/sources", json={"name": "Walk-in"})
    linkedin = next(s for s in sources.rows.values() if s.name == "LinkedIn")
    candidates.add(name="Ann", source_id=linkedin.id, interview_rating=1)
    candidates.add(name="Bob", source_id=linkedin.id, interview_rating=4)

    stats = client.get(f"{API}/sources/stats").json()
    assert stats["total"] == 2
    assert stats["byType"] == {"social": 1, "unknown": 1}
    assert stats["topSources"][0]["name"] == "LinkedIn"
    assert stats["interviewSummary"] == {"interviewed": 2, "passed": 1, "failed": 1}

    analytics = client.get(f"{API}/sources/analytics").json()
    row = next(a for a in analytics if a["name"] == "LinkedIn")
    assert row["conversionRates"] == {
        "interviewRate": 100.0,
        "passRate": 50.0,
        "failRate": 50.0,
        "qualityScore": 0.5,
    }
    assert row["pipeline"]["active"] == 2


def test_referrer_endpoints(client):
    response = client.post(f"{API}/referrers", json={"name": "Jane Roe", "externalId": "R-1"})
    assert response.status_code == 201
    referrer = response.json()["referrer"]
    assert referrer["candidateCount"] == 0

    duplicate = client.post(f"{API}/referrers", json={"name": "Jane Roe", "externalId": "R-1"})
    assert duplicate.status_code == 409

    # Same name without an external id is allowed
    assert client.post(f"{API}/referrers", json={"name": "Jane Roe"}).status_code == 201

    listing = client.get(f"{API}/referrers", params={"search": "jane"}).json()
    assert listing["total"] == 2
    assert len(listing["referrers"]) == 2

    by_external = client.get(f"{API}/referrers/external/R-1")
    assert by_external.json()["id"] == referrer["id"]
    assert client.get(f"{API}/referrers/external/missing").status_code == 404

    stats = client.get(f"{API}/referrers/stats").json()
    assert stats["total"] == 2
    assert stats["withExternalId"] == 1
    assert stats["withTelegram"] == 0


def test_import_preview_execute_and_template(client, repos):
    candidates, _, _ = repos
    content = "Name,Stage,Rating\nAnn,qualifying,2\n,new,\n".encode("utf-8")

    preview = client.post(
        f"{API}/import/preview",
        files={"file": ("sheet.csv", content, "text/csv")},
    ).json()
    assert preview["success"] is True
    assert preview["preview"]["validRows"] == 1
    assert preview["preview"]["candidates"][1]["error"] == "Name is required"
    assert candidates.rows == {}

    executed = client.post(
        f"{API}/import/execute",
        files={"file": ("sheet.csv", content, "text/csv")},
    ).json()
    assert executed["success"] is False
    assert executed["message"] == "Import completed. 1 candidates imported, 1 failed."
    assert executed["result"]["errors"] == [{"row": 3, "error": "Name is required"}]
    assert len(candidates.rows) == 1

    rejected = client.post(
        f"{API}/import/preview",
        files={"file": ("sheet.pdf", b"%PDF", "application/pdf")},
    )
    assert rejected.status_code == 400

    template = client.get(f"{API}/import/template").json()
    assert template["template"]["headers"][0] == "Name"
    assert "probation_end" in template["template"]["stages"]


def test_string_rating_is_rejected(client, repos):
    candidates, _, _ = repos

    response = client.post(f"{API}/candidates", json={"name": "Ann Lee", "interviewRating": "3"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_failed"

    ann = candidates.add(name="Ann")
    response = client.patch(f"{API}/candidates/{ann.id}/feedback", json={"interviewRating": "2"})
    assert response.status_code == 400
    assert ann.interview_rating is None


def test_oversized_upload_is_rejected(client, repos, monkeypatch):
    candidates, _, _ = repos
    monkeypatch.setattr(settings, "IMPORT_MAX_BYTES", 32)
    content = ("Name\n" + "Ann Lee\n" * 10).encode("utf-8")

    response = client.post(
        f"{API}/import/execute",
        files={"file": ("sheet.csv", content, "text/csv")},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "validation_failed"
    assert error["details"]["maxBytes"] == 32
    assert candidates.rows == {}


def test_malformed_uploads_are_validation_errors(client):
    huge_field = ("Name,Notes\nAnn," + "x" * 200000).encode("utf-8")
    response = client.post(
        f"{API}/import/preview",
        files={"file": ("sheet.csv", huge_field, "text/csv")},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_failed"

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<not xml")
    response = client.post(
        f"{API}/import/preview",
        files={"file": ("a.xlsx", buffer.getvalue(), "application/octet-stream")},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_failed"
