"""Identification endpoints through the ASGI app."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.modules.plant_identification.domain.models.identification import (
    IdentificationRecord,
    IdentificationStatus,
)
from app.shared.core.exceptions import ProviderCallFailedError

from .conftest import auth_headers, make_plant_id, make_plantnet

IDENTIFY_URL = "/api/v1/identifications/identify"
HISTORY_URL = "/api/v1/identifications/history"

pytestmark = pytest.mark.http


def upload(png_bytes: bytes, content_type: str = "image/png"):
    return {"image": ("leaf.png", png_bytes, content_type)}


def seed_record(repository, user_id: str, minutes_ago: int, **values) -> IdentificationRecord:
    created = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    record = IdentificationRecord(
        user_id=user_id,
        original_image=f"uploads/plants/{minutes_ago}.jpg",
        created_at=created,
        updated_at=created,
        **values,
    )
    repository.records[record.identification_id] = record
    return record


# =============================================================================
# IDENTIFY
# =============================================================================

@pytest.mark.asyncio
async def test_identify_returns_success_envelope(client, api_harness, png_bytes) -> None:
    response = await client.post(
        IDENTIFY_URL,
        files=upload(png_bytes),
        data={"organs": '["Leaf"]', "manualSubtype": "Sweet briar"},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Plant identified successfully"
    data = body["data"]
    assert data["primary_service"] == "Plant.id"
    assert data["fallback_used"] is False
    assert data["overall_confidence"] == 87
    assert data["best_match"]["common_name"] == "Rose"
    assert data["total_results"] == len(data["suggestions"]) == 1
    assert data["identification_id"] in api_harness.repository.records

    (sent,) = api_harness.providers[0].calls
    assert sent.mime_type == "image/jpeg"
    assert sent.organs == ["leaf"]
    assert sent.language == "en"
    assert sent.requester_id == "user-1"
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_identify_reports_fallback(client, api_harness, png_bytes) -> None:
    api_harness.providers = [
        make_plant_id(error=ProviderCallFailedError("Plant.id", "Request failed with status code 503")),
        make_plantnet(),
    ]

    response = await client.post(IDENTIFY_URL, files=upload(png_bytes), headers=auth_headers())

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["primary_service"] == "PlantNet"
    assert data["fallback_used"] is True


@pytest.mark.asyncio
async def test_identify_passes_manual_subtype_through_unmodified(client, api_harness, png_bytes) -> None:
    subtype = "  " + "Alphonso " * 20

    response = await client.post(
        IDENTIFY_URL,
        files=upload(png_bytes),
        data={"manualSubtype": subtype},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    (sent,) = api_harness.providers[0].calls
    assert sent.manual_subtype == subtype


@pytest.mark.asyncio
async def test_identify_without_image_is_rejected_before_providers(client, api_harness) -> None:
    response = await client.post(IDENTIFY_URL, data={"language": "en"}, headers=auth_headers())

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "MISSING_IMAGE"
    assert all(p.calls == [] for p in api_harness.providers)


@pytest.mark.asyncio
async def test_identify_requires_token(client, api_harness, png_bytes) -> None:
    response = await client.post(IDENTIFY_URL, files=upload(png_bytes))

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"
    assert all(p.calls == [] for p in api_harness.providers)


@pytest.mark.asyncio
async def test_identify_rejects_invalid_token(client, png_bytes) -> None:
    response = await client.post(
        IDENTIFY_URL,
        files=upload(png_bytes),
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json()["error_code"] == "AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_identify_rejects_non_image_upload(client, png_bytes) -> None:
    response = await client.post(
        IDENTIFY_URL,
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_FILE_TYPE"


@pytest.mark.asyncio
async def test_identify_rejects_unknown_organ(client, api_harness, png_bytes) -> None:
    response = await client.post(
        IDENTIFY_URL,
        files=upload(png_bytes),
        data={"organs": '["root"]'},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    assert all(p.calls == [] for p in api_harness.providers)


@pytest.mark.asyncio
async def test_identify_all_providers_failed(client, api_harness, png_bytes) -> None:
    api_harness.providers = [
        make_plant_id(error=ProviderCallFailedError("Plant.id", "Request failed with status code 401")),
        make_plantnet(error=ProviderCallFailedError("PlantNet", "Request failed with status code 429")),
    ]

    response = await client.post(IDENTIFY_URL, files=upload(png_bytes), headers=auth_headers())

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "ALL_PROVIDERS_FAILED"
    assert body["errors"] == [
        "Plant.id: Request failed with status code 401",
        "PlantNet: Request failed with status code 429",
    ]
    (record,) = api_harness.repository.records.values()
    assert record.status == IdentificationStatus.FAILED


@pytest.mark.asyncio
async def test_identify_without_configured_provider(client, api_harness, png_bytes) -> None:
    api_harness.providers = [make_plant_id(api_key=None), make_plantnet(api_key=None)]

    response = await client.post(IDENTIFY_URL, files=upload(png_bytes), headers=auth_headers())

    assert response.status_code == 500
    assert response.json()["error_code"] == "NO_PROVIDER_CONFIGURED"


@pytest.mark.asyncio
async def test_identify_succeeds_when_history_cannot_be_written(
    client, api_harness, failing_repository, png_bytes
) -> None:
    api_harness.repository = failing_repository

    response = await client.post(IDENTIFY_URL, files=upload(png_bytes), headers=auth_headers())

    assert response.status_code == 200
    assert response.json()["data"]["overall_confidence"] == 87
    assert failing_repository.attempts == 1


@pytest.mark.asyncio
async def test_identify_is_rate_limited(client, png_bytes, monkeypatch) -> None:
    monkeypatch.setattr(
        "app.shared.core.rate_limiter.get_settings",
        lambda: SimpleNamespace(IDENTIFY_RATE_LIMIT="2/minute"),
    )

    statuses = [
        (await client.post(IDENTIFY_URL, files=upload(png_bytes), headers=auth_headers())).status_code
        for _ in range(3)
    ]

    assert statuses == [200, 200, 429]


# =============================================================================
# HISTORY
# =============================================================================

@pytest.mark.asyncio
async def test_history_lists_own_records_newest_first(client, api_harness) -> None:
    repository = api_harness.repository
    older = seed_record(repository, "user-1", minutes_ago=30, status=IdentificationStatus.FAILED, error="All APIs failed: x")
    newer = seed_record(repository, "user-1", minutes_ago=5)
    seed_record(repository, "user-2", minutes_ago=1)

    response = await client.get(HISTORY_URL, headers=auth_headers("user-1"))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert [item["identification_id"] for item in body["data"]] == [
        newer.identification_id,
        older.identification_id,
    ]
    assert body["data"][1]["status"] == "failed"


@pytest.mark.asyncio
async def test_history_limit_is_capped(client) -> None:
    response = await client.get(HISTORY_URL, params={"limit": 51}, headers=auth_headers())

    assert response.status_code == 422
    assert response.json()["error_code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_history_database_failure_is_masked(client, api_harness, failing_repository) -> None:
    api_harness.repository = failing_repository

    response = await client.get(HISTORY_URL, headers=auth_headers())

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "DATABASE_ERROR"
    assert body["message"] == "An internal server error occurred"
    assert "connection refused" not in response.text


# =============================================================================
# DELETE
# =============================================================================

@pytest.mark.asyncio
async def test_delete_requires_officer_role(client, api_harness) -> None:
    record = seed_record(api_harness.repository, "user-1", minutes_ago=1)

    response = await client.delete(
        f"/api/v1/identifications/{record.identification_id}",
        headers=auth_headers("user-1", roles=["farmer"]),
    )

    assert response.status_code == 403
    assert record.identification_id in api_harness.repository.records


@pytest.mark.asyncio
async def test_officer_deletes_own_record(client, api_harness) -> None:
    record = seed_record(api_harness.repository, "officer-1", minutes_ago=1)

    response = await client.delete(
        f"/api/v1/identifications/{record.identification_id}",
        headers=auth_headers("officer-1", roles=["officer"]),
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Identification deleted"}
    assert record.identification_id not in api_harness.repository.records


@pytest.mark.asyncio
async def test_delete_of_someone_elses_record_is_not_found(client, api_harness) -> None:
    record = seed_record(api_harness.repository, "user-2", minutes_ago=1)

    response = await client.delete(
        f"/api/v1/identifications/{record.identification_id}",
        headers=auth_headers("officer-1", roles=["officer"]),
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"
    assert record.identification_id in api_harness.repository.records


# =============================================================================
# HEALTH
# =============================================================================

@pytest.mark.asyncio
async def test_liveness(client) -> None:
    response = await client.get("/api/v1/health/live")

    assert response.status_code == 200
    assert response.text == "OK"


@pytest.mark.asyncio
async def test_readiness_reports_missing_dependencies(client) -> None:
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 503
    assert set(response.json()["reasons"]) == {
        "database_unhealthy",
        "no_identification_provider_configured",
    }


@pytest.mark.asyncio
async def test_health_is_degraded_but_up(client) -> None:
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    providers = body["components"]["identification_providers"]["providers"]
    assert [p["name"] for p in providers] == ["plant_id", "plantnet"]
    assert all("api_key" not in p for p in providers)
