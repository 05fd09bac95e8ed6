"""Primary/fallback orchestration and record lifecycle."""

import pytest

from app.modules.plant_identification.domain.models.identification import (
    IdentificationRequest,
    IdentificationStatus,
)
from app.modules.plant_identification.domain.services.identification_orchestrator import (
    IN_MEMORY_IMAGE_REFERENCE,
    IdentificationOrchestrator,
)
from app.shared.core.exceptions import (
    AllProvidersFailedError,
    APITimeoutError,
    NoProviderConfiguredError,
    ProviderCallFailedError,
)

from .conftest import make_plant_id, make_plantnet, plant_id_payload, plantnet_payload


@pytest.mark.asyncio
async def test_no_configured_provider_raises_without_any_call(identification_request) -> None:
    primary = make_plant_id(api_key=None)
    secondary = make_plantnet(api_key="   ")
    orchestrator = IdentificationOrchestrator([primary, secondary])

    with pytest.raises(NoProviderConfiguredError) as exc_info:
        await orchestrator.identify(identification_request)

    assert exc_info.value.error_code == "NO_PROVIDER_CONFIGURED"
    assert primary.calls == []
    assert secondary.calls == []


@pytest.mark.asyncio
async def test_primary_success_skips_fallback(identification_request) -> None:
    primary = make_plant_id()
    secondary = make_plantnet()
    orchestrator = IdentificationOrchestrator([primary, secondary])

    result = await orchestrator.identify(identification_request)

    assert len(primary.calls) == 1
    assert secondary.calls == []
    assert result.primary_service == "Plant.id"
    assert result.fallback_used is False
    assert result.best_match.source == "Plant.id API"
    assert result.best_match == result.suggestions[0]
    assert result.overall_confidence == result.suggestions[0].confidence
    assert result.total_results == len(result.suggestions)


@pytest.mark.asyncio
async def test_providers_are_tried_in_priority_order(identification_request) -> None:
    primary = make_plant_id()
    secondary = make_plantnet()
    orchestrator = IdentificationOrchestrator([secondary, primary])

    result = await orchestrator.identify(identification_request)

    assert result.primary_service == "Plant.id"
    assert secondary.calls == []


@pytest.mark.asyncio
async def test_fallback_used_when_primary_fails(identification_request) -> None:
    primary = make_plant_id(error=ProviderCallFailedError("Plant.id", "Request failed with status code 500"))
    secondary = make_plantnet()
    orchestrator = IdentificationOrchestrator([primary, secondary])

    result = await orchestrator.identify(identification_request)

    assert len(primary.calls) == 1
    assert len(secondary.calls) == 1
    assert result.primary_service == "PlantNet"
    assert result.fallback_used is True
    assert all(s.source == "PlantNet API" for s in result.suggestions)
    assert result.best_match.common_name == "Mango"


@pytest.mark.asyncio
async def test_not_a_plant_verdict_counts_as_failure(identification_request) -> None:
    primary = make_plant_id(response=plant_id_payload(is_plant=False))
    secondary = make_plantnet()
    orchestrator = IdentificationOrchestrator([primary, secondary])

    result = await orchestrator.identify(identification_request)

    assert result.primary_service == "PlantNet"
    assert result.fallback_used is True


@pytest.mark.asyncio
async def test_both_fail_reports_one_error_per_provider_in_order(
    identification_request, in_memory_repository
) -> None:
    primary = make_plant_id(error=APITimeoutError("Plant.id", 45))
    secondary = make_plantnet(response=plantnet_payload().model_copy(update={"results": []}))
    orchestrator = IdentificationOrchestrator([primary, secondary], in_memory_repository)

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await orchestrator.identify(identification_request)

    errors = exc_info.value.errors
    assert errors == [
        "Plant.id: Plant.id API request timed out after 45 seconds",
        "PlantNet: PlantNet found no plant matches",
    ]
    assert exc_info.value.to_dict()["errors"] == errors

    (record,) = in_memory_repository.records.values()
    assert record.status == IdentificationStatus.FAILED
    assert record.error == "All APIs failed: " + ", ".join(errors)


@pytest.mark.asyncio
async def test_unexpected_exception_is_captured_as_provider_failure(identification_request) -> None:
    primary = make_plant_id(error=RuntimeError("boom"))
    secondary = make_plantnet(error=ProviderCallFailedError("PlantNet", "Unexpected response format"))
    orchestrator = IdentificationOrchestrator([primary, secondary])

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await orchestrator.identify(identification_request)

    assert exc_info.value.errors == ["Plant.id: boom", "PlantNet: Unexpected response format"]


@pytest.mark.asyncio
async def test_empty_suggestions_fall_through_to_fallback(identification_request) -> None:
    empty = plant_id_payload().model_copy(update={"suggestions": []})
    primary = make_plant_id(response=empty)
    secondary = make_plantnet()
    orchestrator = IdentificationOrchestrator([primary, secondary])

    result = await orchestrator.identify(identification_request)

    assert result.primary_service == "PlantNet"


@pytest.mark.asyncio
async def test_unconfigured_primary_is_skipped_silently(identification_request) -> None:
    primary = make_plant_id(api_key=None)
    secondary = make_plantnet(error=ProviderCallFailedError("PlantNet", "Request failed with status code 401"))
    orchestrator = IdentificationOrchestrator([primary, secondary])

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await orchestrator.identify(identification_request)

    assert primary.calls == []
    assert exc_info.value.errors == ["PlantNet: Request failed with status code 401"]


@pytest.mark.asyncio
async def test_successful_identification_completes_record(png_bytes, in_memory_repository) -> None:
    request = IdentificationRequest(
        image=png_bytes,
        requester_id="user-1",
        language="en",
        manual_subtype="Sweet briar",
        image_reference="uploads/plants/1.jpg",
    )
    orchestrator = IdentificationOrchestrator([make_plant_id(), make_plantnet()], in_memory_repository)

    result = await orchestrator.identify(request)

    assert in_memory_repository.writes == ["create", "update"]
    record = in_memory_repository.records[result.identification_id]
    assert record.user_id == "user-1"
    assert record.original_image == "uploads/plants/1.jpg"
    assert record.status == IdentificationStatus.COMPLETED
    assert record.confidence == 87
    assert record.primary_service == "Plant.id"
    assert record.identified_plant.scientific_name == "Rosa rubiginosa"
    assert record.identified_plant.subtype == "Sweet briar"
    assert record.identified_plant.translated_name == {"en": "Rose"}
    assert record.results["best_match"]["common_name"] == "Rose"


@pytest.mark.asyncio
async def test_subtype_defaults_to_genus(png_bytes, in_memory_repository) -> None:
    request = IdentificationRequest(image=png_bytes, requester_id="user-1")
    orchestrator = IdentificationOrchestrator([make_plant_id()], in_memory_repository)

    result = await orchestrator.identify(request)

    record = in_memory_repository.records[result.identification_id]
    assert record.original_image == IN_MEMORY_IMAGE_REFERENCE
    assert record.identified_plant.subtype == "Rosa"


@pytest.mark.asyncio
async def test_anonymous_request_writes_no_record(png_bytes, in_memory_repository) -> None:
    orchestrator = IdentificationOrchestrator([make_plant_id()], in_memory_repository)

    result = await orchestrator.identify(IdentificationRequest(image=png_bytes))

    assert result.identification_id is None
    assert in_memory_repository.writes == []


@pytest.mark.asyncio
async def test_persistence_failure_never_changes_the_result(png_bytes, failing_repository) -> None:
    request = IdentificationRequest(image=png_bytes, requester_id="user-1")
    orchestrator = IdentificationOrchestrator(
        [make_plant_id(response=plant_id_payload("Rosa", 0.87, "Rose")), make_plantnet()],
        failing_repository,
    )

    result = await orchestrator.identify(request)

    assert failing_repository.attempts == 1
    assert result.overall_confidence == 87
    assert result.best_match.common_name == "Rose"
    assert result.best_match.scientific_name == "Rosa"
    assert result.primary_service == "Plant.id"
    assert result.fallback_used is False


@pytest.mark.asyncio
async def test_persistence_failure_keeps_all_failed_error(png_bytes, failing_repository) -> None:
    request = IdentificationRequest(image=png_bytes, requester_id="user-1")
    orchestrator = IdentificationOrchestrator(
        [make_plant_id(error=RuntimeError("down")), make_plantnet(error=RuntimeError("down"))],
        failing_repository,
    )

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await orchestrator.identify(request)

    assert exc_info.value.errors == ["Plant.id: down", "PlantNet: down"]


@pytest.mark.asyncio
async def test_failed_completion_update_keeps_result(png_bytes, update_failing_repository) -> None:
    request = IdentificationRequest(image=png_bytes, requester_id="user-1")
    orchestrator = IdentificationOrchestrator([make_plant_id(), make_plantnet()], update_failing_repository)

    result = await orchestrator.identify(request)

    assert update_failing_repository.writes == ["create", "update"]
    assert result.identification_id in update_failing_repository.records
    assert result.primary_service == "Plant.id"
    assert result.fallback_used is False
    assert result.overall_confidence == 87
    assert result.best_match.common_name == "Rose"

    stored = update_failing_repository.records[result.identification_id]
    assert stored.status == IdentificationStatus.PENDING


@pytest.mark.asyncio
async def test_failed_failure_update_keeps_all_failed_error(png_bytes, update_failing_repository) -> None:
    request = IdentificationRequest(image=png_bytes, requester_id="user-1")
    orchestrator = IdentificationOrchestrator(
        [make_plant_id(error=RuntimeError("down")), make_plantnet(error=RuntimeError("timeout"))],
        update_failing_repository,
    )

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await orchestrator.identify(request)

    assert exc_info.value.errors == ["Plant.id: down", "PlantNet: timeout"]
    assert update_failing_repository.writes == ["create", "update"]
