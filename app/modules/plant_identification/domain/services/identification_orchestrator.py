# 📄 File: app/modules/plant_identification/domain/services/identification_orchestrator.py
# 🧭 Purpose (Layman Explanation):
# The heart of plant identification: asks the main identification service first, asks the
# backup service only if the first one could not answer, and keeps the user's history entry
# up to date without ever letting a database hiccup spoil the answer.
# 🧪 Purpose (Technical Summary):
# Sequential primary/fallback orchestration over configured IdentificationProviders with
# per-provider failure capture ("<Provider>: <reason>"), normalization of the first successful
# payload, and best-effort IdentificationRecord lifecycle writes (pending -> completed | failed).
# 🔗 Dependencies:
# domain models, response_normalizer, identification_provider, identification_repository,
# app.shared.core.exceptions, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# application/handlers/command_handlers.py (IdentifyPlantCommandHandler), tests

"""
Identification Orchestrator

Algorithm:
1. No configured provider -> NoProviderConfiguredError, no network call.
2. Requester known -> create a pending record (best effort).
3. Try providers in priority order, one request each, stopping at the
   first success. Any exception, an explicit "not a plant" verdict or an
   empty match list is a provider failure captured as a string.
4. All failed -> record marked failed, AllProvidersFailedError(errors).
5. Success -> normalize, record marked completed, IdentificationResult.

Persistence errors are logged and never change the outcome.
"""

import time
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.shared.core.exceptions import (
    AllProvidersFailedError,
    NoProviderConfiguredError,
    PersistenceWriteFailedError,
)
from app.shared.utils.logging import get_logger

from ..models.identification import (
    IdentificationRecord,
    IdentificationRequest,
    IdentificationResult,
    IdentifiedPlant,
    ProviderSuggestion,
)
from ..repositories.identification_repository import IdentificationRepository
from .identification_provider import IdentificationProvider
from .response_normalizer import normalize_response

logger = get_logger(__name__)

# Stored when the uploaded image could not be kept
IN_MEMORY_IMAGE_REFERENCE = "memory://upload"


class IdentificationOrchestrator:
    """
    Runs one identification across the configured providers.

    Holds no per-request state, so one instance may serve concurrent requests.
    """

    def __init__(
        self,
        providers: List[IdentificationProvider],
        repository: Optional[IdentificationRepository] = None
    ):
        self.providers = sorted(providers, key=lambda p: p.config.priority)
        self.repository = repository

    @property
    def configured_providers(self) -> List[IdentificationProvider]:
        return [p for p in self.providers if p.is_configured]

    async def identify(self, request: IdentificationRequest) -> IdentificationResult:
        """
        Identify the plant in ``request.image``.

        Returns:
            IdentificationResult built from the first provider that succeeded

        Raises:
            NoProviderConfiguredError: No provider has credentials
            AllProvidersFailedError: Every configured provider failed
        """
        start = time.perf_counter()

        providers = self.configured_providers
        if not providers:
            logger.error("No plant identification API keys configured")
            raise NoProviderConfiguredError()

        record = await self._create_pending_record(request)
        errors: List[str] = []

        for provider in providers:
            suggestions, error = await self._attempt(provider, request)
            if error is not None:
                errors.append(error)
                continue

            result = IdentificationResult(
                primary_service=provider.display_name,
                fallback_used=provider is not self.providers[0],
                overall_confidence=suggestions[0].confidence,
                best_match=suggestions[0],
                suggestions=suggestions,
                total_results=len(suggestions),
                duration_ms=self._elapsed_ms(start),
                processed_at=datetime.now(timezone.utc),
                identification_id=record.identification_id if record else None,
            )
            if errors:
                logger.info(
                    f"Fallback provider {provider.display_name} succeeded after: {'; '.join(errors)}"
                )

            await self._complete_record(record, request, result, start)

            logger.info(
                f"✅ Plant identified via {provider.display_name}: "
                f"{result.best_match.scientific_name} ({result.overall_confidence}%)",
                extra={
                    "event_type": "identification_completed",
                    "primary_service": result.primary_service,
                    "fallback_used": result.fallback_used,
                    "total_results": result.total_results,
                },
            )
            return result.model_copy(update={"duration_ms": self._elapsed_ms(start)})

        await self._fail_record(record, errors, start)

        logger.error(
            "❌ All plant identification APIs failed",
            extra={"event_type": "identification_failed", "errors": errors},
        )
        raise AllProvidersFailedError(errors)

    # =========================================================================
    # PROVIDER ATTEMPTS
    # =========================================================================

    async def _attempt(
        self,
        provider: IdentificationProvider,
        request: IdentificationRequest
    ) -> Tuple[Optional[List[ProviderSuggestion]], Optional[str]]:
        """
        Run one provider call.

        Returns (suggestions, None) on success or (None, "<Provider>: <reason>").
        """
        attempt_start = time.perf_counter()
        try:
            response = await provider.identify(request)
            reason = response.failure_reason()
            suggestions = [] if reason else normalize_response(response, request.language)
            if not reason and not suggestions:
                reason = f"{provider.display_name} found no plant matches"
        except Exception as e:
            reason = getattr(e, "reason", None) or str(e) or type(e).__name__

        duration_ms = self._elapsed_ms(attempt_start)
        if reason:
            logger.performance.log_provider_attempt(
                provider.display_name, False, duration_ms, reason=reason
            )
            return None, f"{provider.display_name}: {reason}"

        logger.performance.log_provider_attempt(
            provider.display_name, True, duration_ms, suggestions=len(suggestions)
        )
        return suggestions, None

    # =========================================================================
    # RECORD LIFECYCLE (best effort)
    # =========================================================================

    async def _create_pending_record(
        self,
        request: IdentificationRequest
    ) -> Optional[IdentificationRecord]:
        if self.repository is None or not request.requester_id:
            return None

        record = IdentificationRecord(
            user_id=request.requester_id,
            original_image=request.image_reference or IN_MEMORY_IMAGE_REFERENCE,
        )
        try:
            return await self.repository.create(record)
        except Exception as e:
            self._log_persistence_failure("create", e)
            return None

    async def _complete_record(
        self,
        record: Optional[IdentificationRecord],
        request: IdentificationRequest,
        result: IdentificationResult,
        start: float
    ) -> None:
        if record is None:
            return

        best = result.best_match
        identified_plant = IdentifiedPlant(
            scientific_name=best.scientific_name,
            common_name=best.common_name,
            probability=best.confidence,
            subtype=request.manual_subtype or best.details.taxonomy.get("genus") or None,
            translated_name={request.language: best.common_name} if request.language else {},
        )
        record.mark_completed(result, identified_plant, self._elapsed_ms(start))
        try:
            await self.repository.update(record)
        except Exception as e:
            self._log_persistence_failure("update", e)

    async def _fail_record(
        self,
        record: Optional[IdentificationRecord],
        errors: List[str],
        start: float
    ) -> None:
        if record is None:
            return

        record.mark_failed(f"All APIs failed: {', '.join(errors)}", self._elapsed_ms(start))
        try:
            await self.repository.update(record)
        except Exception as e:
            self._log_persistence_failure("update", e)

    @staticmethod
    def _log_persistence_failure(operation: str, error: Exception) -> None:
        failure = PersistenceWriteFailedError(operation, str(error) or type(error).__name__)
        logger.warning(
            failure.message,
            extra={"event_type": "persistence_write_failed", "operation": operation},
        )

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)
