"""Shared fixtures for the identification test suite.

Environment defaults are set before any app import so the cached Settings
see them. Provider calls never leave the process: HTTP tests swap in fake
providers and an in-memory repository through dependency overrides.
"""

import io
import os
from typing import Any, AsyncIterator, Dict, List, Optional

import pytest
import pytest_asyncio

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("PLANT_ID_API_KEY", "")
os.environ.setdefault("PLANTNET_API_KEY", "")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402

from app.modules.plant_identification.domain.models.identification import (  # noqa: E402
    IdentificationRecord,
    IdentificationRequest,
    ProviderConfig,
)
from app.modules.plant_identification.domain.models.provider_responses import (  # noqa: E402
    PlantIdResponse,
    PlantNetResponse,
    parse_provider_response,
)
from app.modules.plant_identification.domain.repositories.identification_repository import (  # noqa: E402
    IdentificationRepository,
)
from app.modules.plant_identification.domain.services.identification_provider import (  # noqa: E402
    IdentificationProvider,
)
from app.shared.core.exceptions import DatabaseError, NotFoundError  # noqa: E402
from app.shared.core.security import create_access_token  # noqa: E402


# =============================================================================
# PROVIDER FAKES
# =============================================================================

class FakeProvider(IdentificationProvider):
    """Provider double returning a canned payload or raising a canned error."""

    def __init__(
        self,
        name: str,
        display_name: str,
        priority: int,
        response: Any = None,
        error: Optional[Exception] = None,
        api_key: Optional[str] = "test-key",
    ):
        super().__init__(
            ProviderConfig(
                name=name,
                display_name=display_name,
                api_key=api_key,
                api_url="https://provider.invalid",
                priority=priority,
            )
        )
        self.response = response
        self.error = error
        self.calls: List[IdentificationRequest] = []

    async def identify(self, request: IdentificationRequest):
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return self.response


def plant_id_payload(
    scientific_name: str = "Rosa rubiginosa",
    probability: float = 0.87,
    common_name: str = "Rose",
    **extra: Any
) -> PlantIdResponse:
    """Legacy flat Plant.id payload with one suggestion."""
    payload: Dict[str, Any] = {
        "is_plant": True,
        "suggestions": [
            {
                "plant_name": scientific_name,
                "probability": probability,
                "plant_details": {
                    "common_names": {"en": [common_name]},
                    "taxonomy": {"family": "Rosaceae", "genus": "Rosa"},
                    "wiki_description": {"value": "A wild rose."},
                    "url": "https://en.wikipedia.org/wiki/Rosa_rubiginosa",
                },
            }
        ],
    }
    payload.update(extra)
    return parse_provider_response("plant_id", payload)


def plantnet_payload(
    scientific_name: str = "Mangifera indica L.",
    score: float = 0.64,
    common_names: Optional[List[str]] = None,
) -> PlantNetResponse:
    return parse_provider_response(
        "plantnet",
        {
            "language": "en",
            "bestMatch": scientific_name,
            "results": [
                {
                    "score": score,
                    "species": {
                        "scientificName": scientific_name,
                        "scientificNameWithoutAuthor": scientific_name.replace(" L.", ""),
                        "commonNames": common_names if common_names is not None else ["Mango"],
                        "family": {"scientificNameWithoutAuthor": "Anacardiaceae"},
                        "genus": {"scientificNameWithoutAuthor": "Mangifera"},
                    },
                    "gbif": {"id": "3190638"},
                }
            ],
        },
    )


def make_plant_id(**kwargs: Any) -> FakeProvider:
    kwargs.setdefault("response", plant_id_payload())
    return FakeProvider("plant_id", "Plant.id", 1, **kwargs)


def make_plantnet(**kwargs: Any) -> FakeProvider:
    kwargs.setdefault("response", plantnet_payload())
    return FakeProvider("plantnet", "PlantNet", 2, **kwargs)


# =============================================================================
# REPOSITORY FAKES
# =============================================================================

class InMemoryIdentificationRepository(IdentificationRepository):
    def __init__(self):
        self.records: Dict[str, IdentificationRecord] = {}
        self.writes: List[str] = []

    async def create(self, record: IdentificationRecord) -> IdentificationRecord:
        self.writes.append("create")
        self.records[record.identification_id] = record.model_copy(deep=True)
        return record

    async def update(self, record: IdentificationRecord) -> IdentificationRecord:
        self.writes.append("update")
        if record.identification_id not in self.records:
            raise NotFoundError("Identification not found")
        self.records[record.identification_id] = record.model_copy(deep=True)
        return record

    async def get_by_id(self, identification_id: str) -> Optional[IdentificationRecord]:
        return self.records.get(identification_id)

    async def list_by_user(self, user_id: str, limit: int = 50) -> List[IdentificationRecord]:
        owned = [r for r in self.records.values() if r.user_id == user_id]
        owned.sort(key=lambda r: r.created_at, reverse=True)
        return owned[:limit]

    async def delete_for_user(self, identification_id: str, user_id: str) -> bool:
        record = self.records.get(identification_id)
        if record is None or record.user_id != user_id:
            return False
        del self.records[identification_id]
        return True


class UpdateFailingIdentificationRepository(InMemoryIdentificationRepository):
    """Records are created, then every update fails."""

    async def update(self, record: IdentificationRecord) -> IdentificationRecord:
        self.writes.append("update")
        raise DatabaseError("connection lost", operation="update")


class FailingIdentificationRepository(IdentificationRepository):
    """Every write fails, as with an unreachable database."""

    def __init__(self):
        self.attempts = 0

    async def _fail(self):
        self.attempts += 1
        raise DatabaseError("connection refused", operation="write")

    async def create(self, record):
        await self._fail()

    async def update(self, record):
        await self._fail()

    async def get_by_id(self, identification_id):
        await self._fail()

    async def list_by_user(self, user_id, limit=50):
        await self._fail()

    async def delete_for_user(self, identification_id, user_id):
        await self._fail()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def in_memory_repository() -> InMemoryIdentificationRepository:
    return InMemoryIdentificationRepository()


@pytest.fixture
def failing_repository() -> FailingIdentificationRepository:
    return FailingIdentificationRepository()


def make_image_bytes(size=(1600, 1200), fmt: str = "PNG", color=(34, 139, 34)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def identification_request(png_bytes: bytes) -> IdentificationRequest:
    return IdentificationRequest(image=png_bytes, mime_type="image/png", requester_id="user-1")


def auth_headers(user_id: str = "user-1", roles: Optional[List[str]] = None) -> Dict[str, str]:
    token = create_access_token({"sub": user_id, "email": f"{user_id}@nursery.test", "roles": roles or ["farmer"]})
    return {"Authorization": f"Bearer {token}"}


class APIHarness:
    """Mutable wiring for one HTTP test: providers, repository, upload dir."""

    def __init__(self, repository: IdentificationRepository):
        self.providers: List[IdentificationProvider] = [make_plant_id(), make_plantnet()]
        self.repository = repository


@pytest.fixture
def api_harness(in_memory_repository: InMemoryIdentificationRepository) -> APIHarness:
    return APIHarness(in_memory_repository)


@pytest_asyncio.fixture
async def client(api_harness: APIHarness, tmp_path) -> AsyncIterator[AsyncClient]:
    """httpx client over the ASGI app with identification dependencies overridden."""
    from app.main import create_application
    from app.modules.plant_identification.presentation import dependencies as deps
    from app.shared.core.rate_limiter import limiter
    from app.shared.infrastructure.storage.file_manager import FileManager, get_file_manager

    app = create_application()
    app.dependency_overrides[deps.get_identification_providers] = lambda: api_harness.providers
    app.dependency_overrides[deps.get_identification_repository] = lambda: api_harness.repository
    app.dependency_overrides[get_file_manager] = lambda: FileManager(upload_dir=str(tmp_path / "uploads"))
    limiter.reset()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def update_failing_repository() -> UpdateFailingIdentificationRepository:
    return UpdateFailingIdentificationRepository()
