"""
Pytest Configuration and Shared Fixtures

Provides an in-memory store, a fake cache, a recording media host and a
TestClient wired to them through dependency overrides.
"""

import fnmatch
import os
from typing import Any, Dict, List, Optional

# Admin identity for the whole test session (read by the lru_cached configs)
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "correct-horse")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-with-enough-length")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from src.auth.config import get_auth_config
from src.cache.base import CacheBackend
from src.database.repository import DocumentRepository
from src.database.session import create_db_engine, get_db, init_db
from src.media.storage import MediaReference, MediaStorage, MediaStorageError, generate_external_id
from src.services.resource_service import ResourceService, UploadedFile


# ============================================================================
# Fakes
# ============================================================================

class FakeCache(CacheBackend):
    """In-memory cache with the same fail-open contract as RedisCache."""

    def __init__(self):
        self.store: Dict[str, Any] = {}
        self.gets: List[str] = []
        self.sets: List[str] = []
        self.deleted: List[str] = []
        self.patterns: List[str] = []

    async def get(self, key: str) -> Optional[Any]:
        self.gets.append(key)
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        self.sets.append(key)
        self.store[key] = value
        return True

    async def delete(self, key: str) -> bool:
        self.deleted.append(key)
        self.store.pop(key, None)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        self.patterns.append(pattern)
        matches = [k for k in self.store if fnmatch.fnmatchcase(k, pattern)]
        for key in matches:
            del self.store[key]
        return len(matches)

    async def health_check(self) -> dict:
        return {"healthy": True, "status": "connected"}


class FakeMediaStorage(MediaStorage):
    """Records every upload and delete; failures are switchable."""

    def __init__(self):
        self.uploads: List[MediaReference] = []
        self.deletes: List[str] = []
        self.fail_uploads_for = set()
        self.fail_deletes = False

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> MediaReference:
        if filename in self.fail_uploads_for:
            raise MediaStorageError(f"upload rejected: {filename}")
        external_id = generate_external_id(folder, filename)
        ref = MediaReference(url=f"https://media.test/{external_id}", external_id=external_id)
        self.uploads.append(ref)
        return ref

    async def delete(self, external_id: str) -> None:
        self.deletes.append(external_id)
        if self.fail_deletes:
            raise MediaStorageError(f"delete rejected: {external_id}")


# ============================================================================
# Store
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def fake_media() -> FakeMediaStorage:
    return FakeMediaStorage()


@pytest.fixture
def make_service(db_session, fake_cache, fake_media):
    """Factory: ResourceService for a definition over the shared fakes."""

    def _make(definition, **kwargs) -> ResourceService:
        return ResourceService(
            definition,
            DocumentRepository(db_session, definition.model),
            fake_cache,
            media=fake_media,
            **kwargs,
        )

    return _make


@pytest.fixture
def png_file():
    def _make(name: str = "photo.png", size: int = 64) -> UploadedFile:
        return UploadedFile(filename=name, content_type="image/png", data=b"\x89PNG" + b"0" * size)
    return _make


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def client(session_factory, fake_cache, fake_media):
    """TestClient over the in-memory store and fakes (no lifespan)."""
    from api.dependencies import get_cache, get_media
    from api.main import app

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    async def _get_cache():
        return fake_cache

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cache] = _get_cache
    app.dependency_overrides[get_media] = lambda: fake_media

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    from src.auth.credentials import login

    config = get_auth_config()
    result = login(config.admin_username, config.admin_password)
    return {"Authorization": f"Bearer {result.token}"}
