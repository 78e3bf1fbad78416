"""
Pytest configuration and shared fixtures
"""

import io
import os
import tempfile

# settings are read at import time; keep the app away from the working directory
_TMP_ROOT = tempfile.mkdtemp(prefix="treefund-tests-")
os.environ.setdefault("FILE_STORAGE_PATH", os.path.join(_TMP_ROOT, "media"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_TMP_ROOT, 'app.db')}")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from starlette.datastructures import Headers, UploadFile

from core.cache import CampaignDataCache
from core.database import get_db, init_models
from core.dependencies import get_storage
from core.exceptions import StorageError
from main import create_app
from models.donation import Donation
from services.storage_service import FileStorage

# smallest valid PNG header is enough; content is never decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FailingStorage(FileStorage):
    """Storage whose uploads always fail."""

    async def upload(self, bucket, name, content, content_type=None, upsert=False):
        raise StorageError("bucket unavailable")


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> FileStorage:
    return FileStorage(root=str(tmp_path / "uploads"), base_url="http://testserver", media_prefix="/media")


@pytest.fixture
def failing_storage(tmp_path) -> FileStorage:
    return FailingStorage(root=str(tmp_path / "uploads"), base_url="http://testserver", media_prefix="/media")


@pytest.fixture
def cache() -> CampaignDataCache:
    return CampaignDataCache(ttl=15)


@pytest.fixture
def make_upload():
    def _make(content: bytes = PNG_BYTES, filename: str = "receipt.png", content_type: str = "image/png"):
        return UploadFile(
            file=io.BytesIO(content),
            filename=filename,
            headers=Headers({"content-type": content_type}),
        )

    return _make


@pytest.fixture
def count_donations():
    async def _count(session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(Donation))
        return result.scalar_one()

    return _count


@pytest.fixture
def app(session_factory, storage):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
