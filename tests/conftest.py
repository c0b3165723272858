import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from streetcode.db.models.audios import Audio
from streetcode.db.models.streetcodes import StreetcodeContent
from streetcode.db.repositories.base import TrackedSession
from streetcode.features.blobs.storage import LocalBlobStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with TrackedSession(engine) as session:
        yield session


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(root=str(tmp_path / "blobs"))
