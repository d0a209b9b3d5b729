import io
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure tests use an in-memory SQLite DB and never reach Dentalink
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["DENTALINK_API_KEY"] = ""

# Ensure the project root is on sys.path so `import dental_intake` works when
# running pytest from the repository root without an install.
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from dental_intake.app import app  # noqa: E402
from dental_intake.db.session import Base, get_db  # noqa: E402
from dental_intake.services import storage  # noqa: E402
from dental_intake.services.providers import NullBookingProvider, get_booking_provider  # noqa: E402


# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def create_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = _override_get_db
app.dependency_overrides[get_booking_provider] = NullBookingProvider


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    # ensure limiter state fresh each test
    app.state.limiter.reset()
    yield


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(storage, "DEFAULT_UPLOAD_DIR", target)
    return target


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("L", (16, 16), color=128).save(buf, format="PNG")
    return buf.getvalue()
