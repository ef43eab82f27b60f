import base64
import io
import time
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from files_manager.database import Base, get_db, init_db
from files_manager.dependencies import get_queue, get_session_store, get_storage
from files_manager.main import app
from files_manager.models.user_model import User
from files_manager.services.session_store import SessionStore
from files_manager.services.storage import LocalStorage
from files_manager.utils.auth import hash_password

DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(DATABASE_URL,
                       connect_args={
                           "check_same_thread": False,
                       },
                       poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class FakeRedis:
    """Dict backed stand-in for the few Redis commands the session store uses."""

    def __init__(self):
        self.data = {}
        self.offset = 0

    def _now(self):
        return time.monotonic() + self.offset

    def _live(self, key):
        item = self.data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at <= self._now():
            del self.data[key]
            return None
        return value

    def advance(self, seconds):
        self.offset += seconds

    def ping(self):
        return True

    def setex(self, key, ttl, value):
        self.data[key] = (str(value).encode(), self._now() + ttl)
        return True

    def get(self, key):
        return self._live(key)

    def ttl(self, key):
        if self._live(key) is None:
            return -2
        return round(self.data[key][1] - self._now())

    def delete(self, key):
        if self._live(key) is None:
            return 0
        del self.data[key]
        return 1


def override_get_db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def queue():
    return Mock()


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "files"


@pytest.fixture(autouse=True)
def overrides(fake_redis, queue, storage_root):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: SessionStore(fake_redis)
    app.dependency_overrides[get_queue] = lambda: queue
    app.dependency_overrides[get_storage] = lambda: LocalStorage(str(storage_root))
    yield
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def setup_and_teardown():
    init_db(engine)
    session = TestingSessionLocal()
    db_user = User(email="user@example.com", password_hash=hash_password("password"))
    session.add(db_user)
    session.commit()
    session.close()

    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    database = TestingSessionLocal()
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def client():
    return TestClient(app)


def basic_auth(email, password):
    raw = base64.b64encode(f"{email}:{password}".encode()).decode()
    return {"Authorization": f"Basic {raw}"}


@pytest.fixture
def token(client):
    response = client.get("/connect", headers=basic_auth("user@example.com", "password"))
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"X-Token": token}


def make_png(width=800, height=600, color=(200, 30, 30)):
    output = io.BytesIO()
    Image.new("RGB", (width, height), color).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def png_b64():
    return base64.b64encode(make_png()).decode()
