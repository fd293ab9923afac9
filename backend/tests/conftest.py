"""
Shared fixtures for the Asset Vault test suite.

Every test gets its own SQLite file database and uploads directory; the
expiration sweep runs against a fixed clock and a recording mail sender.
"""

import os
import threading
from datetime import datetime, timezone

# Settings are read at import time
TEST_KEY_HEX = "0f" * 32
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = TEST_KEY_HEX
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-with-enough-length-for-hs256"

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from assetvault.core.config import settings  # noqa: E402
from assetvault.core.database import build_engine, build_session_factory, create_tables  # noqa: E402
from assetvault.core.encryption import FieldEncryption  # noqa: E402
from assetvault.core.security import SUPERADMIN_ROLE, AuthenticatedUser  # noqa: E402
from assetvault.models import Client, User  # noqa: E402
from assetvault.services.assets import AssetService  # noqa: E402
from assetvault.services.file_storage import LocalFileStorage  # noqa: E402
from assetvault.services.showrooms import ShowroomService  # noqa: E402

TENANT_ID = "tenant-1"
OTHER_TENANT_ID = "tenant-2"
FIXED_NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


class RecordingMailSender:
    """Mail sender that records messages and fails for chosen addresses"""

    def __init__(self):
        self.sent = []
        self.failing = set()
        self.raising = set()
        self._lock = threading.Lock()

    def send(self, to, subject, body):
        if to in self.raising:
            raise ConnectionError(f"relay unreachable for {to}")
        if to in self.failing:
            return False
        with self._lock:
            self.sent.append((to, subject, body))
        return True

    @property
    def recipients(self):
        return sorted(to for to, _, _ in self.sent)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'vault.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def encryption():
    return FieldEncryption(bytes.fromhex(TEST_KEY_HEX))


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


@pytest.fixture
def mail_sender():
    return RecordingMailSender()


@pytest.fixture
def client_record(db):
    client = Client(name="Acme Corp", tenant_id=TENANT_ID)
    db.add(client)
    db.commit()
    return client


@pytest.fixture
def other_client_record(db):
    client = Client(name="Globex", tenant_id=TENANT_ID)
    db.add(client)
    db.commit()
    return client


@pytest.fixture
def tenant_users(db, client_record):
    """Two active users and one inactive user of the tenant"""
    users = [
        User(email="alice@acme.test", name="Alice", tenant_id=TENANT_ID, client_id=client_record.id),
        User(email="bob@acme.test", name="Bob", tenant_id=TENANT_ID, client_id=client_record.id),
        User(email="carol@acme.test", name="Carol", tenant_id=TENANT_ID, client_id=client_record.id,
             is_active=False),
    ]
    db.add_all(users)
    db.commit()
    return users


@pytest.fixture
def owner(client_record):
    return AuthenticatedUser(user_id="user-1", tenant_id=TENANT_ID, client_id=client_record.id)


@pytest.fixture
def stranger(other_client_record):
    """User of the same tenant bound to a different client"""
    return AuthenticatedUser(user_id="user-2", tenant_id=TENANT_ID, client_id=other_client_record.id)


@pytest.fixture
def foreign_tenant_user(client_record):
    """User of another tenant carrying the owner's client id"""
    return AuthenticatedUser(user_id="user-4", tenant_id=OTHER_TENANT_ID, client_id=client_record.id)


@pytest.fixture
def unscoped_user():
    return AuthenticatedUser(user_id="user-3", tenant_id=TENANT_ID)


@pytest.fixture
def superadmin():
    return AuthenticatedUser(user_id="admin-1", tenant_id=TENANT_ID, role_name=SUPERADMIN_ROLE)


@pytest.fixture
def asset_service(db, encryption, storage):
    return AssetService(db, encryption, storage)


@pytest.fixture
def showroom_service(db, encryption, storage):
    return ShowroomService(db, encryption, storage)


def make_token(user: AuthenticatedUser) -> str:
    claims = {"sub": user.user_id, "tenantId": user.tenant_id, "roleName": user.role_name}
    if user.client_id:
        claims["clientId"] = user.client_id
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user: AuthenticatedUser) -> dict:
    return {"Authorization": f"Bearer {make_token(user)}"}


@pytest.fixture
def api(session_factory, encryption, storage):
    """TestClient over an app wired to the per-test database and storage"""
    from assetvault.main import create_app

    app = create_app(session_factory=session_factory, encryption=encryption, storage=storage)
    with TestClient(app) as client:
        yield client
