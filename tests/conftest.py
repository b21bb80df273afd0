from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Iterator
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENABLE_TRACING", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from quickride.api.deps import get_db_session  # noqa: E402
from quickride.core.config import get_settings  # noqa: E402
from quickride.db.seed import seed_reference_data  # noqa: E402
from quickride.main import app  # noqa: E402
from quickride.models import Base, BusinessRole, Shareholder, ShareholderStatus  # noqa: E402
from quickride.obs import AuditMiddleware  # noqa: E402
from quickride.services.lifecycle import Registration, ShareholderLifecycle  # noqa: E402
from quickride.services.security import BcryptPasswordHasher  # noqa: E402


class InMemoryS3Client:
    """Simple in-memory S3 stub used by the audit middleware during tests."""

    exceptions = SimpleNamespace(NoSuchKey=type("NoSuchKey", (Exception,), {}))

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "NoSuchBucket"}}, "GetObject")
        bucket = self._buckets[Bucket]
        if Key not in bucket:
            raise self.exceptions.NoSuchKey()
        return {"Body": BytesIO(bucket[Key])}

    def put_object(self, *, Bucket: str, Key: str, Body: bytes | str, **_: object) -> dict[str, str]:
        bucket = self._buckets.setdefault(Bucket, {})
        bucket[Key] = Body.encode("utf-8") if isinstance(Body, str) else Body
        return {"ETag": "in-memory"}

    @property
    def buckets(self) -> dict[str, dict[str, bytes]]:
        return self._buckets


engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _sqlite_foreign_keys(dbapi_connection, _record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def audit_s3_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemoryS3Client]:
    client = InMemoryS3Client()

    def _client_factory(*args: object, **kwargs: object) -> InMemoryS3Client:
        return client

    monkeypatch.setattr("quickride.obs.audit.boto3.client", _client_factory)
    stack = getattr(app, "middleware_stack", None)
    middleware = getattr(stack, "app", None)
    while middleware is not None and hasattr(middleware, "app"):
        if isinstance(middleware, AuditMiddleware):
            middleware._s3_client = None
            middleware._bucket_ready = False
        middleware = getattr(middleware, "app", None)
    yield client


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    seed_reference_data(session, get_settings())

    yield session
    session.close()


@pytest.fixture()
def make_shareholder(db_session: Session, hasher: BcryptPasswordHasher):
    """Register a shareholder through the lifecycle and optionally approve it."""

    counter = {"value": 0}

    def _make(
        *,
        num_shares: int = 10,
        status: ShareholderStatus = ShareholderStatus.APPROVED,
        role: BusinessRole = BusinessRole.DRIVER,
        password: str = "secret-pass",
        **overrides: object,
    ) -> Shareholder:
        counter["value"] += 1
        index = counter["value"]
        fields: dict[str, object] = {
            "full_name": f"Investor {index}",
            "father_name": f"Parent {index}",
            "address": f"{index} MG Marg, Gangtok",
            "pin_code": "737101",
            "phone": f"+91 99000 0000{index}",
            "email": f"investor{index}@example.com",
            "username": f"investor{index}",
            "password": password,
            "num_shares": num_shares,
            "business_role": role,
        }
        fields.update(overrides)
        lifecycle = ShareholderLifecycle(db_session, hasher=hasher)
        shareholder = asyncio.run(lifecycle.register(Registration(**fields)))
        if status != ShareholderStatus.PENDING:
            shareholder = lifecycle.set_status(shareholder.id, status)
        return shareholder

    return _make


@pytest.fixture()
def client(db_session: Session, audit_s3_client: InMemoryS3Client) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db_session, None)


def _login(client: TestClient, username: str, password: str) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers(client: TestClient) -> dict[str, str]:
    settings = get_settings()
    return _login(client, settings.admin_username, settings.admin_password)


@pytest.fixture()
def login(client: TestClient):
    def _do(username: str, password: str) -> dict[str, str]:
        return _login(client, username, password)

    return _do
