import os

os.environ.setdefault("MARKETPLACE_DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import marketplace.models  # noqa: F401,E402
from marketplace.auth.jwt import issue_access_token  # noqa: E402
from marketplace.config import settings  # noqa: E402
from marketplace.db.base import Base  # noqa: E402
from marketplace.db.session import engine as app_engine  # noqa: E402
from marketplace.db.session import get_db  # noqa: E402
from marketplace.main import app  # noqa: E402
from marketplace.observability import metrics_store  # noqa: E402

testing_session_local = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=app_engine
)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=app_engine)
    Base.metadata.create_all(bind=app_engine)
    yield


@pytest.fixture(autouse=True)
def reset_metrics_store():
    metrics_store.reset()
    yield


@pytest.fixture
def db_session():
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(role: str, sub: str) -> dict[str, str]:
        token = issue_access_token(sub, role, settings.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return {
        "buyer": _headers("BUYER", "buyer-1"),
        "other_buyer": _headers("BUYER", "buyer-2"),
        "seller": _headers("SELLER", "seller-1"),
        "admin": _headers("ADMIN", "admin-1"),
    }


@pytest.fixture(scope="session", autouse=True)
def enable_test_auth_bypass():
    original = settings.enable_test_auth_bypass
    settings.enable_test_auth_bypass = True
    yield
    settings.enable_test_auth_bypass = original


@pytest.fixture(scope="session", autouse=True)
def enable_testing_mode():
    original_testing = settings.testing
    original_mode = settings.app_mode
    settings.testing = True
    # demo mode seeds categories on startup
    settings.app_mode = "pilot"
    yield
    settings.testing = original_testing
    settings.app_mode = original_mode
