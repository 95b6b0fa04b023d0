import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from data.database import Base, engine, Tenant
from main import app
from services.cache import get_cache_client, get_mock_cache_client

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True, scope="session")
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def cache_client():
    """A fresh in-memory cache per test so tenant lookups and rate limits don't leak."""
    cache = get_mock_cache_client()
    app.dependency_overrides[get_cache_client] = lambda: cache
    yield cache
    app.dependency_overrides.pop(get_cache_client, None)

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

def make_tenant(db, name: str) -> Tenant:
    tenant = Tenant(name=name)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant

@pytest.fixture
def tenant(db_session):
    return make_tenant(db_session, "Acme Corp")

@pytest.fixture
def other_tenant(db_session):
    return make_tenant(db_session, "Demo Company")

@pytest.fixture
def headers(tenant):
    return {"X-API-Key": tenant.api_key}
