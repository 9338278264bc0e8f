import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "rustspace_test_logs"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.core.database import Base, get_session, session_scope
from src.core.models import User
from src.core.services.token import TokenService


@pytest.fixture
def token_service():
    return TokenService("test-secret-key", expire_minutes=60)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def users(db):
    """alice, bobby and carol, committed"""
    accounts = {}
    for name in ("alice", "bobby", "carol"):
        user = User(screen_name=name, email=f"{name}@example.com", password="not-a-hash")
        db.add(user)
        accounts[name] = user
    await db.commit()
    return accounts


@pytest_asyncio.fixture
async def client(session_factory, token_service):
    from src.core import auth
    from src.main import app

    async def override_get_session():
        async with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[auth.get_token_service] = lambda: token_service
    auth._token_service = token_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    auth._token_service = None


@pytest.fixture
def auth_headers(token_service):
    def build(name):
        token, _ = token_service.issue_token(name)
        return {"Cookie": f"Token={token}"}
    return build
