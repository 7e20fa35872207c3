"""
Pytest configuration file with shared fixtures.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import convochat.models  # noqa: F401  (registers the tables on Base.metadata)
from convochat.main import app
from convochat.db.database import Base, engine_options, get_db, utcnow
from convochat.api.deps import get_ai_gateway
from convochat.core.security import get_password_hash
from convochat.models.user import User
from convochat.repositories.conversation_store import ConversationStore
from convochat.repositories.user_repository import UserRepository
from convochat.services.ai_gateway import AIGateway
from convochat.services.chat_orchestrator import ChatOrchestrator
from convochat.services.user_service import UserService


class FakeChatModel:
    """
    Stand-in for a langchain chat model.

    Replies are handed out in order (the last one repeats); ``error`` is raised
    instead when set. Every message list passed to ``ainvoke`` is recorded.
    """

    def __init__(self, replies=None, error=None, delay=0.0):
        self.replies = list(replies or ["Hello from the model"])
        self.error = error
        self.delay = delay
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return AIMessage(content=content)


@pytest.fixture(scope="function")
def database_url(tmp_path):
    """
    Create a fresh SQLite database file with the schema for each test.
    """
    path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(bind=sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture(scope="function")
def session_factory(database_url):
    # NullPool: every session opens its own connection on the running loop
    engine = create_async_engine(database_url, poolclass=NullPool, **engine_options(database_url))
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture(scope="function")
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def fake_llm():
    return FakeChatModel()


@pytest.fixture(scope="function")
def gateway(fake_llm):
    return AIGateway(api_key="test-key", llm=fake_llm, timeout_ms=2000)


@pytest.fixture(scope="function")
def store(db):
    return ConversationStore(db)


@pytest.fixture(scope="function")
def orchestrator(store, gateway):
    return ChatOrchestrator(store, gateway)


@pytest.fixture(scope="function")
def user_service(db):
    return UserService(UserRepository(db))


async def create_user(db, username: str) -> User:
    now = utcnow()
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=get_password_hash("password"),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture(scope="function")
async def alice(db):
    return await create_user(db, "alice")


@pytest.fixture(scope="function")
async def bob(db):
    return await create_user(db, "bob")


@pytest.fixture(scope="function")
def client(session_factory, gateway):
    """
    Create a test client bound to the per-test database and the fake model.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_gateway] = lambda: gateway

    # Not entered as a context manager: tables already exist, so startup is skipped
    yield TestClient(app)

    app.dependency_overrides.clear()
