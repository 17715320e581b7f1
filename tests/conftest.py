"""
pytest configuration and fixtures for Estate CRM tests.
"""
import asyncio
import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from estate_crm.core.clock import FixedClock
from estate_crm.database import init_db
from estate_crm.models.user import User

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def build_user(role: str, name: str = None) -> User:
    name = name or f"{role}-{uuid.uuid4().hex[:6]}"
    return User(
        id=uuid.uuid4(),
        username=name,
        password_hash="not-a-real-hash",
        name=name.title(),
        email=f"{name}@example.com",
        role=role,
    )


@pytest.fixture
def clock():
    """Clock frozen at NOW."""
    return FixedClock(NOW)


@pytest.fixture
def agent():
    return build_user("agent", "alice")


@pytest.fixture
def other_agent():
    return build_user("agent", "bob")


@pytest.fixture
def operator():
    return build_user("operator", "olivia")


@pytest.fixture
def admin():
    return build_user("admin", "adam")


@pytest.fixture
def run_db(tmp_path):
    """
    Run an async scenario against a fresh SQLite database.

    Usage: run_db(scenario) where scenario is `async def scenario(session)`.
    """
    def runner(scenario):
        async def main():
            engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}")
            await init_db(bind=engine)
            session_maker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            try:
                async with session_maker() as session:
                    return await scenario(session)
            finally:
                await engine.dispose()

        return asyncio.run(main())

    return runner
