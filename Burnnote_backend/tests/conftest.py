"""
Pytest fixtures: isolated SQLite databases per test, a configured app and a
fake summarizer standing in for the external AI endpoint.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.database import build_engine, build_session_factory, create_tables
from app.main import create_app


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATABASE_PATH=str(tmp_path / "test.db"),
        DATABASE_URL="",
        ADMIN_KEY="",
        ADMIN_KEYS="abc,xyz",
        TENANT_ISOLATION=True,
        AUTH_DEBUG=False,
        AI_API_BASE="",
        AI_API_KEY="",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeSummarizer:
    def __init__(self, reply: str = "a short summary"):
        self.reply = reply
        self.calls = []

    async def __call__(self, system: str, text: str) -> str:
        self.calls.append((system, text))
        return self.reply


@pytest.fixture
def config(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides) -> Settings:
        return make_settings(tmp_path, **overrides)
    return _make


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def app(config, summarizer):
    return create_app(config, summarizer=summarizer)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(make_settings(tmp_path, DATABASE_PATH=str(tmp_path / "store.db")))
    await create_tables(engine)
    yield build_session_factory(engine)
    await engine.dispose()
