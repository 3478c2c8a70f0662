"""Shared test fixtures: a throwaway SQLite database per test."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from sanakota.config import Settings
from sanakota.database import create_engine, create_session_maker, init_db
from sanakota.main import create_app
from sanakota.repositories.words import WordRepository


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file, ignoring any .env."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'sanakota.db'}",
        OMORFI_GENERATOR_PATH="",
    )


@pytest_asyncio.fixture
async def session(settings):
    engine = create_engine(settings)
    await init_db(engine)
    async with create_session_maker(engine)() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repository(session):
    return WordRepository(session)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan that creates the schema."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def kala():
    return {
        "lemma": "kala",
        "pos": "noun",
        "translation": "fish",
        "definition": "cold-blooded aquatic vertebrate",
        "synonyms": ["kala", "kalanen"],
        "inflections": {"Sg_Nom": "kala", "Sg_Gen": "kalan"},
        "lexical_category": "noun.animal",
        "example_sentences": ["Kala ui järvessä."],
    }
