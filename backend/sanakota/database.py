import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from sanakota.config import Settings

logger = logging.getLogger(__name__)

# SQLite keeps an external-content FTS5 table in sync with words via triggers.
SQLITE_SEARCH_DDL = [
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS words_fts USING fts5(
        lemma, definition, content='words', content_rowid='id', tokenize='porter unicode61'
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS words_fts_ai AFTER INSERT ON words BEGIN
        INSERT INTO words_fts(rowid, lemma, definition) VALUES (new.id, new.lemma, new.definition);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS words_fts_ad AFTER DELETE ON words BEGIN
        INSERT INTO words_fts(words_fts, rowid, lemma, definition)
        VALUES ('delete', old.id, old.lemma, old.definition);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS words_fts_au AFTER UPDATE ON words BEGIN
        INSERT INTO words_fts(words_fts, rowid, lemma, definition)
        VALUES ('delete', old.id, old.lemma, old.definition);
        INSERT INTO words_fts(rowid, lemma, definition) VALUES (new.id, new.lemma, new.definition);
    END
    """,
]

POSTGRES_SEARCH_DDL = [
    """
    CREATE INDEX IF NOT EXISTS idx_words_search ON words
    USING gin(to_tsvector('english', lemma || ' ' || COALESCE(definition, '')))
    """,
]


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the pooled async engine from explicit settings."""
    url = make_url(settings.DATABASE_URL)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(url, echo=settings.DATABASE_ECHO, future=True)


def create_session_maker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables and the text-search index."""
    from sanakota.models.word import Word  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
        await create_search_index(conn)


async def create_search_index(conn: AsyncConnection) -> None:
    dialect = conn.dialect.name
    if dialect == "postgresql":
        statements = POSTGRES_SEARCH_DDL
    elif dialect == "sqlite":
        statements = SQLITE_SEARCH_DDL
    else:
        logger.warning("No text-search index for dialect %s", dialect)
        return
    for statement in statements:
        await conn.execute(text(statement))


async def check_connection(engine: AsyncEngine) -> bool:
    """Return True if a trivial query succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database check failed: %s", exc)
        return False


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting async database session."""
    async with request.app.state.session_maker() as session:
        yield session


@asynccontextmanager
async def database_session(settings: Settings) -> AsyncIterator[AsyncSession]:
    """Engine, schema and a single session for batch tools outside FastAPI."""
    engine = create_engine(settings)
    try:
        await init_db(engine)
        async with create_session_maker(engine)() as session:
            yield session
    finally:
        await engine.dispose()
