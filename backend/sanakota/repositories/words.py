"""Word repository.

The only component that touches the words table. Translates filters and
mutations into SQL, and surfaces every database failure as ``StoreError``
with the driver message passed through.
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Union

from sqlalchemy import String, cast, column, delete, func, literal_column, or_, select, table, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sanakota.exceptions import StoreError, ValidationError
from sanakota.models.word import Word, WordCreate, WordFilters, WordStats, WordUpdate, utc_now

logger = logging.getLogger(__name__)

# Structured columns and the empty value they fall back to.
CONTAINER_FIELDS = {
    "synonyms": list,
    "inflections": dict,
    "example_sentences": list,
}
UPDATABLE_FIELDS = frozenset(WordUpdate.model_fields)

SEARCH_TOKEN_RE = re.compile(r"\w+", re.UNICODE)

# Largest integer key either backend can store (signed 64-bit)
MAX_ROW_ID = 2**63 - 1

# SQLite full-text table maintained by triggers (see database.SQLITE_SEARCH_DDL)
words_fts = table("words_fts", column("rowid"))


def storable_id(word_id: int) -> bool:
    return -MAX_ROW_ID <= word_id <= MAX_ROW_ID


def like_pattern(value: str) -> str:
    """Substring LIKE pattern with wildcard characters escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def fts5_match_query(term: str) -> Optional[str]:
    """Turn free text into an FTS5 query matching all of its words."""
    tokens = SEARCH_TOKEN_RE.findall(term)
    if not tokens:
        return None
    return " ".join(f'"{token}"' for token in tokens)


class WordRepository:
    """Query/command layer over the words table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _store(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Store failure during %s: %s", operation, exc)
            if isinstance(exc, SQLAlchemyError):
                await self.session.rollback()
            raise StoreError(str(exc)) from exc

    @property
    def dialect(self) -> str:
        return self.session.bind.dialect.name

    async def find_all(self, filters: Optional[WordFilters] = None) -> list[Word]:
        """List words, newest first.

        ``lemma`` and ``translation`` are case-insensitive substring filters,
        ``pos`` and ``lexical_category`` are exact.
        """
        filters = filters or WordFilters()
        stmt = select(Word)
        if filters.lemma:
            stmt = stmt.where(Word.lemma.ilike(like_pattern(filters.lemma), escape="\\"))
        if filters.pos:
            stmt = stmt.where(Word.pos == filters.pos)
        if filters.translation:
            stmt = stmt.where(Word.translation.ilike(like_pattern(filters.translation), escape="\\"))
        if filters.lexical_category:
            stmt = stmt.where(Word.lexical_category == filters.lexical_category)

        stmt = stmt.order_by(Word.created_at.desc(), Word.id.desc()).offset(filters.offset)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)

        async with self._store("find_all"):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def find_by_id(self, word_id: int) -> Optional[Word]:
        if not storable_id(word_id):
            return None
        async with self._store("find_by_id"):
            return await self.session.get(Word, word_id)

    async def find_by_lemma(self, lemma: str) -> Optional[Word]:
        """First entry whose lemma equals ``lemma`` ignoring case."""
        stmt = (
            select(Word)
            .where(func.lower(Word.lemma) == lemma.lower())
            .order_by(Word.id)
            .limit(1)
        )
        async with self._store("find_by_lemma"):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def search(self, term: str, limit: int = 10) -> list[Word]:
        """Full-text search over lemma and definition, most relevant first.

        Ranking is done by the database: ``ts_rank`` on PostgreSQL and
        ``bm25`` over the FTS5 table on SQLite.
        """
        if self.dialect == "postgresql":
            document = func.to_tsvector(
                "english", Word.lemma + " " + func.coalesce(Word.definition, "")
            )
            query = func.plainto_tsquery("english", term)
            stmt = (
                select(Word)
                .where(document.op("@@")(query))
                .order_by(func.ts_rank(document, query).desc(), Word.id)
                .limit(limit)
            )
        elif self.dialect == "sqlite":
            match = fts5_match_query(term)
            if match is None:
                return []
            stmt = (
                select(Word)
                .join(words_fts, words_fts.c.rowid == Word.id)
                .where(text("words_fts MATCH :match").bindparams(match=match))
                .order_by(func.bm25(literal_column("words_fts")), Word.id)
                .limit(limit)
            )
        else:
            pattern = like_pattern(term)
            stmt = (
                select(Word)
                .where(or_(Word.lemma.ilike(pattern, escape="\\"), Word.definition.ilike(pattern, escape="\\")))
                .order_by(Word.lemma)
                .limit(limit)
            )

        async with self._store("search"):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def find_by_pos(self, pos: str, limit: Optional[int] = None, offset: int = 0) -> list[Word]:
        return await self._find_exact(Word.pos, pos, limit, offset, "find_by_pos")

    async def find_by_lexical_category(
        self, category: str, limit: Optional[int] = None, offset: int = 0
    ) -> list[Word]:
        return await self._find_exact(
            Word.lexical_category, category, limit, offset, "find_by_lexical_category"
        )

    async def _find_exact(self, attribute, value: str, limit, offset: int, operation: str) -> list[Word]:
        stmt = select(Word).where(attribute == value).order_by(Word.lemma, Word.id).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._store(operation):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())

    async def create(self, data: Union[WordCreate, dict[str, Any]]) -> Word:
        """Insert a new entry. Omitted containers are stored empty."""
        values = data.model_dump() if isinstance(data, WordCreate) else dict(data)
        word = Word(**{key: value for key, value in values.items() if value is not None})

        async with self._store("create"):
            self.session.add(word)
            await self.session.commit()
            await self.session.refresh(word)
        return word

    async def update(self, word_id: int, changes: Union[WordUpdate, dict[str, Any]]) -> Optional[Word]:
        """Apply a partial update.

        Only keys present in ``changes`` are written; an explicit ``None`` on
        a container resets it to empty. ``updated_at`` is always refreshed.
        Returns None if there is no entry with ``word_id``.
        """
        if isinstance(changes, WordUpdate):
            changes = changes.model_dump(exclude_unset=True)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        if not storable_id(word_id):
            return None

        async with self._store("update"):
            word = await self.session.get(Word, word_id)
            if word is None:
                return None

            for field, value in changes.items():
                if value is None and field in CONTAINER_FIELDS:
                    value = CONTAINER_FIELDS[field]()
                setattr(word, field, value)
            word.updated_at = utc_now()

            await self.session.commit()
            await self.session.refresh(word)
        return word

    async def delete(self, word_id: int) -> bool:
        """Hard delete. Returns True if a row was removed."""
        if not storable_id(word_id):
            return False
        async with self._store("delete"):
            word = await self.session.get(Word, word_id)
            if word is None:
                return False
            await self.session.delete(word)
            await self.session.commit()
        return True

    async def delete_all(self) -> int:
        async with self._store("delete_all"):
            result = await self.session.execute(delete(Word))
            await self.session.commit()
        self.session.expunge_all()
        return result.rowcount

    async def get_stats(self) -> WordStats:
        stmt = select(
            func.count(Word.id),
            func.count(func.distinct(Word.pos)),
            func.count(func.distinct(Word.lexical_category)),
            func.min(Word.created_at),
            func.max(Word.created_at),
        )
        async with self._store("get_stats"):
            row = (await self.session.execute(stmt)).one()

        total_words, unique_pos, unique_categories, first, last = row
        return WordStats(
            total_words=total_words,
            unique_pos=unique_pos,
            unique_categories=unique_categories,
            first_word_date=first,
            last_word_date=last,
        )

    async def find_for_inflection(
        self,
        pos: Optional[str] = None,
        only_missing: bool = False,
        limit: Optional[int] = 500,
        offset: int = 0,
    ) -> list[Word]:
        """Oldest-first page of entries for the inflection generator."""
        stmt = select(Word)
        if pos:
            stmt = stmt.where(Word.pos == pos)
        if only_missing:
            stmt = stmt.where(cast(Word.inflections, String) == "{}")
        stmt = stmt.order_by(Word.created_at, Word.id).offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        async with self._store("find_for_inflection"):
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
