"""
Word service - validation in front of the word repository.

Turns absent entries into WordNotFoundError and bad input into
ValidationError. Store errors from the repository pass through unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

from sanakota.exceptions import ValidationError, WordNotFoundError
from sanakota.models.word import Word, WordCreate, WordFilters, WordStats, WordUpdate
from sanakota.repositories.words import WordRepository

REQUIRED_MESSAGE = "Lemma and part of speech are required"


def _check_non_empty(value: Any, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} must be a non-empty string")


class WordService:
    def __init__(self, repository: WordRepository):
        self.repository = repository

    async def list_words(self, filters: WordFilters) -> list[Word]:
        return await self.repository.find_all(filters)

    async def get_word(self, word_id: int) -> Word:
        word = await self.repository.find_by_id(word_id)
        if word is None:
            raise WordNotFoundError(word_id)
        return word

    async def get_word_by_lemma(self, lemma: str) -> Word:
        word = await self.repository.find_by_lemma(lemma)
        if word is None:
            raise WordNotFoundError(lemma)
        return word

    async def search(self, query: Optional[str], limit: int = 10) -> list[Word]:
        if query is None or not query.strip():
            raise ValidationError("Search query is required")
        return await self.repository.search(query.strip(), limit)

    async def words_by_pos(self, pos: str, limit: Optional[int] = None, offset: int = 0) -> list[Word]:
        return await self.repository.find_by_pos(pos, limit, offset)

    async def words_by_category(
        self, category: str, limit: Optional[int] = None, offset: int = 0
    ) -> list[Word]:
        return await self.repository.find_by_lexical_category(category, limit, offset)

    async def stats(self) -> WordStats:
        return await self.repository.get_stats()

    async def create_word(self, data: WordCreate) -> Word:
        """Create a word; lemma and pos must both be non-empty strings."""
        if not data.lemma or not data.pos:
            raise ValidationError(REQUIRED_MESSAGE)
        _check_non_empty(data.lemma, "Lemma")
        _check_non_empty(data.pos, "Part of speech")
        return await self.repository.create(data)

    async def update_word(self, word_id: int, changes: WordUpdate) -> Word:
        """Partial update; lemma and pos are validated only when present."""
        fields = changes.model_dump(exclude_unset=True)
        if "lemma" in fields:
            _check_non_empty(fields["lemma"], "Lemma")
        if "pos" in fields:
            _check_non_empty(fields["pos"], "Part of speech")

        word = await self.repository.update(word_id, fields)
        if word is None:
            raise WordNotFoundError(word_id)
        return word

    async def delete_word(self, word_id: int) -> None:
        if not await self.repository.delete(word_id):
            raise WordNotFoundError(word_id)
