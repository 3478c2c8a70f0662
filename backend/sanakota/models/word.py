from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, JSON, Column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WordBase(SQLModel):
    """Shared scalar fields for word data."""

    lemma: str = Field(index=True)
    pos: str = Field(index=True)
    translation: Optional[str] = None
    definition: Optional[str] = None
    lexical_category: Optional[str] = Field(default=None, index=True)


class Word(WordBase, table=True):
    """Dictionary entry database model."""

    __tablename__ = "words"

    id: Optional[int] = Field(default=None, primary_key=True)
    synonyms: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    inflections: dict[str, str] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    example_sentences: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class WordRead(WordBase):
    """Schema for word responses."""

    id: int
    synonyms: list[str] = []
    inflections: dict[str, str] = {}
    example_sentences: list[str] = []
    created_at: datetime
    updated_at: datetime


class WordCreate(SQLModel):
    """Schema for creating a word.

    ``lemma`` and ``pos`` are optional here so that the service can reject
    missing values with its own message instead of a generic parse error.
    """

    lemma: Optional[str] = None
    pos: Optional[str] = None
    translation: Optional[str] = None
    definition: Optional[str] = None
    synonyms: Optional[list[str]] = None
    inflections: Optional[dict[str, str]] = None
    lexical_category: Optional[str] = None
    example_sentences: Optional[list[str]] = None


class WordUpdate(WordCreate):
    """Schema for a partial update. Only fields present in the body apply."""


class WordFilters(SQLModel):
    """Filters for listing words."""

    lemma: Optional[str] = None
    pos: Optional[str] = None
    lexical_category: Optional[str] = None
    translation: Optional[str] = None
    limit: int = 20
    offset: int = 0


class WordStats(SQLModel):
    """Aggregate counts over the words table."""

    total_words: int
    unique_pos: int
    unique_categories: int
    first_word_date: Optional[datetime] = None
    last_word_date: Optional[datetime] = None


# Response envelopes
class WordResponse(SQLModel):
    success: bool = True
    data: WordRead


class WordMessageResponse(WordResponse):
    message: str


class WordListResponse(SQLModel):
    success: bool = True
    data: list[WordRead]
    count: int


class FilteredWordListResponse(WordListResponse):
    filters: WordFilters


class SearchResponse(WordListResponse):
    query: str


class PosWordListResponse(WordListResponse):
    pos: str


class CategoryWordListResponse(WordListResponse):
    category: str


class StatsResponse(SQLModel):
    success: bool = True
    data: WordStats


class MessageResponse(SQLModel):
    success: bool = True
    message: str
