"""Word endpoints: listing, search, stats and CRUD.

Errors raised by the service are turned into the error envelope by the
exception handlers registered in ``sanakota.main``.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sanakota.database import get_session
from sanakota.models.word import (
    CategoryWordListResponse,
    FilteredWordListResponse,
    MessageResponse,
    PosWordListResponse,
    SearchResponse,
    StatsResponse,
    Word,
    WordCreate,
    WordFilters,
    WordMessageResponse,
    WordRead,
    WordResponse,
    WordUpdate,
)
from sanakota.repositories.words import WordRepository
from sanakota.services.words import WordService

router = APIRouter()

MAX_PAGE_SIZE = 1000


def get_word_service(session: Annotated[AsyncSession, Depends(get_session)]) -> WordService:
    return WordService(WordRepository(session))


WordServiceDep = Annotated[WordService, Depends(get_word_service)]


def to_read(words: list[Word]) -> list[WordRead]:
    return [WordRead.model_validate(word) for word in words]


@router.get("/words", response_model=FilteredWordListResponse)
async def list_words(
    service: WordServiceDep,
    lemma: Optional[str] = None,
    pos: Optional[str] = None,
    lexical_category: Optional[str] = None,
    translation: Optional[str] = None,
    limit: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
):
    """List words, newest first, with optional filters."""
    filters = WordFilters(
        lemma=lemma,
        pos=pos,
        lexical_category=lexical_category,
        translation=translation,
        limit=limit,
        offset=offset,
    )
    words = await service.list_words(filters)
    return FilteredWordListResponse(data=to_read(words), count=len(words), filters=filters)


@router.get("/words/search", response_model=SearchResponse)
async def search_words(
    service: WordServiceDep,
    q: Optional[str] = None,
    limit: int = Query(default=10, ge=1, le=100),
):
    """Full-text search over lemma and definition, most relevant first."""
    words = await service.search(q, limit)
    return SearchResponse(data=to_read(words), count=len(words), query=q)


@router.get("/words/stats", response_model=StatsResponse)
async def get_stats(service: WordServiceDep):
    return StatsResponse(data=await service.stats())


@router.get("/words/pos/{pos}", response_model=PosWordListResponse)
async def words_by_pos(
    pos: str,
    service: WordServiceDep,
    limit: Optional[int] = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
):
    words = await service.words_by_pos(pos, limit, offset)
    return PosWordListResponse(data=to_read(words), count=len(words), pos=pos)


@router.get("/words/category/{category}", response_model=CategoryWordListResponse)
async def words_by_category(
    category: str,
    service: WordServiceDep,
    limit: Optional[int] = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
):
    words = await service.words_by_category(category, limit, offset)
    return CategoryWordListResponse(data=to_read(words), count=len(words), category=category)


@router.get("/words/lemma/{lemma}", response_model=WordResponse)
async def get_word_by_lemma(lemma: str, service: WordServiceDep):
    """Look up a word by its exact lemma, ignoring case."""
    word = await service.get_word_by_lemma(lemma)
    return WordResponse(data=WordRead.model_validate(word))


@router.get("/words/{word_id}", response_model=WordResponse)
async def get_word(word_id: int, service: WordServiceDep):
    word = await service.get_word(word_id)
    return WordResponse(data=WordRead.model_validate(word))


@router.post("/words", response_model=WordMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_word(data: WordCreate, service: WordServiceDep):
    """
    Create a new word.

    - **lemma**: Dictionary form (required)
    - **pos**: Part of speech (required)
    - **synonyms**, **inflections**, **example_sentences**: default to empty
    """
    word = await service.create_word(data)
    return WordMessageResponse(data=WordRead.model_validate(word), message="Word created successfully")


@router.put("/words/{word_id}", response_model=WordMessageResponse)
async def update_word(word_id: int, changes: WordUpdate, service: WordServiceDep):
    """Update only the fields present in the request body."""
    word = await service.update_word(word_id, changes)
    return WordMessageResponse(data=WordRead.model_validate(word), message="Word updated successfully")


@router.delete("/words/{word_id}", response_model=MessageResponse)
async def delete_word(word_id: int, service: WordServiceDep):
    await service.delete_word(word_id)
    return MessageResponse(message="Word deleted successfully")
