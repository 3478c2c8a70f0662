from sanakota.models.word import (
    Word,
    WordRead,
    WordCreate,
    WordUpdate,
    WordFilters,
    WordStats,
)

__all__ = [
    "Word",
    "WordRead",
    "WordCreate",
    "WordUpdate",
    "WordFilters",
    "WordStats",
]
