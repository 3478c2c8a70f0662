"""Exception hierarchy shared by the repository, service and batch tools."""


class SanakotaError(Exception):
    """Base exception for all sanakota errors."""


class ValidationError(SanakotaError):
    """Missing or malformed input (empty lemma, blank search term)."""


class WordNotFoundError(SanakotaError):
    """No entry exists for the requested id or lemma."""

    def __init__(self, key):
        super().__init__(f"Word {key} not found")
        self.key = key


class StoreError(SanakotaError):
    """The database connection or a query failed."""


class MorphologyError(SanakotaError):
    """The morphological generator is unconfigured or failed."""
