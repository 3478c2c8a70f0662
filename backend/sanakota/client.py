"""HTTP client for the Sanakota words API.

One method per endpoint. Requests are issued once: no retries, caching or
request deduplication. Any non-2xx response raises ``ApiError``.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx

DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """Non-2xx response from the API; carries the status and body text."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def _drop_none(params: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None and value != ""}


class WordsClient:
    """Thin wrapper over ``httpx.Client``.

    Pass ``http_client`` to reuse a configured client (tests pass FastAPI's
    ``TestClient``); otherwise one is created for ``base_url``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "WordsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self._http.request(method, path, **kwargs)
        if not response.is_success:
            raise ApiError(response.status_code, response.text)
        return response.json()

    def list(
        self,
        lemma: Optional[str] = None,
        pos: Optional[str] = None,
        lexical_category: Optional[str] = None,
        translation: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> dict:
        params = _drop_none(
            {
                "lemma": lemma,
                "pos": pos,
                "lexical_category": lexical_category,
                "translation": translation,
                "limit": limit,
                "offset": offset,
            }
        )
        return self._request("GET", "/api/words", params=params)

    def search(self, q: str, limit: int = 10) -> dict:
        return self._request("GET", "/api/words/search", params={"q": q, "limit": limit})

    def stats(self) -> dict:
        return self._request("GET", "/api/words/stats")

    def list_by_pos(self, pos: str, limit: int = 20, offset: int = 0) -> dict:
        return self._request(
            "GET",
            f"/api/words/pos/{quote(pos, safe='')}",
            params={"limit": limit, "offset": offset},
        )

    def list_by_category(self, category: str, limit: int = 20, offset: int = 0) -> dict:
        return self._request(
            "GET",
            f"/api/words/category/{quote(category, safe='')}",
            params={"limit": limit, "offset": offset},
        )

    def get(self, word_id: int) -> dict:
        return self._request("GET", f"/api/words/{word_id}")

    def get_by_lemma(self, lemma: str) -> dict:
        return self._request("GET", f"/api/words/lemma/{quote(lemma, safe='')}")

    def create(self, body: dict) -> dict:
        return self._request("POST", "/api/words", json=body)

    def update(self, word_id: int, changes: dict) -> dict:
        return self._request("PUT", f"/api/words/{word_id}", json=changes)

    def delete(self, word_id: int) -> dict:
        return self._request("DELETE", f"/api/words/{word_id}")

    def health(self) -> dict:
        return self._request("GET", "/health")
