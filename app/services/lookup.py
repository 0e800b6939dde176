"""
City and street lookup against the public CKAN ``datastore_search`` API.

Queries shorter than two characters never reach the network. Results are
de-duplicated by code and capped at the configured limit.

``RowSearch`` sits between a single address row and the client: it debounces
keystrokes, keeps at most one query in flight, and turns superseded or stale
queries into empty results.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from app.config import Settings, settings as default_settings
from app.exceptions import LookupServiceError
from app.schemas.api import Candidate

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEBOUNCE_SECONDS = 0.35

CITY_CODE_FIELD = "סמל_ישוב"
CITY_NAME_FIELD = "שם_ישוב"
STREET_CODE_FIELD = "סמל_רחוב"
STREET_NAME_FIELD = "שם_רחוב"


def is_searchable(query: str | None) -> bool:
    return bool(query) and len(query.strip()) >= MIN_QUERY_LENGTH


class LookupClient:
    """Async client for the city and street datasets."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self.settings.HTTP_TIMEOUT_SECONDS),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def search(self, text: str, city_code: str | None = None) -> list[Candidate]:
        """Streets of ``city_code`` when one is given, cities otherwise."""
        if city_code is None:
            return await self.search_cities(text)
        return await self.search_streets(text, city_code)

    async def search_cities(self, query: str) -> list[Candidate]:
        if not is_searchable(query):
            return []
        query = query.strip()
        logger.info("Fetching cities for query %r", query)

        records = await self._datastore_search(
            self.settings.CITIES_API_URL,
            {"resource_id": self.settings.CITIES_RESOURCE_ID, "q": query},
            what="cities",
        )
        return self._unique(records, CITY_CODE_FIELD, CITY_NAME_FIELD)

    async def search_streets(self, query: str, city_code: str) -> list[Candidate]:
        if not is_searchable(query):
            return []
        if not city_code:
            raise ValueError("City code is required to fetch streets.")
        query = query.strip()
        logger.info("Fetching streets for query %r in city %s", query, city_code)

        records = await self._datastore_search(
            self.settings.STREETS_API_URL,
            {
                "resource_id": self.settings.STREETS_RESOURCE_ID,
                "q": query,
                "filters": json.dumps({CITY_CODE_FIELD: city_code}, ensure_ascii=False),
            },
            what="streets",
        )
        return self._unique(records, STREET_CODE_FIELD, STREET_NAME_FIELD)

    async def _datastore_search(
        self, url: str, params: dict[str, Any], *, what: str
    ) -> list[dict[str, Any]]:
        client = await self._get_client()
        params = {**params, "limit": self.settings.LOOKUP_RESULT_LIMIT}

        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Error fetching %s: %s", what, e)
            raise LookupServiceError(f"Could not load {what}. Please try again.") from e
        except ValueError as e:
            logger.error("Malformed response fetching %s: %s", what, e)
            raise LookupServiceError(f"Could not load {what}. Please try again.") from e

        if not isinstance(data, dict) or not data.get("success"):
            logger.error("Lookup API reported failure fetching %s: %s", what, data)
            raise LookupServiceError(f"The {what} service returned an error.")

        result = data.get("result")
        records = result.get("records") if isinstance(result, dict) else None
        if not isinstance(records, list):
            logger.error("Lookup API returned no records list for %s", what)
            raise LookupServiceError(f"The {what} service returned an error.")
        return records

    def _unique(
        self, records: list[dict[str, Any]], code_field: str, name_field: str
    ) -> list[Candidate]:
        # Later duplicates replace earlier ones but keep the first position.
        unique: dict[str, Candidate] = {}
        for record in records:
            if not isinstance(record, dict):
                continue
            code = record.get(code_field)
            if code is None:
                continue
            city_code = record.get(CITY_CODE_FIELD)
            unique[str(code).strip()] = Candidate(
                code=str(code).strip(),
                name=str(record.get(name_field) or "").strip(),
                city_code=str(city_code).strip() if city_code is not None else None,
            )
        return list(unique.values())[: self.settings.LOOKUP_RESULT_LIMIT]


class RowSearch:
    """
    Debounced, single-outstanding search for one form row.

    A new query cancels the one in flight; the superseded caller gets ``[]``.
    Results that complete after a newer query started are discarded.
    """

    def __init__(self, client: LookupClient, delay: float = DEBOUNCE_SECONDS):
        self.client = client
        self.delay = delay
        self._pending: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    async def _run(self, text: str, city_code: str | None) -> list[Candidate]:
        await asyncio.sleep(self.delay)
        return await self.client.search(text, city_code)

    async def search(self, text: str, city_code: str | None = None) -> list[Candidate]:
        self.cancel()
        if not is_searchable(text):
            return []

        task = asyncio.ensure_future(self._run(text, city_code))
        self._pending = task
        try:
            results = await task
        except asyncio.CancelledError:
            if self._pending is task:
                raise
            logger.info("Lookup for %r superseded by a newer query", text)
            return []

        if self._pending is not task:
            return []
        self._pending = None
        return results
