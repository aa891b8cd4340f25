"""Concept Map ID locator client: spoken item names to entity ids."""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote, urlencode

import requests

from orchestrator.errors import ServiceUnavailableError
from orchestrator.logging.request_log import LoggerLike
from services.conceptmap.http_session import get_body

_LOGGER = logging.getLogger(__name__)


class IdLocatorClient:
    """Resolve a free-text item name to an external entity id."""

    def __init__(
        self,
        *,
        endpoint: str,
        language: str = "en",
        timeout: float = 3.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("IdLocatorClient requires an endpoint")
        self._endpoint = endpoint.rstrip("/")
        self._language = language
        self._timeout = timeout
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    def resolve(self, item_name: str, *, log: Optional[LoggerLike] = None) -> Optional[str]:
        """Return the entity id for ``item_name`` or ``None`` when it cannot be located.

        Network failures, timeouts, empty bodies, malformed JSON and a missing
        or null ``itemId`` all collapse into ``None``.
        """

        log = log or _LOGGER
        url = self.lookup_url(item_name)
        log.info("locateItemId url: %s", url)
        try:
            response = get_body(self._session, url, timeout=self._timeout, service="ID locator")
        except ServiceUnavailableError as exc:
            log.info("Item id lookup failed for %r: %s", item_name, exc)
            return None

        try:
            payload = response.json()
        except ValueError:
            log.exception("Exception occurred while parsing id locator response")
            return None

        item_id = payload.get("itemId") if isinstance(payload, dict) else None
        log.info("locateItemId itemId: %s", item_id)
        if not isinstance(item_id, str) or not item_id:
            return None
        return item_id

    def lookup_url(self, item_name: str) -> str:
        # Spaces must travel as %20, not "+".
        query = urlencode({"name": item_name, "lang": self._language}, quote_via=quote)
        return f"{self._endpoint}?{query}"


__all__ = ["IdLocatorClient"]
