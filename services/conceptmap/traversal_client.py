"""Concept Map traversal client: one-hop relationship claims for an entity."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

import requests

from orchestrator.errors import ClaimsParseError, ServiceUnavailableError
from orchestrator.logging.request_log import LoggerLike
from services.conceptmap.http_session import get_body

_LOGGER = logging.getLogger(__name__)


class TraversalClient:
    """Fetch the entities reachable from an entity over a single relationship."""

    DIRECTION = "f"
    DEPTH = 1

    def __init__(
        self,
        *,
        endpoint: str,
        timeout: float = 3.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not endpoint:
            raise ValueError("TraversalClient requires an endpoint")
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    def fetch_claims(
        self,
        entity_id: str,
        relationship_id: str,
        *,
        log: Optional[LoggerLike] = None,
    ) -> Optional[Dict[str, Any]]:
        """Return the decoded traversal document, or ``None`` when the service is unavailable.

        A body that arrives but is not a JSON object raises :class:`ClaimsParseError`.
        """

        log = log or _LOGGER
        url = self.traversal_url(entity_id, relationship_id)
        log.info("traversal url: %s", url)
        try:
            response = get_body(self._session, url, timeout=self._timeout, service="Traversal")
        except ServiceUnavailableError as exc:
            log.warning("Traversal unavailable for %s/%s: %s", entity_id, relationship_id, exc)
            return None

        log.info("traversal body: %s", response.text)
        try:
            document = response.json()
        except ValueError as exc:
            raise ClaimsParseError(f"Traversal body for {entity_id} is not valid JSON") from exc
        if not isinstance(document, dict):
            raise ClaimsParseError(f"Traversal body for {entity_id} is not a JSON object")
        return document

    def traversal_url(self, entity_id: str, relationship_id: str) -> str:
        query = urlencode(
            {
                "id": entity_id,
                "direction": self.DIRECTION,
                "prop": relationship_id,
                "depth": self.DEPTH,
            },
            quote_via=quote,
        )
        return f"{self._endpoint}?{query}"


__all__ = ["TraversalClient"]
