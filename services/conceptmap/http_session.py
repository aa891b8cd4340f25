"""Shared :mod:`requests` session factory for Concept Map service clients."""
from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from orchestrator.errors import ServiceUnavailableError

USER_AGENT = "conceptmap-skill/0.1"
RETRY_STATUSES = (429, 500, 502, 503, 504)


def build_session(*, max_retries: int = 1, backoff_factor: float = 0.2) -> requests.Session:
    """Create a session that retries idempotent GETs on transient failures.

    Connection errors and retryable statuses are retried up to ``max_retries``
    times. A read timeout is final, and ``Retry-After`` headers are ignored, so
    :func:`worst_case_call_seconds` stays an upper bound for one call.
    """

    session = requests.Session()
    retry_strategy = Retry(
        total=max_retries,
        connect=max_retries,
        read=0,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=list(RETRY_STATUSES),
        allowed_methods=["GET"],
        respect_retry_after_header=False,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    return session


def worst_case_call_seconds(timeout: float, max_retries: int, backoff_factor: float) -> float:
    """Longest a single GET may take: every attempt times out, plus the backoff sleeps.

    urllib3 does not sleep before the first retry; later retries sleep
    ``backoff_factor * 2 ** (n - 1)`` capped at ``Retry.DEFAULT_BACKOFF_MAX``.
    """

    attempts = max_retries + 1
    sleeps = sum(
        min(Retry.DEFAULT_BACKOFF_MAX, backoff_factor * (2 ** (retry - 1)))
        for retry in range(2, max_retries + 1)
    )
    return attempts * timeout + sleeps


def get_body(session: requests.Session, url: str, *, timeout: float, service: str) -> requests.Response:
    """GET ``url`` and return a successful response with a non-empty body.

    Raises :class:`ServiceUnavailableError` on transport errors, timeouts,
    error statuses (including exhausted retries) and empty bodies.
    """

    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise ServiceUnavailableError(f"{service} request failed: {exc}") from exc
    if not response.content:
        raise ServiceUnavailableError(f"{service} returned an empty body")
    return response


__all__ = ["build_session", "get_body", "worst_case_call_seconds", "RETRY_STATUSES", "USER_AGENT"]
