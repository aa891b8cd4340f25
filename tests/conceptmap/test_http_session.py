from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from orchestrator.errors import ServiceUnavailableError
from services.conceptmap.http_session import USER_AGENT, build_session, get_body, worst_case_call_seconds
from tests.stubs import StubSession, make_response


def test_session_mounts_bounded_retry_for_get() -> None:
    session = build_session(max_retries=2, backoff_factor=0.1)

    adapter = session.get_adapter("https://conceptmap.cfapps.io/traversal")
    retry = adapter.max_retries
    assert retry.total == 2
    assert retry.connect == 2
    assert retry.status == 2
    assert retry.backoff_factor == 0.1
    assert 503 in retry.status_forcelist
    assert "GET" in retry.allowed_methods
    assert "POST" not in retry.allowed_methods
    assert session.headers["User-Agent"] == USER_AGENT
    assert session.headers["Accept"] == "application/json"


def test_read_timeouts_and_retry_after_never_extend_a_call() -> None:
    retry = build_session(max_retries=3).get_adapter("https://conceptmap.cfapps.io/idlocator").max_retries

    assert retry.read == 0
    assert retry.respect_retry_after_header is False


def test_session_without_retries() -> None:
    session = build_session(max_retries=0)
    assert session.get_adapter("http://localhost/").max_retries.total == 0


@pytest.mark.parametrize(
    ("timeout", "retries", "backoff", "expected"),
    [
        (1.8, 1, 0.2, 3.6),
        (2.0, 0, 0.5, 2.0),
        (1.0, 3, 0.5, 4.0 + 1.0 + 2.0),
    ],
)
def test_worst_case_call_seconds(timeout: float, retries: int, backoff: float, expected: float) -> None:
    assert worst_case_call_seconds(timeout, retries, backoff) == pytest.approx(expected)


def test_get_body_returns_successful_response() -> None:
    session = StubSession([make_response({"itemId": "Q615"})])

    response = get_body(session, "https://cm.example/idlocator", timeout=1.0, service="ID locator")  # type: ignore[arg-type]

    assert response.json() == {"itemId": "Q615"}
    assert session.calls == [("https://cm.example/idlocator", 1.0)]


@pytest.mark.parametrize(
    "reply",
    [requests.ConnectTimeout("slow"), make_response(b""), make_response("{}", status_code=503)],
    ids=["timeout", "empty-body", "error-status"],
)
def test_get_body_raises_service_unavailable(reply) -> None:
    with pytest.raises(ServiceUnavailableError):
        get_body(StubSession([reply]), "https://cm.example/traversal", timeout=1.0, service="Traversal")  # type: ignore[arg-type]
