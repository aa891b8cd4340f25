from __future__ import annotations

import sys
from pathlib import Path

import pytest
import requests

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.conceptmap.id_locator_client import IdLocatorClient
from tests.stubs import StubSession, make_logger, make_response

ENDPOINT = "https://conceptmap.example/idlocator"


def make_client(session: StubSession) -> IdLocatorClient:
    return IdLocatorClient(endpoint=ENDPOINT, language="en", timeout=2.5, session=session)  # type: ignore[arg-type]


def test_resolve_returns_item_id() -> None:
    session = StubSession([make_response({"itemId": "Q615"})])
    client = make_client(session)

    assert client.resolve("Lionel Messi", log=make_logger()) == "Q615"
    url, timeout = session.calls[0]
    assert url == f"{ENDPOINT}?name=Lionel%20Messi&lang=en"
    assert timeout == 2.5


def test_lookup_url_escapes_reserved_characters() -> None:
    client = make_client(StubSession())
    assert client.lookup_url("AT&T") == f"{ENDPOINT}?name=AT%26T&lang=en"


@pytest.mark.parametrize(
    "body",
    [
        b"",
        "{not json",
        {"itemId": None},
        {"itemId": ""},
        {"other": "Q1"},
        "[\"Q615\"]",
    ],
    ids=["empty-body", "malformed-json", "null-id", "blank-id", "missing-field", "not-an-object"],
)
def test_resolve_absent_for_unusable_bodies(body) -> None:
    client = make_client(StubSession([make_response(body)]))
    assert client.resolve("Lionel Messi") is None


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("slow")],
    ids=["connection", "timeout"],
)
def test_resolve_absent_on_network_failure(error) -> None:
    client = make_client(StubSession([error]))
    assert client.resolve("Lionel Messi") is None


def test_resolve_absent_on_http_error_status() -> None:
    client = make_client(StubSession([make_response({"itemId": "Q615"}, status_code=503)]))
    assert client.resolve("Lionel Messi") is None


def test_client_requires_endpoint() -> None:
    with pytest.raises(ValueError):
        IdLocatorClient(endpoint="")
