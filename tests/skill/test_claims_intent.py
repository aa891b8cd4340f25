"""Claims intent pipeline: resolve, fetch, project and format."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest
import requests

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.conceptmap.id_locator_client import IdLocatorClient
from services.conceptmap.traversal_client import TraversalClient
from skill_adapter.envelope import Intent
from skill_adapter.intents.intent_claims import (
    MISSING_SLOTS_SPEECH,
    SERVICE_UNAVAILABLE_SPEECH,
    ClaimsIntentHandler,
    ClaimsQuery,
)
from skill_adapter.intents.intent_router import CLAIMS_INTENT, IntentContext
from tests.stubs import RecordingBus, StubSession, make_logger, make_response

MESSI_DOC = {
    "item": [
        {"id": "Q7156", "label": "FC Barcelona", "picture": "barca.png"},
        {"id": "Q615", "label": "Lionel Messi", "picture": "https://img.example/messi.jpg"},
        {"id": "Q79800", "label": "Argentina national football team", "picture": None},
    ]
}


def make_handler(
    locator_replies: Sequence[object],
    traversal_replies: Sequence[object] = (),
    *,
    bus: Optional[RecordingBus] = None,
):
    locator_session = StubSession(locator_replies)  # type: ignore[arg-type]
    traversal_session = StubSession(traversal_replies)  # type: ignore[arg-type]
    handler = ClaimsIntentHandler(
        id_locator=IdLocatorClient(endpoint="https://cm.example/idlocator", session=locator_session),  # type: ignore[arg-type]
        traversal=TraversalClient(endpoint="https://cm.example/traversal", session=traversal_session),  # type: ignore[arg-type]
        event_bus=bus,  # type: ignore[arg-type]
    )
    return handler, locator_session, traversal_session


def make_context() -> IntentContext:
    return IntentContext(request_id="req-1", session_id="sess-1", log=make_logger())


def claims_intent(item: Optional[str] = "Lionel Messi", relationship: Optional[str] = "team") -> Intent:
    return Intent.with_slots(CLAIMS_INTENT, {"Item": item, "Relationship": relationship})


def test_answer_lists_related_entities_with_picture_card() -> None:
    bus = RecordingBus()
    handler, locator, traversal = make_handler(
        [make_response({"itemId": "Q615"})],
        [make_response(MESSI_DOC)],
        bus=bus,
    )

    response = handler.handle(make_context(), claims_intent())

    expected = "Lionel Messi has been a member of team FC Barcelona,\n and Argentina national football team,\n"
    assert response.speech_text == expected
    assert response.should_end_session is True
    assert response.card is not None
    assert response.card.title == "Concept Map"
    assert response.card.text == expected
    assert response.card.image.large_image_url == "https://img.example/messi.jpg"
    assert traversal.calls[0][0].endswith("?id=Q615&direction=f&prop=P54&depth=1")

    event = bus.last_for("skill/claims")
    assert event is not None
    assert event["outcome"] == "answered"
    assert event["entity_id"] == "Q615"
    assert event["n_labels"] == 2
    assert event["stages"] == [
        "awaiting_item_and_relationship",
        "resolving",
        "fetching",
        "projecting",
        "formatting",
        "responded",
    ]


def test_unresolved_item_skips_traversal() -> None:
    handler, locator, traversal = make_handler([make_response({"itemId": None})])

    response = handler.handle(make_context(), claims_intent(item="Nobody In Particular"))

    assert response.speech_text == "Couldn't locate an Item ID for item Nobody In Particular"
    assert len(locator.calls) == 1
    assert traversal.calls == []
    assert response.card is not None
    assert response.card.image.large_image_url is None


def test_traversal_outage_uses_service_unavailable_message() -> None:
    bus = RecordingBus()
    handler, _, _ = make_handler(
        [make_response({"itemId": "Q615"})],
        [requests.ConnectionError("traversal down")],
        bus=bus,
    )

    response = handler.handle(make_context(), claims_intent())

    assert response.speech_text == SERVICE_UNAVAILABLE_SPEECH
    assert response.card is not None and response.card.text == SERVICE_UNAVAILABLE_SPEECH
    assert bus.last_for("skill/claims")["outcome"] == "service_unavailable"


def test_no_related_entities_reports_not_found_but_keeps_picture() -> None:
    doc = {"item": [{"id": "Q615", "label": "Lionel Messi", "picture": "messi.jpg"}]}
    handler, _, _ = make_handler([make_response({"itemId": "Q615"})], [make_response(doc)])

    response = handler.handle(make_context(), claims_intent())

    assert response.speech_text == "Item Lionel Messi not found"
    assert response.card is not None
    assert response.card.image.large_image_url == "messi.jpg"


def test_malformed_record_degrades_to_not_found(caplog) -> None:
    doc = {"item": [{"id": "Q7156", "picture": "barca.png"}]}
    bus = RecordingBus()
    handler, _, _ = make_handler([make_response({"itemId": "Q615"})], [make_response(doc)], bus=bus)

    with caplog.at_level(logging.ERROR):
        response = handler.handle(make_context(), claims_intent())

    assert response.speech_text == "Item Lionel Messi not found"
    assert bus.last_for("skill/claims")["outcome"] == "parse_failure"
    assert any("parsing traversal response" in record.getMessage() for record in caplog.records)


def test_non_json_traversal_body_degrades_to_not_found() -> None:
    handler, _, _ = make_handler([make_response({"itemId": "Q615"})], [make_response("oops")])

    response = handler.handle(make_context(), claims_intent())

    assert response.speech_text == "Item Lionel Messi not found"


def test_missing_slot_asks_for_both_values() -> None:
    handler, locator, _ = make_handler([])

    response = handler.handle(make_context(), claims_intent(relationship="  "))

    assert response.is_ask
    assert response.speech_text == MISSING_SLOTS_SPEECH
    assert response.reprompt is not None
    assert response.reprompt.output_speech.text == MISSING_SLOTS_SPEECH
    assert locator.calls == []


def test_relationship_text_is_echoed_but_fixed_property_is_queried() -> None:
    handler, _, traversal = make_handler([make_response({"itemId": "Q615"})], [make_response(MESSI_DOC)])

    response = handler.answer(make_context(), ClaimsQuery(item_value="Lionel Messi", relationship_value="club"))

    assert response.speech_text.startswith("Lionel Messi has been a member of club ")
    assert "prop=P54" in traversal.calls[0][0]


@pytest.mark.parametrize("body", ["null", "[]"], ids=["null", "array"])
def test_non_object_traversal_body_is_not_found_rather_than_outage(body: str) -> None:
    bus = RecordingBus()
    handler, _, _ = make_handler([make_response({"itemId": "Q615"})], [make_response(body)], bus=bus)

    response = handler.handle(make_context(), claims_intent())

    assert response.speech_text == "Item Lionel Messi not found"
    assert response.speech_text != SERVICE_UNAVAILABLE_SPEECH
    assert bus.last_for("skill/claims")["outcome"] == "parse_failure"
