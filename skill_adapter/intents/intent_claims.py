"""Claims intent handler: answers "what has <item> been a member of" questions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from orchestrator.errors import ClaimsParseError
from orchestrator.logging.event_bus import EventBus
from orchestrator.request_flow.state_machine import ClaimsRequestState, ClaimsRequestStateMachine
from services.conceptmap.claims import project_claims
from services.conceptmap.id_locator_client import IdLocatorClient
from services.conceptmap.traversal_client import TraversalClient
from skill_adapter.envelope import Intent
from skill_adapter.intents.intent_router import IntentContext
from skill_adapter.responses import Image, SkillResponse, StandardCard, new_ask_response, new_tell_response

SLOT_ITEM = "Item"
SLOT_RELATIONSHIP = "Relationship"
DEFAULT_RELATIONSHIP_ID = "P54"
DEFAULT_CARD_TITLE = "Concept Map"

MISSING_SLOTS_SPEECH = "I need both an Item and a Relationship"
SERVICE_UNAVAILABLE_SPEECH = (
    "Sorry, the Concept Map claims service is experiencing a problem. Please try again later."
)


class ClaimsQuery(BaseModel):
    """Item and relationship exactly as the user spoke them."""

    item_value: str = Field(..., min_length=1)
    relationship_value: str = Field(..., min_length=1)


@dataclass
class ClaimsOutcome:
    speech: str
    picture_url: Optional[str] = None
    entity_id: Optional[str] = None
    label_count: int = 0


class ClaimsIntentHandler:
    """Resolve, fetch, project and format claims for one spoken query.

    Remote failures never escape this handler: each one is mapped to the
    spoken fallback chosen here, and every answer carries a card.
    """

    def __init__(
        self,
        *,
        id_locator: IdLocatorClient,
        traversal: TraversalClient,
        event_bus: Optional[EventBus] = None,
        relationship_id: str = DEFAULT_RELATIONSHIP_ID,
        card_title: str = DEFAULT_CARD_TITLE,
    ) -> None:
        self._id_locator = id_locator
        self._traversal = traversal
        self._event_bus = event_bus
        self._relationship_id = relationship_id
        self._card_title = card_title

    # ------------------------------------------------------------------
    def handle(self, ctx: IntentContext, intent: Intent) -> SkillResponse:
        item_value = intent.slot_value(SLOT_ITEM)
        relationship_value = intent.slot_value(SLOT_RELATIONSHIP)
        if item_value is None or relationship_value is None:
            ctx.log.info("Claims intent is missing a slot: item=%r relationship=%r", item_value, relationship_value)
            return new_ask_response(MISSING_SLOTS_SPEECH, MISSING_SLOTS_SPEECH)
        query = ClaimsQuery(item_value=item_value, relationship_value=relationship_value)
        return self.answer(ctx, query)

    def answer(self, ctx: IntentContext, query: ClaimsQuery) -> SkillResponse:
        """Run the claims pipeline for ``query`` and build the tell response with its card."""

        flow = ClaimsRequestStateMachine()
        outcome = self._run(ctx, query, flow)
        card = StandardCard(
            title=self._card_title,
            text=outcome.speech,
            image=Image(large_image_url=outcome.picture_url),
        )
        self._publish(ctx, query, flow, outcome)
        return new_tell_response(outcome.speech, card)

    # ------------------------------------------------------------------
    def _run(self, ctx: IntentContext, query: ClaimsQuery, flow: ClaimsRequestStateMachine) -> ClaimsOutcome:
        log = ctx.log
        not_found = f"Item {query.item_value} not found"

        flow.advance(ClaimsRequestState.RESOLVING)
        entity_id = self._id_locator.resolve(query.item_value, log=log)
        if entity_id is None:
            flow.respond("not_located")
            return ClaimsOutcome(speech=f"Couldn't locate an Item ID for item {query.item_value}")

        flow.advance(ClaimsRequestState.FETCHING)
        try:
            document = self._traversal.fetch_claims(entity_id, self._relationship_id, log=log)
        except ClaimsParseError:
            log.exception("Exception occurred while parsing traversal response")
            flow.respond("parse_failure")
            return ClaimsOutcome(speech=not_found, entity_id=entity_id)
        if document is None:
            flow.respond("service_unavailable")
            return ClaimsOutcome(speech=SERVICE_UNAVAILABLE_SPEECH, entity_id=entity_id)

        flow.advance(ClaimsRequestState.PROJECTING)
        try:
            claims = project_claims(document, entity_id)
        except ClaimsParseError:
            log.exception("Exception occurred while parsing traversal response")
            flow.respond("parse_failure")
            return ClaimsOutcome(speech=not_found, entity_id=entity_id)
        log.info("claimsInfo: %r", claims)

        if not claims.item_labels:
            flow.respond("no_claims")
            return ClaimsOutcome(speech=not_found, picture_url=claims.picture_url, entity_id=entity_id)

        flow.advance(ClaimsRequestState.FORMATTING)
        speech = (
            f"{query.item_value} has been a member of {query.relationship_value} "
            f"{claims.to_item_labels_speech()}"
        )
        flow.respond("answered")
        return ClaimsOutcome(
            speech=speech,
            picture_url=claims.picture_url,
            entity_id=entity_id,
            label_count=len(claims.item_labels),
        )

    def _publish(
        self,
        ctx: IntentContext,
        query: ClaimsQuery,
        flow: ClaimsRequestStateMachine,
        outcome: ClaimsOutcome,
    ) -> None:
        if self._event_bus is None:
            return
        payload: Dict[str, Any] = {
            "request_id": ctx.request_id,
            "session_id": ctx.session_id,
            "item": query.item_value,
            "relationship": query.relationship_value,
            "entity_id": outcome.entity_id,
            "relationship_id": self._relationship_id,
            "outcome": flow.outcome,
            "n_labels": outcome.label_count,
            "stages": [state.value for state in flow.history],
            "elapsed": round(flow.elapsed(), 4),
        }
        self._event_bus.publish("skill/claims", payload)


__all__ = [
    "ClaimsIntentHandler",
    "ClaimsQuery",
    "SLOT_ITEM",
    "SLOT_RELATIONSHIP",
    "MISSING_SLOTS_SPEECH",
    "SERVICE_UNAVAILABLE_SPEECH",
]
