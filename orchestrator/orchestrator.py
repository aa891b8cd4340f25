"""Speechlet-style orchestrator wiring platform callbacks to Concept Map intents."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from orchestrator.errors import InvalidIntentError
from orchestrator.logging.event_bus import EventBus
from orchestrator.logging.request_log import RequestLogger
from skill_adapter.envelope import (
    IntentRequest,
    LaunchRequest,
    Session,
    SessionEndedRequest,
    SessionStartedRequest,
    SkillRequest,
)
from skill_adapter.intents.intent_claims import SLOT_ITEM, SLOT_RELATIONSHIP
from skill_adapter.intents.intent_router import IntentContext, IntentRouter
from skill_adapter.responses import SkillResponse, new_ask_response

Logger = logging.getLogger(__name__)

WHICH_ITEM_REL_PROMPT = "Which item and relationship would you like claims for?"
WELCOME_SSML = f"<speak>Welcome to Concept Map. {WHICH_ITEM_REL_PROMPT}</speak>"
WELCOME_REPROMPT = (
    "I can lead you through providing an item and relationship to get claims, "
    "or you can simply open Concept Map and ask a question like, "
    "what teams has Lionel Messi played on. "
)


@dataclass
class OrchestratorDependencies:
    """Container for orchestrator runtime dependencies."""

    intent_router: IntentRouter


class IntentOrchestrator:
    """Entry point for the voice platform's session and intent callbacks.

    Each callback builds its own :class:`RequestLogger`; the orchestrator keeps
    no state between requests, so one instance can serve concurrent requests.
    """

    def __init__(self, deps: OrchestratorDependencies, *, event_bus: Optional[EventBus] = None) -> None:
        self._intent_router = deps.intent_router
        self.events = event_bus

    # ------------------------------------------------------------------
    def on_session_started(self, request: SessionStartedRequest, session: Session) -> None:
        log = self._request_logger(request, session)
        log.info("onSessionStarted requestId=%s, sessionId=%s", request.request_id, session.session_id)
        self._publish("skill/session_started", request, session)

    def on_launch(self, request: LaunchRequest, session: Session) -> SkillResponse:
        log = self._request_logger(request, session)
        log.info("onLaunch requestId=%s, sessionId=%s", request.request_id, session.session_id)
        self._publish("skill/launch", request, session)
        return self.welcome_response()

    def on_intent(self, request: IntentRequest, session: Session) -> SkillResponse:
        """Dispatch an intent request.

        Raises
        ------
        InvalidIntentError
            If the intent name is not one the skill handles. No response is
            produced in that case.
        """

        log = self._request_logger(request, session)
        intent = request.intent
        log.info("onIntent requestId=%s, sessionId=%s intent=%s", request.request_id, session.session_id, intent.name)

        item_value = intent.slot_value(SLOT_ITEM)
        relationship_value = intent.slot_value(SLOT_RELATIONSHIP)
        if item_value is not None:
            log.info("I received an Item request: %s", item_value)
        elif relationship_value is not None:
            log.info("I received a Relationship request: %s", relationship_value)
        else:
            log.info("I'm not sure if I received a request")

        context = IntentContext(request_id=request.request_id, session_id=session.session_id, log=log)
        try:
            response = self._intent_router.handle(intent, context)
        except InvalidIntentError:
            log.warning("Invalid intent: %s", intent.name)
            self._publish("skill/intent", request, session, intent=intent.name, ok=False, error="invalid_intent")
            raise
        self._publish(
            "skill/intent",
            request,
            session,
            intent=intent.name,
            ok=True,
            ask=response.is_ask,
        )
        return response

    def on_session_ended(self, request: SessionEndedRequest, session: Session) -> None:
        log = self._request_logger(request, session)
        log.info("onSessionEnded requestId=%s, sessionId=%s", request.request_id, session.session_id)
        self._publish("skill/session_ended", request, session, reason=request.reason)

    def welcome_response(self) -> SkillResponse:
        return new_ask_response(WELCOME_SSML, WELCOME_REPROMPT, output_is_ssml=True)

    # ------------------------------------------------------------------
    def _request_logger(self, request: SkillRequest, session: Session) -> RequestLogger:
        return RequestLogger(Logger, request_id=request.request_id, session_id=session.session_id)

    def _publish(self, topic_suffix: str, request: SkillRequest, session: Session, **fields: Any) -> None:
        if self.events is None:
            return
        payload: Dict[str, Any] = {"request_id": request.request_id, "session_id": session.session_id}
        payload.update(fields)
        self.events.publish(topic_suffix, payload)
