"""Intent dispatch for the Concept Map skill."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

from orchestrator.errors import InvalidIntentError
from orchestrator.logging.request_log import RequestLogger
from skill_adapter.envelope import Intent
from skill_adapter.responses import SkillResponse, new_tell_response

if TYPE_CHECKING:  # pragma: no cover - typing only
    from skill_adapter.intents.intent_claims import ClaimsIntentHandler

CLAIMS_INTENT = "OneshotClaimsIntent"
STOP_INTENT = "AMAZON.StopIntent"
CANCEL_INTENT = "AMAZON.CancelIntent"
GOODBYE_SPEECH = "Goodbye"


class IntentContext(BaseModel):
    """Runtime context for a single platform request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request_id: str = Field(..., description="Platform request identifier.")
    session_id: Optional[str] = Field(default=None, description="Platform session identifier.")
    log: RequestLogger = Field(..., description="Logger stamped with this request's ids.")


class IntentRouter:
    """Maps platform intent names to their handlers."""

    def __init__(self, claims_handler: "ClaimsIntentHandler") -> None:
        self._claims = claims_handler

    # ------------------------------------------------------------------
    # Public API
    def handle(self, intent: Intent, ctx: IntentContext) -> SkillResponse:
        """Dispatch ``intent``; unknown intent names raise :class:`InvalidIntentError`."""

        name = intent.name
        if name == CLAIMS_INTENT:
            return self._claims.handle(ctx, intent)
        if name in {STOP_INTENT, CANCEL_INTENT}:
            return new_tell_response(GOODBYE_SPEECH)
        raise InvalidIntentError(name)


__all__ = [
    "IntentRouter",
    "IntentContext",
    "CLAIMS_INTENT",
    "STOP_INTENT",
    "CANCEL_INTENT",
    "GOODBYE_SPEECH",
]
