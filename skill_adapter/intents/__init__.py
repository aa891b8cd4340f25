"""Intent routing helpers for the Concept Map skill."""

from .intent_router import IntentRouter, IntentContext
from .intent_claims import ClaimsIntentHandler, ClaimsQuery

__all__ = ["IntentRouter", "IntentContext", "ClaimsIntentHandler", "ClaimsQuery"]
