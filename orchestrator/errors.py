"""Error taxonomy shared by the Concept Map skill layers."""
from __future__ import annotations


class ConceptMapError(RuntimeError):
    """Base class for errors raised by the Concept Map skill."""


class ServiceUnavailableError(ConceptMapError):
    """Raised when a remote Concept Map service cannot produce a usable body."""


class ClaimsParseError(ConceptMapError):
    """Raised when a traversal document does not match the expected shape."""


class InvalidIntentError(ConceptMapError):
    """Raised when the skill receives an intent it does not handle."""

    def __init__(self, intent_name: str) -> None:
        super().__init__(f"Invalid Intent: {intent_name!r}")
        self.intent_name = intent_name


class InvalidTransitionError(ConceptMapError):
    """Raised when the request state machine is driven out of order."""


__all__ = [
    "ConceptMapError",
    "ServiceUnavailableError",
    "ClaimsParseError",
    "InvalidIntentError",
    "InvalidTransitionError",
]
