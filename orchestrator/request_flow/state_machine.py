"""Per-request state machine for answering a claims question.

A claims request walks forward through resolution, fetching, projection and
formatting. Any stage may short-circuit straight to ``RESPONDED`` when it
produces a fallback answer, but stages may never run backwards or be skipped
in the middle of the pipeline.
"""
from __future__ import annotations

from enum import Enum
from time import monotonic
from typing import Dict, FrozenSet, List, Optional, Tuple

from orchestrator.errors import InvalidTransitionError


class ClaimsRequestState(str, Enum):
    """Stages of a single claims request."""

    AWAITING_ITEM_AND_RELATIONSHIP = "awaiting_item_and_relationship"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    PROJECTING = "projecting"
    FORMATTING = "formatting"
    RESPONDED = "responded"


_S = ClaimsRequestState

_TRANSITIONS: Dict[ClaimsRequestState, FrozenSet[ClaimsRequestState]] = {
    _S.AWAITING_ITEM_AND_RELATIONSHIP: frozenset({_S.RESOLVING, _S.RESPONDED}),
    _S.RESOLVING: frozenset({_S.FETCHING, _S.RESPONDED}),
    _S.FETCHING: frozenset({_S.PROJECTING, _S.RESPONDED}),
    _S.PROJECTING: frozenset({_S.FORMATTING, _S.RESPONDED}),
    _S.FORMATTING: frozenset({_S.RESPONDED}),
    _S.RESPONDED: frozenset(),
}


class ClaimsRequestStateMachine:
    """Tracks and validates the stage of one claims request.

    Instances are single-use: create one per request and discard it once the
    response has been built.
    """

    def __init__(self, *, state: ClaimsRequestState = ClaimsRequestState.AWAITING_ITEM_AND_RELATIONSHIP) -> None:
        self._state = state
        self._history: List[Tuple[ClaimsRequestState, float]] = [(state, monotonic())]
        self._outcome: Optional[str] = None

    @property
    def state(self) -> ClaimsRequestState:
        return self._state

    @property
    def outcome(self) -> Optional[str]:
        """Short label describing how the request ended, once responded."""

        return self._outcome

    @property
    def history(self) -> List[ClaimsRequestState]:
        return [state for state, _ in self._history]

    @property
    def is_terminal(self) -> bool:
        return self._state is ClaimsRequestState.RESPONDED

    def advance(self, target: ClaimsRequestState) -> ClaimsRequestState:
        """Move to ``target`` or raise :class:`InvalidTransitionError`."""

        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransitionError(f"Cannot move from {self._state.value} to {target.value}")
        self._state = target
        self._history.append((target, monotonic()))
        return self._state

    def respond(self, outcome: str) -> ClaimsRequestState:
        """Finish the request, recording ``outcome`` for telemetry."""

        self.advance(ClaimsRequestState.RESPONDED)
        self._outcome = outcome
        return self._state

    def elapsed(self) -> float:
        """Seconds spent between the first and the latest transition."""

        return self._history[-1][1] - self._history[0][1]


__all__ = ["ClaimsRequestState", "ClaimsRequestStateMachine"]
