"""Typed inbound requests handed to the skill by the voice platform runtime."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field


class Slot(BaseModel):
    """A named parameter extracted from the user's utterance."""

    name: str
    value: Optional[str] = None


class Intent(BaseModel):
    """Classified purpose of an utterance and its slots."""

    name: str
    slots: Dict[str, Slot] = Field(default_factory=dict)

    @classmethod
    def with_slots(cls, name: str, values: Mapping[str, Optional[str]]) -> "Intent":
        return cls(name=name, slots={key: Slot(name=key, value=value) for key, value in values.items()})

    def get_slot(self, name: str) -> Optional[Slot]:
        return self.slots.get(name)

    def slot_value(self, name: str) -> Optional[str]:
        """Return the stripped slot value, treating blank values as missing."""

        slot = self.get_slot(name)
        if slot is None or slot.value is None:
            return None
        value = slot.value.strip()
        return value or None


class Session(BaseModel):
    """Opaque session handle supplied by the platform."""

    session_id: str
    new: bool = False
    attributes: Dict[str, Any] = Field(default_factory=dict)


class SkillRequest(BaseModel):
    request_id: str
    timestamp: Optional[datetime] = None
    locale: Optional[str] = None


class SessionStartedRequest(SkillRequest):
    pass


class LaunchRequest(SkillRequest):
    pass


class IntentRequest(SkillRequest):
    intent: Intent


class SessionEndedRequest(SkillRequest):
    reason: Optional[str] = None


__all__ = [
    "Slot",
    "Intent",
    "Session",
    "SkillRequest",
    "SessionStartedRequest",
    "LaunchRequest",
    "IntentRequest",
    "SessionEndedRequest",
]
