"""Ask/tell responses and visual cards returned to the voice platform."""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class OutputSpeech(BaseModel):
    """Speech rendered by the device, either plain text or SSML."""

    type: Literal["PlainText", "SSML"] = "PlainText"
    text: Optional[str] = None
    ssml: Optional[str] = None

    @classmethod
    def plain(cls, text: str) -> "OutputSpeech":
        return cls(type="PlainText", text=text)

    @classmethod
    def from_ssml(cls, ssml: str) -> "OutputSpeech":
        return cls(type="SSML", ssml=ssml)

    @property
    def content(self) -> str:
        return (self.ssml if self.type == "SSML" else self.text) or ""

    def to_dict(self) -> Dict[str, Any]:
        if self.type == "SSML":
            return {"type": "SSML", "ssml": self.ssml or ""}
        return {"type": "PlainText", "text": self.text or ""}


class Reprompt(BaseModel):
    """Speech played when the user does not answer an ask response."""

    output_speech: OutputSpeech


class Image(BaseModel):
    small_image_url: Optional[str] = None
    large_image_url: Optional[str] = None


class StandardCard(BaseModel):
    """Visual card with a title, body text, and optional image."""

    title: str
    text: str
    image: Image = Field(default_factory=Image)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": "Standard", "title": self.title, "text": self.text}
        image: Dict[str, str] = {}
        if self.image.small_image_url:
            image["smallImageUrl"] = self.image.small_image_url
        if self.image.large_image_url:
            image["largeImageUrl"] = self.image.large_image_url
        if image:
            payload["image"] = image
        return payload


class SkillResponse(BaseModel):
    """Response to a single platform request.

    A *tell* response ends the interaction turn; an *ask* response keeps the
    session open and carries a reprompt.
    """

    output_speech: OutputSpeech
    reprompt: Optional[Reprompt] = None
    card: Optional[StandardCard] = None
    should_end_session: bool = True

    @classmethod
    def tell(cls, speech: OutputSpeech, card: Optional[StandardCard] = None) -> "SkillResponse":
        return cls(output_speech=speech, card=card, should_end_session=True)

    @classmethod
    def ask(cls, speech: OutputSpeech, reprompt: Reprompt) -> "SkillResponse":
        return cls(output_speech=speech, reprompt=reprompt, should_end_session=False)

    @property
    def is_ask(self) -> bool:
        return not self.should_end_session

    @property
    def speech_text(self) -> str:
        return self.output_speech.content

    def to_dict(self) -> Dict[str, Any]:
        """Render the platform's JSON response envelope."""

        response: Dict[str, Any] = {
            "outputSpeech": self.output_speech.to_dict(),
            "shouldEndSession": self.should_end_session,
        }
        if self.card is not None:
            response["card"] = self.card.to_dict()
        if self.reprompt is not None:
            response["reprompt"] = {"outputSpeech": self.reprompt.output_speech.to_dict()}
        return {"version": "1.0", "response": response}


def new_ask_response(
    output: str,
    reprompt_text: str,
    *,
    output_is_ssml: bool = False,
    reprompt_is_ssml: bool = False,
) -> SkillResponse:
    """Build an ask response from raw strings.

    Parameters
    ----------
    output:
        The speech to render now.
    reprompt_text:
        Speech replayed if the user does not reply or is misunderstood.
    output_is_ssml, reprompt_is_ssml:
        Whether the respective string is SSML markup rather than plain text.
    """

    speech = OutputSpeech.from_ssml(output) if output_is_ssml else OutputSpeech.plain(output)
    reprompt_speech = OutputSpeech.from_ssml(reprompt_text) if reprompt_is_ssml else OutputSpeech.plain(reprompt_text)
    return SkillResponse.ask(speech, Reprompt(output_speech=reprompt_speech))


def new_tell_response(text: str, card: Optional[StandardCard] = None) -> SkillResponse:
    return SkillResponse.tell(OutputSpeech.plain(text), card)


__all__ = [
    "OutputSpeech",
    "Reprompt",
    "Image",
    "StandardCard",
    "SkillResponse",
    "new_ask_response",
    "new_tell_response",
]
