"""Claims records decoded from Concept Map traversal documents."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from orchestrator.errors import ClaimsParseError
from services.conceptmap.speech import to_speech


class ItemInfo(BaseModel):
    """One entity entry of a traversal response."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    picture: Optional[str]


class ClaimsInfo(BaseModel):
    """Claims gathered for a single queried entity.

    ``picture_url`` belongs to the queried entity itself while ``item_labels``
    lists the related entities in the order the traversal returned them.
    """

    picture_url: Optional[str] = None
    item_labels: List[str] = Field(default_factory=list)

    def to_item_labels_speech(self) -> str:
        return to_speech(self.item_labels)


def project_claims(document: Any, queried_entity_id: str) -> ClaimsInfo:
    """Split a traversal document into the queried entity's picture and related labels.

    Raises :class:`ClaimsParseError` when the document or any of its records is
    malformed; records are never skipped silently.
    """

    if not isinstance(document, Mapping):
        raise ClaimsParseError("Traversal document must be a JSON object")
    records = document.get("item")
    if not isinstance(records, list):
        raise ClaimsParseError("Traversal document has no 'item' array")

    claims = ClaimsInfo()
    for index, record in enumerate(records):
        try:
            item = ItemInfo.model_validate(record)
        except ValidationError as exc:
            raise ClaimsParseError(f"Malformed traversal record at index {index}") from exc
        if item.id == queried_entity_id:
            # Last match wins when the service repeats the queried entity.
            claims.picture_url = item.picture
        else:
            claims.item_labels.append(item.label)
    return claims


__all__ = ["ItemInfo", "ClaimsInfo", "project_claims"]
