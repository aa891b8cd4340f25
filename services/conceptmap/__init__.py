"""Concept Map remote services and claims shaping."""

from services.conceptmap.claims import ClaimsInfo, ItemInfo, project_claims
from services.conceptmap.http_session import build_session
from services.conceptmap.id_locator_client import IdLocatorClient
from services.conceptmap.speech import to_speech
from services.conceptmap.traversal_client import TraversalClient

__all__ = [
    "ClaimsInfo",
    "ItemInfo",
    "project_claims",
    "build_session",
    "IdLocatorClient",
    "TraversalClient",
    "to_speech",
]
