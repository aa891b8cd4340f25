"""Build a ready-to-serve orchestrator from :class:`ConceptMapSettings`."""
from __future__ import annotations

from typing import Optional

import requests

from config.conceptmap_config import ConceptMapSettings
from orchestrator.logging.event_bus import EventBus
from orchestrator.logging.request_log import configure_logging
from orchestrator.orchestrator import IntentOrchestrator, OrchestratorDependencies
from services.conceptmap.http_session import build_session
from services.conceptmap.id_locator_client import IdLocatorClient
from services.conceptmap.traversal_client import TraversalClient
from skill_adapter.intents.intent_claims import ClaimsIntentHandler
from skill_adapter.intents.intent_router import IntentRouter


def build_event_bus(settings: ConceptMapSettings) -> Optional[EventBus]:
    if not settings.mqtt_host:
        return None
    return EventBus(
        host=settings.mqtt_host,
        port=settings.mqtt_port,
        username=settings.mqtt_username,
        password=settings.mqtt_password,
        base_topic=settings.mqtt_base_topic,
    )


def build_orchestrator(
    settings: Optional[ConceptMapSettings] = None,
    *,
    session: Optional[requests.Session] = None,
    event_bus: Optional[EventBus] = None,
) -> IntentOrchestrator:
    """Wire clients, handlers and telemetry into an :class:`IntentOrchestrator`."""

    settings = settings or ConceptMapSettings()
    session = session or build_session(
        max_retries=settings.http_max_retries,
        backoff_factor=settings.http_retry_backoff,
    )
    if event_bus is None:
        event_bus = build_event_bus(settings)

    id_locator = IdLocatorClient(
        endpoint=settings.id_locator_endpoint,
        language=settings.lookup_language,
        timeout=settings.http_timeout_seconds,
        session=session,
    )
    traversal = TraversalClient(
        endpoint=settings.traversal_endpoint,
        timeout=settings.http_timeout_seconds,
        session=session,
    )
    claims_handler = ClaimsIntentHandler(
        id_locator=id_locator,
        traversal=traversal,
        event_bus=event_bus,
        relationship_id=settings.relationship_id,
        card_title=settings.card_title,
    )
    deps = OrchestratorDependencies(intent_router=IntentRouter(claims_handler))
    return IntentOrchestrator(deps, event_bus=event_bus)


def create_skill(settings: Optional[ConceptMapSettings] = None) -> IntentOrchestrator:
    """Configure logging and build the orchestrator; the hosting runtime's entry point."""

    settings = settings or ConceptMapSettings()
    configure_logging(settings.log_level)
    return build_orchestrator(settings)


__all__ = ["build_orchestrator", "build_event_bus", "create_skill"]
