"""Concept Map orchestrator package with lazy re-exports."""

__all__ = [
    "EventBus",
    "IntentOrchestrator",
    "OrchestratorDependencies",
    "build_orchestrator",
    "create_skill",
]


def __getattr__(name: str):  # pragma: no cover - simple proxy
    if name in {"EventBus"}:
        from .logging.event_bus import EventBus

        return EventBus
    if name in {"IntentOrchestrator", "OrchestratorDependencies"}:
        from .orchestrator import IntentOrchestrator, OrchestratorDependencies

        return {"IntentOrchestrator": IntentOrchestrator, "OrchestratorDependencies": OrchestratorDependencies}[name]
    if name in {"build_orchestrator", "create_skill"}:
        from .bootstrap import build_orchestrator, create_skill

        return {"build_orchestrator": build_orchestrator, "create_skill": create_skill}[name]
    raise AttributeError(name)
