from __future__ import annotations

from typing import Callable

from studyscout.agents.orchestrator import ResourceOrchestrator, build_orchestrator

OrchestratorFactory = Callable[[], ResourceOrchestrator]


def get_orchestrator_factory() -> OrchestratorFactory:
    """Per-request pipeline builder; calling it raises ConfigurationMissing without an API key."""
    return build_orchestrator
