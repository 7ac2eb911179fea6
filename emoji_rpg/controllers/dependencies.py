"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from emoji_rpg.config.dependencies import build_orchestrator
from emoji_rpg.config.settings import settings
from emoji_rpg.pipelines.voice import FallbackTable, VoiceActionOrchestrator, build_default_table


def get_fallback_table(request: Request) -> FallbackTable:
    table = getattr(request.app.state, "fallback_table", None)
    if table is None:
        table = request.app.state.fallback_table = build_default_table()
    return table


def get_orchestrator(
    request: Request,
    fallback_table: Annotated[FallbackTable, Depends(get_fallback_table)],
) -> VoiceActionOrchestrator:
    """Return the orchestrator built at startup, building it on first use otherwise."""

    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = build_orchestrator(settings, fallback_table=fallback_table)
        request.app.state.orchestrator = orchestrator
    return orchestrator


FallbackTableDep = Annotated[FallbackTable, Depends(get_fallback_table)]
OrchestratorDep = Annotated[VoiceActionOrchestrator, Depends(get_orchestrator)]


__all__ = [
    "FallbackTableDep",
    "OrchestratorDep",
    "get_fallback_table",
    "get_orchestrator",
]
