"""FastAPI dependency providers for the AI gateway."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from ..core.ai.gateway import CompletionGateway
from ..core.settings import get_settings
from ..services.paper_solver import PaperSolver


@lru_cache()
def get_completion_gateway() -> CompletionGateway:
    """Return a cached instance of :class:`CompletionGateway`."""

    return CompletionGateway(get_settings().ai)


def get_paper_solver(
    gateway: CompletionGateway = Depends(get_completion_gateway),
) -> PaperSolver:
    return PaperSolver(gateway)


async def close_completion_gateway() -> None:
    """Close the cached gateway, if one was created, and forget it."""

    if get_completion_gateway.cache_info().currsize:
        await get_completion_gateway().aclose()
        get_completion_gateway.cache_clear()


__all__ = ("close_completion_gateway", "get_completion_gateway", "get_paper_solver")
