"""Route solving a full question paper segment by segment."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core.ai.exceptions import InvalidRequestError
from ...models.common import ResponseEnvelope
from ...models.solver import PaperSolveRequest, PaperSolveResponse, SolutionPayload
from ...services.paper_solver import PaperSolver
from ..dependencies import get_paper_solver

router = APIRouter(prefix="/solver", tags=["solver"])


@router.post(
    "/paper",
    response_model=ResponseEnvelope[PaperSolveResponse],
    summary="Solve every question of a paper",
)
async def solve_paper(
    request: PaperSolveRequest,
    solver: PaperSolver = Depends(get_paper_solver),
) -> ResponseEnvelope[PaperSolveResponse]:
    try:
        items = await solver.solve(request.paper_text, request.preferred_provider)
    except InvalidRequestError as exc:
        return ResponseEnvelope.failure(exc)

    solutions = [
        SolutionPayload(
            question_no=item.ordinal,
            question=item.prompt_fragment,
            answer=item.answer,
            explanation=item.rationale,
        )
        for item in items
    ]
    payload = PaperSolveResponse(total=len(solutions), solutions=solutions)
    return ResponseEnvelope.success_payload(payload)


__all__ = ("router",)
