import logging
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, HTTPException, Body
from pydantic import BaseModel, Field

from app.core.data_loader import BacklogLoader, BacklogValidationError
from app.core.simulator import simulate, completion_distribution
from app.models.simulation import SimulationParameters, SimulationResult, CompletionRow, StatusBreakdown

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------

class RiskRequest(BaseModel):
    """Backlog document as uploaded plus the Done-handling flag."""
    backlog: Dict[str, Any] = Field(..., description="{slices: [...], groups: [...]} as uploaded.")
    includeDone: bool = Field(True, description="Count Done slices towards group risk.")


class RiskResponse(BaseModel):
    risk: float
    sliceCount: int
    candidateCount: int


class StatusRequest(BaseModel):
    backlog: Dict[str, Any]


class ForecastResponse(SimulationResult):
    """Simulation result plus the completion table the results page renders."""
    distribution: List[CompletionRow] = Field(default_factory=list)


def _load_backlog(payload: Dict[str, Any]) -> BacklogLoader:
    try:
        return BacklogLoader.from_json(payload)
    except BacklogValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


# ---------------------------------------------------------
# POST /api/forecast/risk
# ---------------------------------------------------------
@router.post("/risk", response_model=RiskResponse)
async def backlog_risk(req: RiskRequest = Body(...), targetRelease: Optional[str] = None) -> RiskResponse:
    loader = _load_backlog(req.backlog)
    return RiskResponse(
        risk=loader.risk(req.includeDone),
        sliceCount=len(loader.slices),
        candidateCount=len(loader.candidate_slices(req.includeDone, targetRelease)),
    )


# ---------------------------------------------------------
# POST /api/forecast/status
# ---------------------------------------------------------
@router.post("/status", response_model=StatusBreakdown)
async def backlog_status(req: StatusRequest = Body(...)) -> StatusBreakdown:
    return _load_backlog(req.backlog).status_breakdown()


# ---------------------------------------------------------
# POST /api/forecast/simulate
# ---------------------------------------------------------
@router.post("/simulate", response_model=ForecastResponse)
def run_forecast(params: SimulationParameters = Body(...)) -> ForecastResponse:
    # Plain def: the simulation is CPU bound, FastAPI runs it in the threadpool
    try:
        result = simulate(params)
        rows = completion_distribution(result, params.startDate, params.deadlineDate)
        return ForecastResponse(**result.model_dump(), distribution=rows)

    except HTTPException:
        raise

    except Exception as e:
        logger.exception("[SIMULATE] Forecast failed")
        raise HTTPException(
            status_code=500,
            detail=f"Forecast failed: {str(e)}",
            headers={"X-Failure-Reason": "Simulation error"},
        )
