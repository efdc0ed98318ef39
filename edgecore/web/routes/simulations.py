"""
Simulator API routes.

Simulations are stateless: every request carries the config and the full
outcome sequence, which is replayed from the start.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter
from fastapi.responses import JSONResponse, Response

from edgecore.errors import ConfigValidationError
from edgecore.simulators import flip_x5, rotational
from edgecore.simulators.export import flip_result_to_csv
from edgecore.web.schemas import (
    FlipSimulationRequest,
    RotationalSimulationRequest,
    success_response,
)
from edgecore.web.utils import edgecore_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/simulations", tags=["simulations"])


def _flip_payload(result: flip_x5.SimulationResult) -> dict:
    data = asdict(result)
    for row in data["trades"]:
        row["result"] = row["result"].value
    return data


def _rotational_payload(state: rotational.RotationalState) -> dict:
    data = state.to_dict()
    data["summary"] = asdict(rotational.summarize(state))
    data["account_summaries"] = [asdict(a) for a in rotational.account_summaries(state)]
    return data


@router.post("/flip-x5")
async def run_flip_x5(body: FlipSimulationRequest):
    """Run a Flip X5 simulation."""
    try:
        result = flip_x5.simulate(body.config.to_config(), body.outcomes)
    except ConfigValidationError as e:
        return edgecore_error_response(e)
    return JSONResponse(success_response(data=_flip_payload(result)))


@router.post("/flip-x5/csv")
async def export_flip_x5(body: FlipSimulationRequest):
    """Run a Flip X5 simulation and return it as a CSV download."""
    config = body.config.to_config()
    try:
        result = flip_x5.simulate(config, body.outcomes)
    except ConfigValidationError as e:
        return edgecore_error_response(e)

    if not result.trades:
        return JSONResponse({"success": False, "error": "No trades to export"}, status_code=400)

    return Response(
        content=flip_result_to_csv(config, result),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="edgecore-x5-simulation.csv"'},
    )


@router.post("/rotational")
async def run_rotational(body: RotationalSimulationRequest):
    """Replay a rotational simulation and return the final state."""
    try:
        state = rotational.replay(body.config.to_config(), body.outcomes)
    except ConfigValidationError as e:
        return edgecore_error_response(e)
    return JSONResponse(success_response(data=_rotational_payload(state)))


@router.post("/rotational/undo")
async def undo_rotational(body: RotationalSimulationRequest):
    """Replay a rotational simulation, then undo its last trade."""
    try:
        state = rotational.replay(body.config.to_config(), body.outcomes)
    except ConfigValidationError as e:
        return edgecore_error_response(e)
    return JSONResponse(success_response(data=_rotational_payload(rotational.undo_last(state))))
