"""What-if simulators over TP/SL outcome sequences."""

from edgecore.simulators.outcomes import Outcome, parse_outcomes, select_outcomes
from edgecore.simulators.flip_x5 import FlipConfig, SimulationResult, simulate
from edgecore.simulators.rotational import (
    RotationalConfig,
    RotationalState,
    apply_batch,
    apply_trade,
    initialize,
    undo_last,
)

__all__ = [
    "Outcome",
    "parse_outcomes",
    "select_outcomes",
    "FlipConfig",
    "SimulationResult",
    "simulate",
    "RotationalConfig",
    "RotationalState",
    "initialize",
    "apply_trade",
    "undo_last",
    "apply_batch",
]
