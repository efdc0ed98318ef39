"""
Pydantic schemas for API request/response validation.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from edgecore.config import settings
from edgecore.simulators.flip_x5 import FlipConfig
from edgecore.simulators.outcomes import Outcome
from edgecore.simulators.rotational import RotationalConfig


# ==================== SIMULATOR MODELS ====================


class FlipConfigIn(BaseModel):
    """Flip X5 configuration. Ranges are checked by the simulator itself."""

    account_size: float = 1000.0
    cycle_size: int = 2
    risk_per_cycle: float = 200.0
    rr_ratio: float = 2.0
    reinvest_percent: float = 80.0
    use_fixed_dollars: bool = False

    def to_config(self) -> FlipConfig:
        return FlipConfig(**self.model_dump())


class FlipSimulationRequest(BaseModel):
    """Request body for a Flip X5 run."""

    config: FlipConfigIn = Field(default_factory=FlipConfigIn)
    outcomes: List[Outcome] = Field(default_factory=list)


class RotationalConfigIn(BaseModel):
    """
    Rotational configuration.

    initial_balances (one per account) wins over capital_per_account (same
    balance for every account), which defaults to the configured capital.
    """

    number_of_accounts: int = 3
    initial_balances: Optional[List[float]] = None
    capital_per_account: Optional[float] = None
    risk_per_trade: float = 100.0
    risk_reward_ratio: float = 1.0

    def to_config(self) -> RotationalConfig:
        if self.initial_balances is not None:
            return RotationalConfig(
                number_of_accounts=self.number_of_accounts,
                initial_balances=tuple(self.initial_balances),
                risk_per_trade=self.risk_per_trade,
                risk_reward_ratio=self.risk_reward_ratio,
            )
        return RotationalConfig.uniform(
            number_of_accounts=self.number_of_accounts,
            capital_per_account=(
                self.capital_per_account
                if self.capital_per_account is not None
                else settings.rotational_defaults.get("capital_per_account", 1000.0)
            ),
            risk_per_trade=self.risk_per_trade,
            risk_reward_ratio=self.risk_reward_ratio,
        )


class RotationalSimulationRequest(BaseModel):
    """Request body for a rotational run (replayed from the start)."""

    config: RotationalConfigIn = Field(default_factory=RotationalConfigIn)
    outcomes: List[Outcome] = Field(default_factory=list)


# ==================== HELPER FUNCTIONS ====================


def success_response(data: Any = None, message: str = None) -> dict:
    """Create a standardized success response dict."""
    response = {"success": True}
    if data is not None:
        response["data"] = data
    if message:
        response["message"] = message
    return response


def error_response(error: str, data: Any = None, status_code: int = 400) -> tuple[dict, int]:
    """Create a standardized error response dict with status code."""
    response = {"success": False, "error": error}
    if data is not None:
        response["data"] = data
    return response, status_code
