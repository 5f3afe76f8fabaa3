"""
Purpose: Central configuration for donation matching (single source of truth).
What it does:

Stores the two coefficients of the rank formula:

rank = round(DISTANCE_COEFFICIENT / distance) + TIME_COEFFICIENT * (donation_ts - order_ts)

DISTANCE_COEFFICIENT = 5000
TIME_COEFFICIENT = 1

Change DISTANCE_COEFFICIENT together with the coordinate unit (km, m, degrees ...)
so the distance term stays balanced against the time term.

Rule: No logic here—just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


class InvalidPolicyError(ValueError):
    """Raised when a matching coefficient cannot be used by the rank formula."""
    pass


@dataclass(frozen=True)
class MatchingPolicy:
    """
    Coefficients for the rank calculator.

    Notes:
    - distance term: nearer orders score higher (inverse distance).
    - time term: orders waiting longer before the donation score higher.
    """

    distance_coefficient: float = 5000

    time_coefficient: float = 1

    def validate(self) -> None:
        """
        Basic sanity checks. Called once per run by the engine.
        """
        for name in ("distance_coefficient", "time_coefficient"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidPolicyError(f"{name} must be a finite number, got {value!r}")

        if self.distance_coefficient <= 0:
            raise InvalidPolicyError("distance_coefficient must be > 0")


def default_policy() -> MatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchingPolicy()
    p.validate()
    return p


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise InvalidPolicyError(f"{name} must be a number, got {raw!r}") from exc
    return int(value) if value.is_integer() else value


def policy_from_env(dotenv_path: Optional[str] = None) -> MatchingPolicy:
    """
    Build the policy from the environment (or a .env file).

    Example in .env:
    DISTANCE_COEFFICIENT=5000
    TIME_COEFFICIENT=1
    """
    load_dotenv(dotenv_path)
    defaults = MatchingPolicy()
    p = MatchingPolicy(
        distance_coefficient=_env_number("DISTANCE_COEFFICIENT", defaults.distance_coefficient),
        time_coefficient=_env_number("TIME_COEFFICIENT", defaults.time_coefficient),
    )
    p.validate()
    return p


def resolve_policy(
    distance_coefficient: Optional[float] = None,
    time_coefficient: Optional[float] = None,
    dotenv_path: Optional[str] = None,
) -> MatchingPolicy:
    """
    Policy for a run: explicit coefficients (e.g. command line flags) win,
    anything left as None comes from the environment / .env, then the defaults.
    """
    p = policy_from_env(dotenv_path)
    p = MatchingPolicy(
        distance_coefficient=distance_coefficient if distance_coefficient is not None else p.distance_coefficient,
        time_coefficient=time_coefficient if time_coefficient is not None else p.time_coefficient,
    )
    p.validate()
    return p
