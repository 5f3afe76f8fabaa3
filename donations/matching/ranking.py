"""
Purpose: Rank orders against one donation (the "who is served first" layer).
What it does:

Computes for each order:

distance = |donation.location - order.location| (Euclidean)

time_difference = donation.timestamp - order.timestamp

rank = round(distance_coefficient / distance) + time_coefficient * time_difference

Orders the ranked demands by rank, highest first. Ties keep input order.

Rule: Ranking decides priority; it does not consume any supply.
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Iterable, List, Sequence, Tuple

from ..models import Demand, RankedDemand, Supply
from .policy import MatchingPolicy

logger = logging.getLogger(__name__)

# Distance term for a co-located order (and for quotients too large to hold)
MAX_DISTANCE_SCORE = sys.maxsize

TIMESTAMP_INVERSION_MESSAGE = "order timestamp is later than donation timestamp; behavior may be unintuitive"


def _round_half_away(value: float) -> int:
    # Python's round() rounds half to even; ranks round .5 away from zero
    rounded = math.floor(abs(value) + 0.5)
    return rounded if value >= 0 else -rounded


def distance_score(distance: float, distance_coefficient: float) -> int:
    """
    Inverse-distance term of the rank, capped at MAX_DISTANCE_SCORE.
    """
    if distance <= 0:
        return MAX_DISTANCE_SCORE

    quotient = distance_coefficient / distance
    if quotient >= MAX_DISTANCE_SCORE:
        return MAX_DISTANCE_SCORE
    return _round_half_away(quotient)


def time_score(t_dif: int, time_coefficient: float) -> int:
    """
    Waiting-time term of the rank. Whole coefficients keep integer arithmetic,
    so arbitrarily large timestamps stay exact.
    """
    if isinstance(time_coefficient, float) and time_coefficient.is_integer():
        time_coefficient = int(time_coefficient)

    term = time_coefficient * t_dif
    if isinstance(term, int):
        return term
    return _round_half_away(term)


def time_difference(supply: Supply, demand: Demand) -> int:
    """
    How long the order waited before the donation was placed.
    Negative when the order came after the donation.
    """
    difference = supply.timestamp - demand.timestamp
    if difference < 0:
        logger.warning(
            "Order %s: %s (order=%s, donation=%s)",
            demand.id,
            TIMESTAMP_INVERSION_MESSAGE,
            demand.timestamp,
            supply.timestamp,
        )
    return difference


def calculate_rank(supply: Supply, demand: Demand, policy: MatchingPolicy) -> Tuple[int, bool]:
    """
    Rank of one order relative to the donation.

    Returns (rank, time_inverted). time_inverted is True when the order is
    newer than the donation; its negative time term is still applied.
    """
    distance = supply.location.distance_to(demand.location)
    t_dif = time_difference(supply, demand)

    rank = distance_score(distance, policy.distance_coefficient) + time_score(t_dif, policy.time_coefficient)
    return rank, t_dif < 0


def rank_demand(supply: Supply, demand: Demand, policy: MatchingPolicy) -> RankedDemand:
    rank, time_inverted = calculate_rank(supply, demand, policy)
    return RankedDemand(demand=demand, rank=rank, time_inverted=time_inverted)


def rank_demands(supply: Supply, demands: Iterable[Demand], policy: MatchingPolicy) -> List[RankedDemand]:
    """
    Rank every order of the donation's product, in input order.

    An order for another product cannot be fulfilled by this donation,
    so it is skipped without error.
    """
    ranked: List[RankedDemand] = []
    for demand in demands:
        if demand.product_id != supply.product_id:
            logger.debug(
                "Skipping order %s: product %s does not match donation product %s",
                demand.id,
                demand.product_id,
                supply.product_id,
            )
            continue
        ranked.append(rank_demand(supply, demand, policy))
    return ranked


def order_by_rank(ranked: Sequence[RankedDemand]) -> List[RankedDemand]:
    """
    Highest rank first. sorted() is stable, so equal ranks keep input order.
    """
    return sorted(ranked, key=lambda r: r.rank, reverse=True)
