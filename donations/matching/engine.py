"""
Purpose: The matching "orchestrator" (single entry point).
What it does:

Coordinates the pipeline end-to-end for one donation:

- validates the policy and the batch (unique order ids)

- ranks the orders of the donation's product (ranking.py)

- orders them by rank, highest first

- splits the donation across them greedily (allocation.py)

- assembles an immutable SplitResult

Typical public function signature:

- split_donation(supply, demands, policy) -> SplitResult
  where SplitResult contains:

- supply_id, supply_remaining_quantity

- fulfillments: processed orders in rank order with their unmet quantity

- warnings: non-fatal diagnostics (timestamp inversions)

Rule: Engine is the only file other modules should call directly for matching.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ..models import Demand, MalformedRecordError, Supply
from .allocation import AllocationOutcome, allocate_supply
from .policy import MatchingPolicy, default_policy
from .ranking import TIMESTAMP_INVERSION_MESSAGE, order_by_rank, rank_demands

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fulfillment:
    """
    One processed order in the result.
    """
    demand_id: int
    remaining_quantity: int
    requested_quantity: int

    @property
    def allocated_quantity(self) -> int:
        return self.requested_quantity - self.remaining_quantity

    @property
    def fully_fulfilled(self) -> bool:
        return self.remaining_quantity == 0


@dataclass(frozen=True)
class SplitResult:
    """
    Output of a matching run for one donation.
    """
    supply_id: int
    supply_original_quantity: int
    supply_remaining_quantity: int
    fulfillments: Tuple[Fulfillment, ...]
    warnings: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """No order was processed (no order of this product, or none given)."""
        return not self.fulfillments

    @property
    def allocated_quantity(self) -> int:
        return self.supply_original_quantity - self.supply_remaining_quantity

    @property
    def demand_ids(self) -> List[int]:
        return [f.demand_id for f in self.fulfillments]


def assemble_result(
    supply: Supply,
    outcome: AllocationOutcome,
    warnings: Sequence[str] = (),
) -> SplitResult:
    """
    Convert an allocation outcome into the result handed to a sink.
    """
    fulfillments = tuple(
        Fulfillment(
            demand_id=a.demand.id,
            remaining_quantity=a.remaining_quantity,
            requested_quantity=a.demand.quantity,
        )
        for a in outcome.processed
    )
    return SplitResult(
        supply_id=supply.id,
        supply_original_quantity=supply.quantity,
        supply_remaining_quantity=outcome.remaining_supply,
        fulfillments=fulfillments,
        warnings=tuple(warnings),
    )


def _check_unique_ids(demands: Sequence[Demand]) -> None:
    seen: Set[int] = set()
    for demand in demands:
        if demand.id in seen:
            raise MalformedRecordError(f"Order id {demand.id} appears more than once in the batch")
        seen.add(demand.id)


def split_donation(
    supply: Supply,
    demands: Iterable[Demand],
    *,
    policy: Optional[MatchingPolicy] = None,
) -> SplitResult:
    """
    Main matching entry point (pure algorithm).

    It does NOT mutate the donation or the orders. It only:
      - ranks the orders of the donation's product
      - serves them highest rank first until the donation runs out
      - returns the donation's remainder + the processed orders

    Parameters
    ----------
    supply:
        The donation to split.
    demands:
        Candidate orders. Orders for another product are ignored.
    policy:
        MatchingPolicy with the rank coefficients. Defaults to default_policy().

    Returns
    -------
    SplitResult:
        supply_remaining_quantity: what is left of the donation
        fulfillments: processed orders in rank order (empty if nothing matched)
        warnings: one message per order newer than the donation

    Raises
    ------
    MalformedRecordError:
        a record is not a Supply/Demand or the batch repeats an order id.
        Nothing is returned in that case.
    """
    policy = policy or default_policy()
    policy.validate()

    if not isinstance(supply, Supply):
        raise MalformedRecordError(f"Expected a Supply record, got {type(supply).__name__}")

    demands = list(demands)
    for demand in demands:
        if not isinstance(demand, Demand):
            raise MalformedRecordError(f"Expected Demand records, got {type(demand).__name__}")
    _check_unique_ids(demands)

    # 1) Rank orders of this product
    ranked = rank_demands(supply, demands, policy)

    warnings = [f"Order {r.demand.id}: {TIMESTAMP_INVERSION_MESSAGE}" for r in ranked if r.time_inverted]

    # 2) Highest rank first
    ordered = order_by_rank(ranked)

    # 3) Split the donation
    outcome = allocate_supply(ordered, supply.quantity)

    logger.info(
        "Donation %s: %d of %d orders matched product %s, %d processed, %d of %d units left%s",
        supply.id,
        len(ranked),
        len(demands),
        supply.product_id,
        len(outcome.processed),
        outcome.remaining_supply,
        supply.quantity,
        " (donation exhausted)" if outcome.stopped_early else "",
    )
    for allocation in outcome.processed:
        logger.debug(
            "Order %s (rank %s): %d allocated, %d unmet",
            allocation.demand.id,
            allocation.rank,
            allocation.allocated_quantity,
            allocation.remaining_quantity,
        )

    # 4) Immutable result
    return assemble_result(supply, outcome, warnings)
