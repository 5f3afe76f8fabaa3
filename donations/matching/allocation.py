"""
Purpose: Split the donation's quantity across ranked orders (greedy).
What it does:

Walks the orders highest rank first, keeping `remaining_supply`:

- remaining_supply > order.quantity: order fully fulfilled, keep walking
- otherwise: order gets what is left (exactly or partially fulfilled),
  remaining_supply becomes 0 and the walk stops at this order

Outputs:

the processed prefix (every visited order with its unmet quantity)
and the donation's remaining quantity.

Orders after the stopping order are never visited and get no decision.

Rule: Allocation consumes supply; it does not rank and does not mutate inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..models import Demand, RankedDemand


@dataclass(frozen=True)
class Allocation:
    """
    Fulfillment decision for one processed order.
    """
    demand: Demand
    rank: int
    allocated_quantity: int
    remaining_quantity: int  # unmet part of the request, 0 when fully fulfilled


@dataclass(frozen=True)
class AllocationOutcome:
    """
    Output of one greedy walk.
    """
    processed: Tuple[Allocation, ...]
    remaining_supply: int

    @property
    def stopped_early(self) -> bool:
        """True when the supply ran out (the last processed order zeroed it)."""
        return bool(self.processed) and self.remaining_supply == 0


def allocate_supply(ordered: Iterable[RankedDemand], supply_quantity: int) -> AllocationOutcome:
    """
    Greedy walk over rank-ordered demands.

    Strictly rank prioritised: an order is served fully before the next one
    gets anything. This is not a quantity optimisation (no knapsack).
    """
    if supply_quantity < 0:
        raise ValueError(f"supply_quantity must be >= 0, got {supply_quantity}")

    remaining_supply = supply_quantity
    processed: List[Allocation] = []

    for ranked in ordered:
        requested = ranked.demand.quantity

        if remaining_supply > requested:
            remaining_supply -= requested
            processed.append(
                Allocation(
                    demand=ranked.demand,
                    rank=ranked.rank,
                    allocated_quantity=requested,
                    remaining_quantity=0,
                )
            )
            continue

        # This order takes the rest of the supply and ends the walk
        processed.append(
            Allocation(
                demand=ranked.demand,
                rank=ranked.rank,
                allocated_quantity=remaining_supply,
                remaining_quantity=requested - remaining_supply,
            )
        )
        remaining_supply = 0
        break

    return AllocationOutcome(processed=tuple(processed), remaining_supply=remaining_supply)
