import pytest

from donations.matching.allocation import allocate_supply
from donations.models import Demand, RankedDemand


def ranked_orders(*quantities):
    """Already rank-ordered demands: first argument is the highest rank."""
    top = len(quantities)
    return [
        RankedDemand(Demand.new(index + 1, 1, quantity, 0, 1.0, 1.0), rank=top - index)
        for index, quantity in enumerate(quantities)
    ]


def test_walk_stops_at_the_order_that_exhausts_supply():
    orders = ranked_orders(5, 20, 7)

    outcome = allocate_supply(orders, 15)

    # 1. Order 3 is never visited
    assert [a.demand.id for a in outcome.processed] == [1, 2]

    # 2. Order 1 fully served, order 2 gets the rest
    assert [a.remaining_quantity for a in outcome.processed] == [0, 10]
    assert [a.allocated_quantity for a in outcome.processed] == [5, 10]
    assert outcome.remaining_supply == 0
    assert outcome.stopped_early


def test_exact_exhaustion_ends_walk():
    outcome = allocate_supply(ranked_orders(10, 3), 10)

    assert [(a.demand.id, a.remaining_quantity) for a in outcome.processed] == [(1, 0)]
    assert outcome.remaining_supply == 0


def test_leftover_supply_when_orders_run_out():
    outcome = allocate_supply(ranked_orders(2, 3), 10)

    assert [a.remaining_quantity for a in outcome.processed] == [0, 0]
    assert outcome.remaining_supply == 5
    assert not outcome.stopped_early


def test_empty_sequence_keeps_supply():
    outcome = allocate_supply([], 10)

    assert outcome.processed == ()
    assert outcome.remaining_supply == 10


def test_empty_supply_stops_at_first_order():
    outcome = allocate_supply(ranked_orders(4, 4), 0)

    assert [(a.demand.id, a.remaining_quantity) for a in outcome.processed] == [(1, 4)]
    assert outcome.remaining_supply == 0


def test_zero_quantity_orders_do_not_stop_the_walk():
    outcome = allocate_supply(ranked_orders(0, 6), 5)

    assert [(a.demand.id, a.remaining_quantity) for a in outcome.processed] == [(1, 0), (2, 1)]
    assert outcome.remaining_supply == 0


def test_allocation_does_not_mutate_inputs():
    orders = ranked_orders(5, 20)

    allocate_supply(orders, 15)

    assert [r.demand.quantity for r in orders] == [5, 20]


def test_negative_supply_is_rejected():
    with pytest.raises(ValueError):
        allocate_supply(ranked_orders(1), -1)


@pytest.mark.parametrize("supply", [0, 1, 9, 10, 11, 24, 25, 26, 100])
def test_conservation(supply):
    orders = ranked_orders(10, 4, 11)

    outcome = allocate_supply(orders, supply)

    consumed = sum(a.allocated_quantity for a in outcome.processed)
    assert consumed + outcome.remaining_supply == supply

    # Every processed order but the last is fully served
    for allocation in outcome.processed[:-1]:
        assert allocation.remaining_quantity == 0
