import logging

import pytest

from donations.matching.policy import (
    InvalidPolicyError,
    MatchingPolicy,
    default_policy,
    policy_from_env,
    resolve_policy,
)
from donations.matching.ranking import (
    MAX_DISTANCE_SCORE,
    calculate_rank,
    distance_score,
    time_score,
    order_by_rank,
    rank_demand,
    rank_demands,
)
from donations.models import Demand, Location, MalformedRecordError, RankedDemand, Record, Supply


@pytest.fixture
def donation():
    return Supply.new(1, product_id=7, quantity=15, timestamp=1000, x=0.0, y=0.0)


def test_rank_combines_inverse_distance_and_waiting_time(donation):
    """
    distance 5 (3-4-5 triangle) -> 5000 / 5 = 1000
    waited 100 -> + 100
    """
    order = Demand.new(2, 7, 5, 900, 3.0, 4.0)

    rank, inverted = calculate_rank(donation, order, default_policy())

    assert rank == 1100
    assert inverted is False


def test_rank_rounds_half_away_from_zero(donation):
    # 5000 / 2000 = 2.5 -> 3 (round() would give 2)
    order = Demand.new(2, 7, 5, 1000, 2000.0, 0.0)

    rank, _ = calculate_rank(donation, order, default_policy())

    assert rank == 3


def test_coefficients_come_from_policy(donation):
    order = Demand.new(2, 7, 5, 990, 10.0, 0.0)
    policy = MatchingPolicy(distance_coefficient=100, time_coefficient=3)

    rank, _ = calculate_rank(donation, order, policy)

    # 100 / 10 + 3 * 10
    assert rank == 40


def test_co_located_order_gets_maximum_distance_score(donation):
    same_place = Demand.new(2, 7, 5, 1000, 0.0, 0.0)
    very_close = Demand.new(3, 7, 5, 1000, 1e-300, 0.0)

    rank, _ = calculate_rank(donation, same_place, default_policy())
    close_rank, _ = calculate_rank(donation, very_close, default_policy())

    # 1. No ZeroDivisionError and a plain int back
    assert isinstance(rank, int)
    assert rank == MAX_DISTANCE_SCORE

    # 2. Nothing outranks a co-located order on the distance term
    assert rank >= close_rank
    assert distance_score(0.0, 5000) == MAX_DISTANCE_SCORE


def test_inverted_timestamp_lowers_rank_and_logs_warning(donation, caplog):
    newer_order = Demand.new(2, 7, 5, 1200, 3.0, 4.0)

    with caplog.at_level(logging.WARNING, logger="donations.matching.ranking"):
        ranked = rank_demand(donation, newer_order, default_policy())

    assert ranked.rank == 1000 - 200
    assert ranked.time_inverted is True
    assert "later than donation timestamp" in caplog.text


def test_rank_demands_skips_other_products(donation):
    orders = [
        Demand.new(2, 7, 5, 900, 1.0, 0.0),
        Demand.new(3, 8, 5, 900, 1.0, 0.0),
        Demand.new(4, 7, 5, 900, 2.0, 0.0),
    ]

    ranked = rank_demands(donation, orders, default_policy())

    assert [r.demand.id for r in ranked] == [2, 4]


def test_order_by_rank_is_descending_and_stable():
    def ranked(demand_id, rank):
        return RankedDemand(Demand.new(demand_id, 1, 1, 0, 0.0, 0.0), rank)

    items = [ranked(1, 10), ranked(2, 30), ranked(3, 10), ranked(4, 30), ranked(5, 20)]

    ordered = order_by_rank(items)

    # Ties keep their input order (2 before 4, 1 before 3)
    assert [r.demand.id for r in ordered] == [2, 4, 5, 1, 3]
    # Input is untouched
    assert [r.demand.id for r in items] == [1, 2, 3, 4, 5]


def test_policy_validation():
    default_policy().validate()

    with pytest.raises(InvalidPolicyError):
        MatchingPolicy(distance_coefficient=0).validate()

    with pytest.raises(InvalidPolicyError):
        MatchingPolicy(time_coefficient=float("nan")).validate()


def test_policy_from_env(monkeypatch):
    monkeypatch.setenv("DISTANCE_COEFFICIENT", "250")
    monkeypatch.setenv("TIME_COEFFICIENT", "0.5")

    policy = policy_from_env()

    assert policy.distance_coefficient == 250
    assert policy.time_coefficient == 0.5


def test_policy_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("DISTANCE_COEFFICIENT", "far")

    with pytest.raises(InvalidPolicyError):
        policy_from_env()


@pytest.mark.parametrize(
    "fields",
    [
        (-1, 7, 5, 0, 0.0, 0.0),  # negative id
        (1, -7, 5, 0, 0.0, 0.0),  # negative product
        (1, 7, -5, 0, 0.0, 0.0),  # negative quantity
        (1, 7, 5.5, 0, 0.0, 0.0),  # fractional quantity
        (1, 7, True, 0, 0.0, 0.0),  # bool is not a quantity
        (1, 7, 5, "noon", 0.0, 0.0),  # timestamp not an int
        (1, 7, 5, 0, float("inf"), 0.0),  # coordinate not finite
    ],
)
def test_malformed_records_are_rejected(fields):
    with pytest.raises(MalformedRecordError):
        Demand.new(*fields)


def test_location_distance():
    assert Location(0.0, 0.0).distance_to(Location(3.0, 4.0)) == 5.0


def test_large_time_difference_stays_exact():
    # Nanosecond clocks easily exceed 2**53, where floats stop counting by one
    donation = Supply.new(1, 7, 5, 2**60 + 1, 0.0, 0.0)
    order = Demand.new(2, 7, 5, 0, 5000.0, 0.0)

    rank, _ = calculate_rank(donation, order, default_policy())

    assert rank == 2**60 + 2


def test_time_score_with_whole_and_fractional_coefficients():
    assert time_score(2**60 + 1, 1.0) == 2**60 + 1
    assert time_score(2**60 + 1, 2) == 2**61 + 2
    assert time_score(5, 0.5) == 3
    assert time_score(-5, 0.5) == -3


def test_location_must_be_a_location():
    with pytest.raises(MalformedRecordError) as excinfo:
        Record(id=1, product_id=7, quantity=5, timestamp=0, location=(0.0, 0.0))

    assert "location" in str(excinfo.value)


def test_wrappers_must_wrap_a_record():
    with pytest.raises(MalformedRecordError):
        Demand(record=(1, 7, 5, 0, 0.0, 0.0))


def test_explicit_coefficients_override_environment(monkeypatch):
    monkeypatch.setenv("DISTANCE_COEFFICIENT", "250")
    monkeypatch.setenv("TIME_COEFFICIENT", "4")

    # 1. Nothing explicit: environment wins over defaults
    from_env = resolve_policy()
    assert (from_env.distance_coefficient, from_env.time_coefficient) == (250, 4)

    # 2. One explicit value: only that one is replaced
    mixed = resolve_policy(time_coefficient=0.5)
    assert (mixed.distance_coefficient, mixed.time_coefficient) == (250, 0.5)

    # 3. Explicit values are validated too
    with pytest.raises(InvalidPolicyError):
        resolve_policy(distance_coefficient=-1.0)
