"""
Purpose: Domain models for the Donations capability.
What it does:
- Defines the shared record shape (id, product_id, quantity, timestamp, location)
- Wraps it into Supply (the one donation of a run) and Demand (an order)
- Defines RankedDemand, the output of the rank calculator

Records are immutable values. Allocation never writes back into them,
it produces new result values instead.

Rule: No ranking or allocation logic. Models and shape validation only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real


class MalformedRecordError(ValueError):
    """Raised when a supply or demand record violates its shape."""
    pass


@dataclass(frozen=True)
class Location:
    """
    Planar coordinates. Any unit works (km, m, degrees) as long as the
    distance coefficient of the policy is tuned to the same unit.
    """

    x: float
    y: float

    def distance_to(self, other: Location) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def _require_non_negative_int(value, field_name: str, record_id) -> None:
    # bool is an int subclass but never a valid count/id
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRecordError(
            f"Record {record_id!r}: field '{field_name}' must be an integer, got {value!r}"
        )
    if value < 0:
        raise MalformedRecordError(
            f"Record {record_id!r}: field '{field_name}' must be >= 0, got {value}"
        )


@dataclass(frozen=True)
class Record:
    """
    General shape shared by donations and orders.
    """

    id: int
    product_id: int
    quantity: int
    timestamp: int
    location: Location

    def __post_init__(self) -> None:
        _require_non_negative_int(self.id, "id", self.id)
        _require_non_negative_int(self.product_id, "product_id", self.id)
        _require_non_negative_int(self.quantity, "quantity", self.id)

        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise MalformedRecordError(
                f"Record {self.id}: field 'timestamp' must be an integer, got {self.timestamp!r}"
            )

        if not isinstance(self.location, Location):
            raise MalformedRecordError(
                f"Record {self.id}: field 'location' must be a Location, got {self.location!r}"
            )

        for axis in ("x", "y"):
            coordinate = getattr(self.location, axis)
            if isinstance(coordinate, bool) or not isinstance(coordinate, Real) or not math.isfinite(coordinate):
                raise MalformedRecordError(
                    f"Record {self.id}: coordinate '{axis}' must be a finite number, got {coordinate!r}"
                )

    @classmethod
    def new(
        cls,
        record_id: int,
        product_id: int,
        quantity: int,
        timestamp: int,
        x: float,
        y: float,
    ) -> Record:
        return cls(
            id=record_id,
            product_id=product_id,
            quantity=quantity,
            timestamp=timestamp,
            location=Location(x, y),
        )


class _RecordView:
    """Read-only access to the embedded record's fields."""

    record: Record

    def __post_init__(self) -> None:
        if not isinstance(self.record, Record):
            raise MalformedRecordError(
                f"{type(self).__name__} must wrap a Record, got {type(self.record).__name__}"
            )

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def product_id(self) -> int:
        return self.record.product_id

    @property
    def quantity(self) -> int:
        return self.record.quantity

    @property
    def timestamp(self) -> int:
        return self.record.timestamp

    @property
    def location(self) -> Location:
        return self.record.location


@dataclass(frozen=True)
class Supply(_RecordView):
    """
    The single donation of a run: the quantity available to distribute.
    """

    record: Record

    @classmethod
    def new(cls, supply_id: int, product_id: int, quantity: int, timestamp: int, x: float, y: float) -> Supply:
        return cls(Record.new(supply_id, product_id, quantity, timestamp, x, y))


@dataclass(frozen=True)
class Demand(_RecordView):
    """
    An order requesting a quantity of the donation's product.
    Its timestamp is expected to be earlier than the donation's.
    """

    record: Record

    @classmethod
    def new(cls, demand_id: int, product_id: int, quantity: int, timestamp: int, x: float, y: float) -> Demand:
        return cls(Record.new(demand_id, product_id, quantity, timestamp, x, y))


@dataclass(frozen=True)
class RankedDemand:
    """
    A demand together with its priority relative to one supply.
    Higher rank is served first. Ranks of different supplies are not comparable.
    """

    demand: Demand
    rank: int
    time_inverted: bool = False
