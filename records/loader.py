#Purpose: Text source adapter for donation/order records.
#Sole responsibility: read `Data lines` from files and return domain records.
#Data line format (whitespace separated):
#{id:uint} {product_id:uint} {quantity:uint} {x:float} {y:float} {timestamp:int}
#It should not contain ranking or allocation rules.

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from donations.models import Demand, MalformedRecordError, Supply

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DATA_LINE_FORMAT = "{id:uint} {product_id:uint} {quantity:uint} {x:float} {y:float} {timestamp:int}"

# (id, product_id, quantity, timestamp, x, y)
DataFields = Tuple[int, int, int, int, float, float]


class RecordSourceError(Exception):
    """Raised when a record file cannot be read."""
    pass


def _malformed(line: str) -> MalformedRecordError:
    return MalformedRecordError(
        "Wrongly formatted `Data line`.\n"
        f"Expected format: `{DATA_LINE_FORMAT}`\n"
        f"But got: {line!r}"
    )


def _parse_uint(token: str, line: str) -> int:
    # plain ASCII digits only: no sign, no "_" separators
    if not (token.isascii() and token.isdigit()):
        raise _malformed(line)
    return int(token)


def _parse_int(token: str, line: str) -> int:
    digits = token[1:] if token.startswith("-") else token
    if not (digits.isascii() and digits.isdigit()):
        raise _malformed(line)
    return int(token)


def parse_data_line(line: str) -> DataFields:
    """
    Parse one data line into (id, product_id, quantity, timestamp, x, y).
    """
    tokens = line.split()
    if len(tokens) != 6:
        raise _malformed(line)

    record_id = _parse_uint(tokens[0], line)
    product_id = _parse_uint(tokens[1], line)
    quantity = _parse_uint(tokens[2], line)
    try:
        x = float(tokens[3])
        y = float(tokens[4])
    except ValueError as exc:
        raise _malformed(line) from exc
    timestamp = _parse_int(tokens[5], line)

    return record_id, product_id, quantity, timestamp, x, y


def _read_lines(path: PathLike) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as file:
            return [line.rstrip("\n") for line in file]
    except OSError as exc:
        raise RecordSourceError(f"Unable to open file: {path}") from exc


def read_donation(path: PathLike) -> Supply:
    """
    Read the donation from the first data line of `path`.
    Any further lines are ignored.
    """
    lines = [line for line in _read_lines(path) if line.strip()]
    if not lines:
        raise RecordSourceError(f"Donation file is empty: {path}")

    if len(lines) > 1:
        logger.warning("Detected extra lines in donation file %s. They are ignored", path)

    return Supply.new(*parse_data_line(lines[0]))


def read_orders(path: PathLike, product_id: Optional[int] = None) -> List[Demand]:
    """
    Read one order per non-blank line of `path`.

    If product_id is given, orders for other products are skipped here
    (they could never be fulfilled by that donation).
    """
    orders: List[Demand] = []
    for line in _read_lines(path):
        if not line.strip():
            continue
        demand = Demand.new(*parse_data_line(line))
        if product_id is not None and demand.product_id != product_id:
            continue
        orders.append(demand)

    logger.debug("Read %d orders from %s", len(orders), path)
    return orders
