#Purpose: Text sink adapter for split results.
#Writes two files:
#- remaining donation: `{donation_id} {remaining_quantity}`
#- processed orders: one `{order_id} {remaining_quantity}` line per order,
#  or NO_MATCH_MESSAGE when no order was processed.

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from donations.matching.engine import SplitResult

PathLike = Union[str, Path]

NO_MATCH_MESSAGE = "No orders match to donation."


def format_donation_line(result: SplitResult) -> str:
    return f"{result.supply_id} {result.supply_remaining_quantity}\n"


def format_order_lines(result: SplitResult) -> List[str]:
    if result.is_empty:
        return [NO_MATCH_MESSAGE + "\n"]
    return [f"{f.demand_id} {f.remaining_quantity}\n" for f in result.fulfillments]


def save_results(result: SplitResult, donation_path: PathLike, orders_path: PathLike) -> None:
    """
    Save the remaining donation and the processed orders.
    Existing files are overwritten. Both files are opened before any line
    is written, so a path that cannot be opened fails before results land on disk.
    """
    donation_line = format_donation_line(result)
    order_lines = format_order_lines(result)

    with open(donation_path, "w", encoding="utf-8") as donation_file, \
            open(orders_path, "w", encoding="utf-8") as orders_file:
        orders_file.writelines(order_lines)
        donation_file.write(donation_line)
