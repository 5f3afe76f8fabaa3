#Purpose: File-to-file run of the matching engine (the "one call" entry point for scripts).
#Reads the donation + orders, splits the donation, saves both result files.

from __future__ import annotations

from typing import Optional

from donations.matching.engine import SplitResult, split_donation
from donations.matching.policy import MatchingPolicy
from .loader import PathLike, read_donation, read_orders
from .writer import save_results

# Default file names, relative to the working directory
DONATION_FILE_NAME = "donation.txt"
ORDERS_FILE_NAME = "orders.txt"
RESULT_DONATION_FILE_NAME = "result_donation.txt"
RESULT_ORDERS_FILE_NAME = "result_orders.txt"


def split_donation_to_orders(
    donation_file: PathLike = DONATION_FILE_NAME,
    orders_file: PathLike = ORDERS_FILE_NAME,
    result_donation_file: PathLike = RESULT_DONATION_FILE_NAME,
    result_orders_file: PathLike = RESULT_ORDERS_FILE_NAME,
    *,
    policy: Optional[MatchingPolicy] = None,
) -> SplitResult:
    # 1. Load data (orders of other products are dropped while reading)
    donation = read_donation(donation_file)
    orders = read_orders(orders_file, product_id=donation.product_id)

    # 2. Rank, order and split
    result = split_donation(donation, orders, policy=policy)

    # 3. Save results (only reached when the whole batch succeeded)
    save_results(result, result_donation_file, result_orders_file)
    return result
