import argparse
import logging
import sys

from donations.matching.policy import resolve_policy
from records.loader import RecordSourceError
from records.pipeline import (
    DONATION_FILE_NAME,
    ORDERS_FILE_NAME,
    RESULT_DONATION_FILE_NAME,
    RESULT_ORDERS_FILE_NAME,
    split_donation_to_orders,
)


def main(argv=None):
    p = argparse.ArgumentParser(description="Split one donation across the best ranked orders.")
    p.add_argument("--donation", default=DONATION_FILE_NAME)
    p.add_argument("--orders", default=ORDERS_FILE_NAME)
    p.add_argument("--result-donation", default=RESULT_DONATION_FILE_NAME)
    p.add_argument("--result-orders", default=RESULT_ORDERS_FILE_NAME)
    p.add_argument("--distance-coefficient", type=float, default=None)
    p.add_argument("--time-coefficient", type=float, default=None)
    p.add_argument("--env-file", default=None, help=".env file with DISTANCE_COEFFICIENT / TIME_COEFFICIENT")
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        result = split_donation_to_orders(
            args.donation,
            args.orders,
            args.result_donation,
            args.result_orders,
            policy=resolve_policy(args.distance_coefficient, args.time_coefficient, args.env_file),
        )
    except (RecordSourceError, ValueError) as exc:
        # ValueError covers MalformedRecordError and InvalidPolicyError
        print(f"[FAILED] {exc}", file=sys.stderr)
        return 1

    print(
        f"Donation {result.supply_id}: {result.allocated_quantity} / {result.supply_original_quantity} units "
        f"split across {len(result.fulfillments)} orders ({len(result.warnings)} warnings)."
    )
    print("Order processing is completed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
