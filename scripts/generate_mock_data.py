import argparse

import numpy as np
import pandas as pd

from records.loader import DATA_LINE_FORMAT

COLUMNS = ["id", "product_id", "quantity", "x", "y", "timestamp"]


def generate_mock_data(
    num_orders=200,
    num_products=3,
    donation_file="donation.txt",
    orders_file="orders.txt",
    seed=None,
):
    """
    Generates a donation and a pool of orders in the `Data line` format
    read by records.loader. Orders of several products are mixed in, so the
    product filter has something to skip.
    """
    rng = np.random.default_rng(seed)

    # Donation placed "now", somewhere near the center of a 100 x 100 area
    donation_ts = 1_700_000_000
    donation = {
        "id": 1,
        "product_id": 1,
        "quantity": int(rng.integers(20, 200)),
        "x": np.round(50 + rng.uniform(-10, 10), 3),
        "y": np.round(50 + rng.uniform(-10, 10), 3),
        "timestamp": donation_ts,
    }

    data = []
    for order_index in range(num_orders):
        data.append({
            "id": order_index + 1,
            "product_id": int(rng.integers(1, num_products + 1)),
            "quantity": int(rng.integers(1, 30)),
            "x": np.round(rng.uniform(0, 100), 3),
            "y": np.round(rng.uniform(0, 100), 3),
            # Orders were placed up to 2 hours before the donation
            "timestamp": donation_ts - int(rng.integers(0, 7200)),
        })

    pd.DataFrame([donation], columns=COLUMNS).to_csv(donation_file, sep=" ", header=False, index=False)

    df = pd.DataFrame(data, columns=COLUMNS)
    df.to_csv(orders_file, sep=" ", header=False, index=False)
    print(f"Generated donation into '{donation_file}' and {num_orders} orders into '{orders_file}'")
    print(f"Line format: {DATA_LINE_FORMAT}")

    print("\nOrders per product:")
    counts = df["product_id"].value_counts().sort_index()
    for product_id, count in counts.items():
        print(f"  product {product_id}: {count} orders")


if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--orders", type=int, default=200, help="number of orders")
    p.add_argument("--products", type=int, default=3, help="number of distinct products")
    p.add_argument("--donation-file", default="donation.txt")
    p.add_argument("--orders-file", default="orders.txt")
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    generate_mock_data(args.orders, args.products, args.donation_file, args.orders_file, args.seed)
