#!/usr/bin/env python3
"""Create the gratitudes table and optionally seed it with sample rows.

Usage:
    python scripts/init_db.py              # create tables at DATABASE_URL
    python scripts/init_db.py --seed 50    # ...and insert 50 random gratitudes
"""

import argparse
import os
import random
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal, engine, init_db  # noqa: E402
from logic.share import generate_short_code  # noqa: E402
from server import repository  # noqa: E402
from server.repository import StorageError  # noqa: E402

SAMPLE_MESSAGES = [
    "Grateful for the morning coffee",
    "Thank you to the bus driver who waited for me",
    "My neighbour fixed my bike",
    "Sunshine after a week of rain",
    "A stranger returned my wallet",
    "Dinner with old friends",
]


def seed(count: int, rng: random.Random) -> int:
    """Insert count random gratitudes.

    Args:
        count: Number of rows to insert.
        rng: Random source for messages and positions.

    Returns:
        Number of rows actually inserted.
    """
    inserted = 0
    with SessionLocal() as db:
        for _ in range(count):
            try:
                repository.create(
                    db,
                    message=rng.choice(SAMPLE_MESSAGES),
                    lat=rng.uniform(-60, 70),
                    lng=rng.uniform(-180, 180),
                    short_code=generate_short_code(),
                )
            except StorageError:
                continue
            inserted += 1
    return inserted


def main():
    parser = argparse.ArgumentParser(description="Initialise the ThankMap database")
    parser.add_argument("--seed", type=int, default=0, help="number of sample gratitudes to insert")
    parser.add_argument("--random-seed", type=int, default=None, help="seed for reproducible samples")
    args = parser.parse_args()

    init_db()
    print(f"Tables ready at {engine.url.render_as_string(hide_password=True)}")

    if args.seed > 0:
        inserted = seed(args.seed, random.Random(args.random_seed))
        print(f"Inserted {inserted} sample gratitudes")


if __name__ == "__main__":
    main()
