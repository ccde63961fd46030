#!/usr/bin/env python3
"""Seed the database with dummy plants and moisture history for development."""

import argparse
import asyncio
import random
from datetime import UTC, datetime, timedelta

from plantwatch.lib.db import close_db, get_db, init_db
from plantwatch.lib.mock import random_walk

# (id, name, perfect light, perfect temperature, perfect humidity)
SPECIES = [
    ("monstera", "Monstera deliciosa", 500.0, 22.0, 60.0),
    ("cactus", "Echinopsis", 1500.0, 26.0, 30.0),
    ("fern", "Nephrolepis exaltata", 300.0, 20.0, 70.0),
]

# (client id, room names)
TENANTS = [
    ("alice", ["Kitchen", "Living room"]),
    ("bob", ["Office"]),
]


def generate_plants() -> list[tuple[str, str, str, str]]:
    """Generate (nickname, species id, room name, client id) rows."""
    rows = []
    for client_id, rooms in TENANTS:
        for room in rooms:
            for i in range(random.randint(1, 3)):
                species_id = random.choice(SPECIES)[0]
                rows.append((f"{species_id}-{room[:3].lower()}-{i + 1}", species_id, room, client_id))
    return rows


def generate_moisture_data(
    plant_ids: list[int], num_records: int, interval: timedelta
) -> list[tuple[int, float, str]]:
    """Generate realistic moisture readings using random walk."""
    now = datetime.now(UTC)
    data: list[tuple[int, float, str]] = []

    moisture = {plant_id: random.uniform(20.0, 90.0) for plant_id in plant_ids}

    for i in range(num_records):
        recording_time = now - (interval * (num_records - 1 - i))
        for plant_id in plant_ids:
            moisture[plant_id] = random_walk(
                moisture[plant_id], drift=0.5, min_val=5.0, max_val=95.0
            )
            data.append(
                (plant_id, round(moisture[plant_id], 1), recording_time.isoformat())
            )

    return data


async def seed_data(hours: int = 6, clear: bool = False) -> None:
    """Insert dummy plants and moisture data for the past N hours."""
    await init_db()

    interval = timedelta(minutes=2)
    num_records = (hours * 60) // 2

    async with get_db() as db, db.transaction():
        if clear:
            print("Clearing existing data...")
            for table in ("plant_time_series", "plant", "room", "species"):
                await db.execute(f"DELETE FROM {table}")

        print("Inserting species, rooms and plants...")
        await db.executemany(
            "INSERT OR REPLACE INTO species "
            "(id, name, perfect_light, perfect_temperature, perfect_humidity) "
            "VALUES (?, ?, ?, ?, ?)",
            SPECIES,
        )
        await db.executemany(
            "INSERT OR IGNORE INTO room (name, client_id) VALUES (?, ?)",
            [(room, client_id) for client_id, rooms in TENANTS for room in rooms],
        )
        await db.executemany(
            "INSERT INTO plant (nickname, species_id, room_name, client_id) "
            "VALUES (?, ?, ?, ?)",
            generate_plants(),
        )

    async with get_db() as db:
        rows = await db.fetchall("SELECT id FROM plant")
    plant_ids = [row["id"] for row in rows]

    print(f"Generating {num_records * len(plant_ids)} moisture readings...")
    moisture_data = generate_moisture_data(plant_ids, num_records, interval)

    async with get_db() as db, db.transaction():
        await db.executemany(
            "INSERT INTO plant_time_series (plant_id, moisture, recording_time) "
            "VALUES (?, ?, ?)",
            moisture_data,
        )

    await close_db()
    print("Done!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Seed database with dummy data"
    )
    parser.add_argument(
        "-hours",
        type=int,
        default=6,
        help="Hours of moisture history to generate (default: 6)",
    )
    parser.add_argument(
        "-clear",
        action="store_true",
        help="Clear existing data before seeding",
    )
    args = parser.parse_args()

    asyncio.run(seed_data(hours=args.hours, clear=args.clear))
