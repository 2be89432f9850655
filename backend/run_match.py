#!/usr/bin/env python3
"""
Run one query through the matching engine against an inventory snapshot.

Usage:
    python run_match.py --inventory data/inventory.csv --query "onix 2019"
    python run_match.py --inventory data/inventory.json --query "civic 19/20" --max-price 120000
"""

import argparse
import csv
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from carmatch.schemas.vehicle import VehicleRecord
from carmatch.services.matching_engine import VehicleMatchingEngine
from carmatch.services.result_serializer import serialize_exact_result, serialize_fallback_result

_TRUE_VALUES = {"1", "true", "yes", "sim", "y"}


def _row_to_vehicle(row: dict) -> VehicleRecord:
    available = (row.get("available") or "true").strip().lower() in _TRUE_VALUES
    return VehicleRecord(
        id=row["id"].strip(),
        brand=row["brand"].strip(),
        model=row["model"].strip(),
        version=(row.get("version") or "").strip() or None,
        year=int(row["year"]),
        mileage=int(row.get("mileage") or 0),
        price=float(row.get("price") or 0),
        color=(row.get("color") or "").strip() or None,
        body_type=(row.get("body_type") or "").strip(),
        fuel=(row.get("fuel") or "").strip(),
        transmission=(row.get("transmission") or "").strip(),
        available=available,
    )


def load_inventory(filepath: str) -> list[VehicleRecord]:
    """Load a snapshot from CSV (header row) or JSON (list, or {"vehicles": [...]})."""
    path = Path(filepath)
    if path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("vehicles", [])
        return [VehicleRecord.model_validate(item) for item in data]

    with open(path, newline="", encoding="utf-8") as f:
        return [_row_to_vehicle(row) for row in csv.DictReader(f)]


def run(inventory_file: str, query: str, max_price: float | None, min_year: int | None) -> int:
    path = Path(inventory_file)
    if not path.exists():
        print(f"Error: file not found: {path}")
        return 1

    inventory = load_inventory(inventory_file)
    outcome = VehicleMatchingEngine().search(query, inventory, max_price=max_price, min_year=min_year)

    if outcome.trade_in:
        print("Trade-in context detected; no search performed.")
    if outcome.model_correction:
        print(f"Model corrected to: {outcome.model_correction}")
    print(serialize_exact_result(outcome.exact))
    if outcome.fallback:
        print(serialize_fallback_result(outcome.fallback))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Match a free-text vehicle query against an inventory snapshot")
    parser.add_argument("--inventory", required=True, help="Path to CSV or JSON inventory snapshot")
    parser.add_argument("--query", required=True, help='Free-text request, e.g. "onix 2019"')
    parser.add_argument("--max-price", type=float, default=None, help="Budget ceiling")
    parser.add_argument("--min-year", type=int, default=None, help="Oldest acceptable year")
    args = parser.parse_args(argv)
    return run(args.inventory, args.query, args.max_price, args.min_year)


if __name__ == "__main__":
    sys.exit(main())
