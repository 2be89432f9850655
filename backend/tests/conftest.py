"""
Shared fixtures for CarMatch backend tests.
"""
import pytest
import sys
import os

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from carmatch.schemas.vehicle import VehicleRecord


@pytest.fixture
def sample_inventory():
    """Small dealership snapshot across brands and body types."""
    rows = [
        ("1", "Chevrolet", "Onix", "1.0 LT", 2019, 42000, 72000, "Hatch"),
        ("2", "Chevrolet", "Onix", "1.0 Turbo Premier", 2021, 18000, 89000, "Hatch"),
        ("3", "Chevrolet", "Tracker", "1.0 Turbo", 2022, 25000, 118000, "SUV"),
        ("4", "Hyundai", "HB20", "1.0 Sense", 2020, 30000, 74000, "Hatch"),
        ("5", "Honda", "Civic", "2.0 EXL", 2019, 51000, 125000, "Sedã"),
        ("6", "Toyota", "Corolla", "2.0 XEi", 2020, 40000, 139000, "Sedan"),
        ("7", "Fiat", "Strada", "1.3 Freedom", 2021, 22000, 98000, "Picape cabine dupla"),
    ]
    return [
        VehicleRecord(
            id=vid,
            brand=brand,
            model=model,
            version=version,
            year=year,
            mileage=mileage,
            price=price,
            body_type=body,
            fuel="Flex",
            transmission="Manual",
        )
        for vid, brand, model, version, year, mileage, price, body in rows
    ]
