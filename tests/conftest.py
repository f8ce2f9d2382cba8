"""
Pytest configuration and fixtures for price-index-mcp tests.
"""

from pathlib import Path
from typing import Callable, List, Sequence

import pytest

from price_index_mcp.models.record import FlatRecord

RecordFactory = Callable[..., FlatRecord]


@pytest.fixture(scope="session")
def demo_csv_path() -> Path:
    """Path to the demo index table for testing."""
    path = Path(__file__).parent / "fixtures" / "demo_index.csv"
    if not path.exists():
        pytest.skip(f"Demo index table not found at {path}.")
    return path


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for flat records with readable defaults."""

    def factory(
        code: str,
        weight: float = 0.0,
        values: Sequence[float] = (0.0, 0.0, 0.0, 0.0, 0.0),
        name: str = "",
    ) -> FlatRecord:
        return FlatRecord(
            code=code,
            name=name or f"Category {code}",
            weight=weight,
            index_values=tuple(float(v) for v in values),
        )

    return factory


@pytest.fixture
def food_records(make_record: RecordFactory) -> List[FlatRecord]:
    """Two-level food branch plus a standalone services leaf."""
    return [
        make_record("01", 30, (90, 120, 125, 130, 135), "Alimentation"),
        make_record("01.1", 10, (100, 110, 115, 118, 120), "__ Pain"),
        make_record("01.2", 20, (100, 140, 145, 148, 150), "__ Viande"),
        make_record("02", 70, (100, 100, 100, 100, 110), "Services"),
    ]
