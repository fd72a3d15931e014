from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def silence_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def sample_records() -> list[dict]:
    """Aftershock rows as the CSV loader returns them (unsorted, two unusable)."""
    return [
        {"time": "10 Oct 2025 - 10:13 AM", "magnitude": 4.6, "location": "Manay"},
        {"time": "10 Oct 2025 - 9:43 AM", "magnitude": 7.4, "location": "Offshore"},
        {"time": "not a time", "magnitude": 3.0, "location": "?"},
        {"time": "10 Oct 2025 - 9:58 AM", "magnitude": 2.1, "location": "Tarragona"},
        {"time": "10 Oct 2025 - 9:50 AM", "magnitude": 3.3, "location": "Offshore"},
        {"time": None, "magnitude": 2.0, "location": "?"},
        {"time": "10 Oct 2025 - 9:50 AM", "magnitude": 1.8, "location": "Mati"},
    ]
