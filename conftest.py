from pathlib import Path

import pytest

from mars_flight.catalog import Catalog
from mars_flight.service import FlightService
from mars_flight.storage import Storage

PRESETS_DIR = Path(__file__).parent / "presets"


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    """Fresh session storage per test."""
    return Storage(tmp_path / "data")


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(PRESETS_DIR)


@pytest.fixture
def service(storage: Storage, catalog: Catalog) -> FlightService:
    return FlightService(storage, catalog)
