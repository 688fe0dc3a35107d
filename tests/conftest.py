"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from propforecast.models.assumptions import ProjectionAssumptions
from propforecast.models.property import default_property_record
from tests.fixtures.test_inputs import (
    get_construction_record,
    get_end_to_end_record,
    get_interest_only_record,
)


@pytest.fixture
def end_to_end_record():
    """$1M established purchase, single investor, no construction."""
    return get_end_to_end_record()


@pytest.fixture
def construction_record():
    """Build project funded by main loan plus IO equity loan, interest capitalised."""
    return get_construction_record()


@pytest.fixture
def interest_only_record():
    """End-to-end record with a 5-year IO main loan."""
    return get_interest_only_record()


@pytest.fixture
def default_record():
    """Standard example record."""
    return default_property_record()


@pytest.fixture
def assumptions():
    """Default projection assumptions."""
    return ProjectionAssumptions()
