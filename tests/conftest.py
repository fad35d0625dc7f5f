"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from proforma.models.lookups import PropertyType
from proforma.models.waterfall import default_waterfall_config
from proforma.calculations.deal import calculate_deal
from tests.fixtures.test_inputs import (
    get_retail_inputs,
    get_office_inputs,
)


@pytest.fixture
def retail_inputs():
    """Retail preset with the four-suite rent roll."""
    return get_retail_inputs()


@pytest.fixture
def office_inputs():
    """Office preset on 2.33 acres."""
    return get_office_inputs()


@pytest.fixture
def retail_result(retail_inputs):
    """Retail deal run with the standard waterfall."""
    return calculate_deal(retail_inputs, PropertyType.RETAIL, default_waterfall_config())


@pytest.fixture
def office_result(office_inputs):
    """Office deal run without a waterfall."""
    return calculate_deal(office_inputs, PropertyType.OFFICE)
