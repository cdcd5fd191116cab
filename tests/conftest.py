"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from app.main import app
from app.api.calculations import get_today

FIXED_TODAY = date(2025, 1, 15)


@pytest.fixture
def today():
    """Pinned calculation date."""
    return FIXED_TODAY


@pytest.fixture
def client():
    """Test client with the calculation date pinned."""
    app.dependency_overrides[get_today] = lambda: FIXED_TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()
