"""
Pytest fixtures for site planning tests.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

import pytest

from internal.siteplan.seeds import seeded_random


@pytest.fixture
def square_boundary():
    """10 × 10 square site"""
    return [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


@pytest.fixture
def large_square_boundary():
    """300 × 300 square site, about ten default-sized parcels"""
    return [(0.0, 0.0), (300.0, 0.0), (300.0, 300.0), (0.0, 300.0)]


@pytest.fixture
def l_shaped_boundary():
    """Non-convex L-shaped site, area 7500"""
    return [
        (0.0, 0.0),
        (100.0, 0.0),
        (100.0, 50.0),
        (50.0, 50.0),
        (50.0, 100.0),
        (0.0, 100.0),
    ]


@pytest.fixture
def u_shaped_boundary():
    """U-shaped site whose arms split the upper grid row, area 1400"""
    return [
        (0.0, 0.0),
        (30.0, 0.0),
        (30.0, 60.0),
        (20.0, 60.0),
        (20.0, 20.0),
        (10.0, 20.0),
        (10.0, 60.0),
        (0.0, 60.0),
    ]


@pytest.fixture
def rng():
    """Seeded random source"""
    return seeded_random(12345)
