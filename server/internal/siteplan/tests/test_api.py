"""
Tests for site planning API endpoints.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

import pytest
from fastapi.testclient import TestClient
from internal.siteplan.main import MAX_SEED_LISTING, app

client = TestClient(app)

SQUARE_SITE = [[0.0, 0.0], [300.0, 0.0], [300.0, 300.0], [0.0, 300.0], [0.0, 0.0]]


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "site-planning-service"
    assert data["version"] == "0.1.0"


def test_generate_plan():
    """Test plan generation endpoint"""
    request_data = {
        "boundary": SQUARE_SITE,
        "entry_point": [0.0, 150.0],
        "strategy": "grid",
        "seed": 12345,
    }

    response = client.post("/api/v1/plans", json=request_data)
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["boundary"]["shape"] == "rectangular"
    assert data["boundary"]["area"] == pytest.approx(90000.0)
    assert len(data["parcels"]) == 9
    assert data["metadata"]["seed"] == 12345
    assert data["metadata"]["parcel_count"] == 9
    assert data["metadata"]["road_count"] == len(data["roads"])
    assert data["metadata"]["building_count"] == len(data["buildings"])


def test_generate_plan_deterministic():
    """Test the same request returns the same plan"""
    request_data = {"boundary": SQUARE_SITE, "entry_point": [0.0, 0.0], "strategy": "voronoi", "seed": 3}

    response1 = client.post("/api/v1/plans", json=request_data)
    response2 = client.post("/api/v1/plans", json=request_data)
    assert response1.status_code == 200
    assert response1.json() == response2.json()


def test_generate_plan_invalid_boundary():
    """Test a degenerate boundary is rejected"""
    request_data = {"boundary": [[0.0, 0.0], [10.0, 0.0]], "entry_point": [0.0, 0.0]}

    response = client.post("/api/v1/plans", json=request_data)
    assert response.status_code == 422
    assert "at least 3" in response.json()["detail"]


def test_generate_plan_non_finite_boundary():
    """Test Infinity and NaN in the request body are rejected, not a server error"""
    body = '{"boundary": [[0, 0], [Infinity, 0], [Infinity, 10], [0, 10]], "entry_point": [0, 0]}'
    response = client.post(
        "/api/v1/plans", content=body, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 422
    assert "non-finite" in response.json()["detail"]

    body = '{"boundary": [[0, 0], [10, 0], [10, 10], [0, 10]], "entry_point": [NaN, 0]}'
    response = client.post(
        "/api/v1/plans", content=body, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 422
    assert "non-finite" in response.json()["detail"]


def test_generate_plan_unknown_strategy():
    """Test an unknown strategy is rejected"""
    request_data = {"boundary": SQUARE_SITE, "entry_point": [0.0, 0.0], "strategy": "hexagonal"}

    response = client.post("/api/v1/plans", json=request_data)
    assert response.status_code == 422


def test_generate_plan_invalid_request():
    """Test request validation"""
    # Missing entry point
    response = client.post("/api/v1/plans", json={"boundary": SQUARE_SITE})
    assert response.status_code == 422

    # Negative seed
    request_data = {"boundary": SQUARE_SITE, "entry_point": [0.0, 0.0], "seed": -1}
    response = client.post("/api/v1/plans", json=request_data)
    assert response.status_code == 422


def test_get_plan_seeds():
    """Test derived seed endpoint"""
    response = client.get("/api/v1/plans/seed/12345?parcel_count=3")
    assert response.status_code == 200

    data = response.json()
    assert data["run_seed"] == 12345
    assert isinstance(data["subdivision_seed"], int)
    assert len(data["parcel_seeds"]) == 3
    assert len(set(data["parcel_seeds"])) == 3


def test_get_plan_seeds_bounded_count():
    """Test the seed listing rejects negative and oversized parcel counts"""
    response = client.get("/api/v1/plans/seed/12345?parcel_count=-1")
    assert response.status_code == 422

    response = client.get(f"/api/v1/plans/seed/12345?parcel_count={MAX_SEED_LISTING + 1}")
    assert response.status_code == 422

    response = client.get(f"/api/v1/plans/seed/12345?parcel_count={MAX_SEED_LISTING}")
    assert response.status_code == 200
    assert len(response.json()["parcel_seeds"]) == MAX_SEED_LISTING
