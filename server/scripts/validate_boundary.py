#!/usr/bin/env python3
"""
Validate a site boundary JSON file before sending it to the planning service.

Accepts either a bare ring ([[x, y], ...]), a GeoJSON Polygon geometry, or
a request body with a "boundary" key.
"""
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
from internal.siteplan.config import load_config
from internal.siteplan.geometry import InvalidBoundary, detect_boundary_shape, polygon_area, validate_boundary
from internal.siteplan.voronoi import target_parcel_count


def extract_ring(data):
    """Pull the outer ring out of the supported layouts."""
    if isinstance(data, dict):
        if "boundary" in data:
            return data["boundary"]
        if data.get("type") == "Polygon":
            return data.get("coordinates", [[]])[0]
        return None
    return data


def validate_boundary_file(path):
    """Validate one boundary file"""
    print(f"Validating {path}...")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"✗ Invalid JSON: {e}")
        return False
    except FileNotFoundError:
        print(f"✗ File not found: {path}")
        return False

    ring = extract_ring(data)
    if not isinstance(ring, list):
        print("✗ No boundary ring found")
        return False

    try:
        polygon = validate_boundary(ring)
    except InvalidBoundary as e:
        print(f"✗ Invalid boundary: {e}")
        return False

    area = polygon_area(polygon)
    print(f"✓ {len(polygon)} vertices, {detect_boundary_shape(polygon)} shape")
    print(f"✓ Area: {area:.2f} m²")

    cfg = load_config()
    expected = target_parcel_count(area, cfg.parcel_area_range)
    print(f"✓ Expect about {expected} sub-parcels for {cfg.min_parcel_area:.0f}-{cfg.max_parcel_area:.0f} m²")

    if isinstance(data, dict) and "entry_point" in data:
        entry = data["entry_point"]
        if not isinstance(entry, list) or len(entry) < 2:
            print(f"✗ Invalid entry point: {entry}")
            return False
        print(f"✓ Entry point: {entry[:2]}")

    return True


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print("Usage: validate_boundary.py <boundary.json> [...]")
        sys.exit(2)

    success = True
    for arg in sys.argv[1:]:
        success &= validate_boundary_file(Path(arg))

    if success:
        print("\n✓ All validations passed!")
        sys.exit(0)
    else:
        print("\n✗ Some validations failed")
        sys.exit(1)
