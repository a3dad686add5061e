"""
Configuration management for the site planning service.
"""

import os


class Config:
    """Configuration for site planning service"""

    def __init__(self):
        # Server configuration
        self.host = os.getenv("PLANNING_SERVICE_HOST", "0.0.0.0")
        self.port = int(os.getenv("PLANNING_SERVICE_PORT", "8082"))
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Subdivision configuration
        self.plan_seed = int(os.getenv("PLANNING_SEED", "12345"))
        self.min_parcel_area = float(os.getenv("MIN_PARCEL_AREA", "6458.0"))  # m²
        self.max_parcel_area = float(os.getenv("MAX_PARCEL_AREA", "10764.0"))  # m²
        self.subdivision_strategy = os.getenv("SUBDIVISION_STRATEGY", "voronoi")
        self.max_seed_attempts = int(os.getenv("MAX_SEED_ATTEMPTS", "1000"))

        # Road configuration
        self.road_width = float(os.getenv("ROAD_WIDTH", "6.0"))  # m
        self.edge_tolerance = float(os.getenv("EDGE_TOLERANCE", "1e-3"))

        # Building configuration
        self.building_height = float(os.getenv("BUILDING_HEIGHT", "10.0"))  # m
        self.min_road_building_distance = float(
            os.getenv("MIN_ROAD_BUILDING_DISTANCE", "2.0")
        )
        self.max_shift_attempts = int(os.getenv("MAX_SHIFT_ATTEMPTS", "10"))
        self.shift_step = float(os.getenv("SHIFT_STEP", "0.5"))
        self.building_area_min = int(os.getenv("BUILDING_AREA_MIN", "807"))
        self.building_area_max = int(os.getenv("BUILDING_AREA_MAX", "1615"))

        # Performance configuration
        self.max_parallel_placements = int(os.getenv("MAX_PARALLEL_PLACEMENTS", "1"))

    @property
    def parcel_area_range(self):
        return (self.min_parcel_area, self.max_parcel_area)

    @property
    def building_area_range(self):
        return (self.building_area_min, self.building_area_max)


def load_config() -> Config:
    """Load configuration from environment variables"""
    return Config()
