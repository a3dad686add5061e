"""
Site Planning Service
Main entry point for the Python site planning service.
"""

import logging
import os
import sys
from pathlib import Path

# Add server directory to path for imports
server_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(server_dir))

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import uvicorn

from internal.siteplan import config
from internal.siteplan import generation
from internal.siteplan import seeds
from internal.siteplan.geometry import InvalidBoundary
from internal.siteplan.seeds import SeedingFailed

SERVICE_NAME = "site-planning-service"
SERVICE_VERSION = "0.1.0"
MAX_SEED_LISTING = 10000  # Largest parcel_count accepted by the seed endpoint

# Load configuration
cfg = config.load_config()

logging.basicConfig(
    level=getattr(logging, cfg.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Planning Service",
    description="Service for subdividing sites into parcels, laying out access roads and placing buildings",
    version=SERVICE_VERSION,
)

# CORS middleware (allow the CAD host to call this service)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to the host's URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    service: str
    version: str


class GeneratePlanRequest(BaseModel):
    """Request to plan a site"""

    boundary: List[List[float]] = Field(
        ..., description="Boundary ring as [[x, y], ...], open or closed"
    )
    entry_point: List[float] = Field(
        ..., min_length=2, max_length=3, description="Site entry point [x, y]"
    )
    strategy: Optional[str] = Field(
        default=None, description="Subdivision strategy: grid or voronoi"
    )
    seed: Optional[int] = Field(
        default=None, ge=0, description="Run seed (uses default if not provided)"
    )


class BoundaryInfo(BaseModel):
    """Boundary summary"""

    shape: str
    area: float
    vertex_count: int


class PlanMetadata(BaseModel):
    """Plan metadata"""

    seed: int
    strategy: str
    algorithm_version: int
    parcel_area_range: List[float]
    road_width: float
    clearance: float
    site_centroid: Optional[List[float]] = None
    parcel_count: int
    road_count: int
    building_count: int


class GeneratePlanResponse(BaseModel):
    """Response from site planning"""

    success: bool
    boundary: BoundaryInfo
    entry_point: List[float]
    parcels: List[Dict[str, Any]] = []
    roads: List[Dict[str, Any]] = []
    buildings: List[Dict[str, Any]] = []
    skipped_parcels: List[str] = []
    metadata: PlanMetadata
    message: Optional[str] = None


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
    )


@app.post("/api/v1/plans", response_model=GeneratePlanResponse)
def generate_plan(request: GeneratePlanRequest):
    """Subdivide the boundary, lay out roads and place buildings."""
    seed = request.seed if request.seed is not None else cfg.plan_seed

    try:
        plan = generation.generate_site_plan(
            request.boundary,
            request.entry_point,
            strategy=request.strategy,
            seed=seed,
            cfg=cfg,
        )
    except (InvalidBoundary, SeedingFailed, ValueError) as e:
        logger.info("Rejected plan request: %s", e)
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Plan generation failed")
        raise HTTPException(
            status_code=500, detail=f"Failed to generate plan: {str(e)}"
        )

    return GeneratePlanResponse(
        success=True,
        boundary=BoundaryInfo(**plan["boundary"]),
        entry_point=plan["entry_point"],
        parcels=plan["parcels"],
        roads=plan["roads"],
        buildings=plan["buildings"],
        skipped_parcels=plan["skipped_parcels"],
        metadata=PlanMetadata(**plan["metadata"]),
        message=f"Planned {len(plan['parcels'])} parcels",
    )


@app.get("/api/v1/plans/seed/{run_seed}")
async def get_plan_seeds(
    run_seed: int, parcel_count: int = Query(0, ge=0, le=MAX_SEED_LISTING)
):
    """Get the derived seeds for a run (useful for debugging)"""
    return {
        "run_seed": run_seed,
        "subdivision_seed": seeds.get_subdivision_seed(run_seed),
        "parcel_seeds": [seeds.get_parcel_seed(run_seed, i) for i in range(parcel_count)],
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app", host=cfg.host, port=cfg.port, reload=cfg.environment == "development"
    )
