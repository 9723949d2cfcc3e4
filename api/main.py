# api/main.py
"""
FastAPI backend for FormCraft - exposes the form_kit generators as a REST API.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from typing import List, Optional
import sys
from pathlib import Path
import io

# Add project root to path to import form_kit
sys.path.insert(0, str(Path(__file__).parent.parent))

from form_kit.config import CONFIG
from form_kit.generative import (
    generate_spiral, SpiralParams,
    generate_stacked_rectangles, StackedParams,
    generate_loft_profiles, LoftParams, BulgeParams,
)
from form_kit.generative.spiral import spiral_sample_count
from form_kit.io import segments_to_frame
from form_kit.kernel.errors import InvalidParameter
from form_kit.kernel.units import to_internal_length, from_internal_length
from form_kit.model import Segment


app = FastAPI(
    title="FormCraft API",
    description="Parametric curve and loft profile generators",
    version="0.1.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class SpiralRequest(BaseModel):
    """Input parameters for a spiral."""
    max_radius_m: float = Field(24.0, ge=CONFIG.spiral_radius_range_m[0], le=CONFIG.spiral_radius_range_m[1], description="Max radius (m)")
    turn_count: int = Field(10, ge=CONFIG.spiral_turns_range[0], le=CONFIG.spiral_turns_range[1], description="Number of turns")
    angle_resolution_degrees: float = Field(20.0, ge=CONFIG.angle_resolution_range[0], le=CONFIG.angle_resolution_range[1], description="Angle step (deg)")
    elevation_m: float = Field(0.0, description="Level elevation (m)")
    offset_x_m: float = Field(0.0, description="Centre X (m)")
    offset_y_m: float = Field(0.0, description="Centre Y (m)")


class StackedRequest(BaseModel):
    """Input parameters for stacked floor plates."""
    elevations_m: List[float] = Field(..., min_length=1, description="Level elevations, ascending (m)")
    width_m: float = Field(10.0, gt=0, description="Plate width (m)")
    depth_m: float = Field(20.0, gt=0, description="Plate depth (m)")
    rotation_increment_degrees: float = Field(5.0, description="Rotation per level (deg)")


class LoftRequest(BaseModel):
    """Input parameters for a loft profile stack."""
    base_elevation_m: float = Field(0.0, description="Base elevation (m)")
    top_elevation_m: float = Field(120.0, description="Top elevation (m)")
    segments: int = Field(82, ge=CONFIG.loft_segments_range[0], le=CONFIG.loft_segments_range[1], description="Height segments")
    base_side_m: float = Field(10.0, gt=0, description="Base side (m)")
    top_side_m: float = Field(10.0, gt=0, description="Top side (m)")
    rotation_degrees: float = Field(360.0, description="Total rotation (deg)")
    clockwise: bool = Field(True, description="Rotation direction")
    twist_degrees: float = Field(0.0, description="Additional twist (deg)")
    segments_per_side: int = Field(2, ge=1, le=32, description="Segments per side")
    bulge_factor: float = Field(0.0, description="Bulge (+) / squeeze (-)")
    bulge_center_height_ratio: float = Field(0.5, ge=0.0, le=1.0, description="Bulge centre (0-1)")
    bulge_radius_ratio: float = Field(0.3, gt=0.0, le=0.5, description="Bulge radius (0-0.5)")
    center_x_m: float = Field(0.0, description="Centre X (m)")
    center_y_m: float = Field(0.0, description="Centre Y (m)")


class PointData(BaseModel):
    """Point in meters."""
    x: float
    y: float
    z: float


class SegmentData(BaseModel):
    """Segment endpoints and length in meters."""
    start: PointData
    end: PointData
    length: float


class RingData(BaseModel):
    """One closed outline."""
    elevation: float
    closed: bool
    segments: List[SegmentData]
    height_ratio: Optional[float] = None
    bulge_effect: Optional[float] = None


class GeometryResult(BaseModel):
    """Generated geometry."""
    success: bool
    error: Optional[str] = None
    samples: Optional[int] = None
    segments: Optional[List[SegmentData]] = None
    rings: Optional[List[RingData]] = None


# =============================================================================
# Conversion helpers
# =============================================================================

def _m(value: float) -> float:
    return round(from_internal_length(value, "m"), 6)


def _segment_data(seg: Segment) -> SegmentData:
    return SegmentData(
        start=PointData(x=_m(seg.start.x), y=_m(seg.start.y), z=_m(seg.start.z)),
        end=PointData(x=_m(seg.end.x), y=_m(seg.end.y), z=_m(seg.end.z)),
        length=_m(seg.length),
    )


def _spiral_params(req: SpiralRequest) -> SpiralParams:
    return SpiralParams(
        max_radius=to_internal_length(req.max_radius_m, "m"),
        turn_count=req.turn_count,
        angle_resolution_degrees=req.angle_resolution_degrees,
        elevation=to_internal_length(req.elevation_m, "m"),
        offset_x=to_internal_length(req.offset_x_m, "m"),
        offset_y=to_internal_length(req.offset_y_m, "m"),
    )


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "FormCraft API"}


@app.post("/api/spiral", response_model=GeometryResult)
async def spiral(req: SpiralRequest):
    """Generate an Archimedean spiral."""
    try:
        params = _spiral_params(req)
        segments = generate_spiral(params)
        samples = spiral_sample_count(params)
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GeometryResult(
        success=True,
        samples=samples,
        segments=[_segment_data(s) for s in segments],
    )


@app.post("/api/stacked", response_model=GeometryResult)
async def stacked(req: StackedRequest):
    """Generate rotated floor plates, one per elevation."""
    try:
        plates = generate_stacked_rectangles(StackedParams(
            elevations=[to_internal_length(z, "m") for z in req.elevations_m],
            width=to_internal_length(req.width_m, "m"),
            depth=to_internal_length(req.depth_m, "m"),
            rotation_increment_degrees=req.rotation_increment_degrees,
        ))
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    rings = [
        RingData(
            elevation=_m(elevation),
            closed=ring.is_closed,
            segments=[_segment_data(s) for s in ring],
        )
        for elevation, ring in plates
    ]
    return GeometryResult(success=True, rings=rings)


@app.post("/api/loft", response_model=GeometryResult)
async def loft(req: LoftRequest):
    """Generate a tapered, twisted, bulged profile stack."""
    try:
        stack = generate_loft_profiles(LoftParams(
            base_elevation=to_internal_length(req.base_elevation_m, "m"),
            top_elevation=to_internal_length(req.top_elevation_m, "m"),
            segments=req.segments,
            base_side=to_internal_length(req.base_side_m, "m"),
            top_side=to_internal_length(req.top_side_m, "m"),
            rotation_degrees=req.rotation_degrees,
            clockwise=req.clockwise,
            twist_degrees=req.twist_degrees,
            segments_per_side=req.segments_per_side,
            bulge=BulgeParams(
                factor=req.bulge_factor,
                center_height_ratio=req.bulge_center_height_ratio,
                radius_ratio=req.bulge_radius_ratio,
            ),
            center_x=to_internal_length(req.center_x_m, "m"),
            center_y=to_internal_length(req.center_y_m, "m"),
        ))
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))
    rings = [
        RingData(
            elevation=_m(ring.elevation),
            closed=ring.is_closed,
            segments=[_segment_data(s) for s in ring],
            height_ratio=round(t, 6),
            bulge_effect=round(effect, 6),
        )
        for ring, t, effect in zip(stack.rings, stack.height_ratios, stack.bulge_effects)
    ]
    return GeometryResult(success=True, rings=rings)


@app.post("/api/export/csv")
async def export_csv(req: SpiralRequest):
    """Export spiral segments as CSV (meters)."""
    try:
        segments = generate_spiral(_spiral_params(req))
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))

    output = io.StringIO()
    segments_to_frame(segments, "m").round(4).to_csv(output, index=False)
    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=spiral_segments.csv"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
