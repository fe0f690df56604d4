"""
Palette Service v1 API Routes
Implements /v1/palette endpoints.
"""
from fastapi import APIRouter, HTTPException

from palette_service.schemas import (
    ErrorResponse, PaletteRequest, PaletteResponse, PaletteTextRequest
)
from palette_service.services.palette.build_api import handle_build
from palette_service.services.palette.errors import (
    ComputationFailure, InvalidClusterCount, InvalidInput, NotReady, PaletteError
)
from palette_service.services.palette.validation import parse_hex_lines
from palette_service.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palette"])

ERROR_STATUS = {
    InvalidInput: 422,
    InvalidClusterCount: 422,
    NotReady: 503,
    ComputationFailure: 500,
}

ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Invalid hex codes or cluster count"},
    500: {"model": ErrorResponse, "description": "Numeric failure while clustering"},
    503: {"model": ErrorResponse, "description": "Runtime still initializing"},
}


def to_http_exception(error: PaletteError) -> HTTPException:
    """Map a typed pipeline error to an HTTPException."""
    status = ERROR_STATUS.get(type(error), 500)
    headers = {"Retry-After": "1"} if isinstance(error, NotReady) else None
    return HTTPException(status_code=status, detail=error.to_dict(), headers=headers)


@router.post("/palette",
             response_model=PaletteResponse,
             responses=ERROR_RESPONSES,
             summary="Build Clustered Palette",
             description="Group similar colors with k-means and order them into one palette strip")
def build_palette_endpoint(body: PaletteRequest) -> PaletteResponse:
    """
    Cluster a list of hex colors and return them as one ordered strip.

    - **hexcodes**: Colors as #RRGGBB
    - **cluster_count**: 1-20, at most the number of colors
    - **color_space**: lch (default) or hsl
    - **sort_order**: hue_first (default) or lightness_first
    """
    try:
        return handle_build(body.hexcodes, body)
    except PaletteError as e:
        raise to_http_exception(e)


@router.post("/palette/text",
             response_model=PaletteResponse,
             responses=ERROR_RESPONSES,
             summary="Build Clustered Palette From Text",
             description="Same as /v1/palette with hex codes given one per line")
def build_palette_from_text(body: PaletteTextRequest) -> PaletteResponse:
    """Parse a newline-separated block of hex codes, then build the palette."""
    try:
        return handle_build(parse_hex_lines(body.text), body)
    except PaletteError as e:
        raise to_http_exception(e)


@router.get("/palette/metrics")
def palette_metrics():
    """Get palette service metrics."""
    return get_metrics().get_summary()
