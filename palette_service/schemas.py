"""
Palette Service API Schemas
Pydantic models for palette request/response validation.
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from palette_service.config import config


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palette-service", description="Service name")
    ready: bool = Field(..., description="Whether the numeric runtime has finished initializing")


class ErrorDetail(BaseModel):
    """Typed pipeline error."""
    kind: str = Field(..., description="InvalidInput, InvalidClusterCount, NotReady or ComputationFailure")
    message: str = Field(..., description="Human-readable error message")
    invalid_values: Optional[List[str]] = Field(None, description="Every malformed hex code (InvalidInput)")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: ErrorDetail


class PaletteOptions(BaseModel):
    """Clustering and presentation options shared by palette requests."""
    cluster_count: int = Field(
        ...,
        description="Number of k-means clusters (1-20, and at most the number of colors)"
    )
    color_space: Literal["lch", "hsl"] = Field(
        default_factory=lambda: config.DEFAULT_COLOR_SPACE,
        description="Perceptual space used for clustering and sorting"
    )
    sort_order: Literal["hue_first", "lightness_first"] = Field(
        default_factory=lambda: config.DEFAULT_SORT_ORDER,
        description="Intra-cluster key: (hue, chroma, lightness) or (lightness, chroma, hue)"
    )
    include_swatch: bool = Field(False, description="Include a PNG palette strip in the response")
    include_figure: bool = Field(False, description="Include a bar-chart payload in the response")


class PaletteRequest(PaletteOptions):
    """Palette request with an explicit list of hex codes."""
    hexcodes: List[str] = Field(
        ...,
        description="Colors as #RRGGBB strings (case-insensitive)"
    )


class PaletteTextRequest(PaletteOptions):
    """Palette request with hex codes as a newline-separated text block."""
    text: str = Field(..., description="One #RRGGBB code per line; blank lines are ignored")


class PaletteResponse(BaseModel):
    """Ordered palette with display weights and clustering diagnostics."""
    request_id: str = Field(..., description="Request identifier for tracing")
    colors: List[str] = Field(..., description="Input colors grouped by cluster and perceptually sorted")
    weights: List[float] = Field(..., description="Display weight per color (uniform bar height)")
    labels: List[int] = Field(..., description="Cluster label of each output color")
    cluster_sizes: List[int] = Field(..., description="Member count per cluster label; zero for unused labels")
    color_space: str = Field(..., description="Perceptual space used")
    sort_order: str = Field(..., description="Intra-cluster key used")
    seed: int = Field(..., description="k-means initialization seed")
    n_iter: int = Field(..., ge=0, description="Lloyd iterations run")
    converged: bool = Field(..., description="False when the iteration bound was reached")
    processing_ms: float = Field(..., ge=0.0, description="Total processing time in milliseconds")
    swatch_png_b64: Optional[str] = Field(None, description="Base64-encoded PNG palette strip")
    figure: Optional[Dict[str, Any]] = Field(None, description="Bar-chart payload (data + layout)")
