"""
Palette API Orchestrator

Coordinates one palette request: readiness check, pipeline run, optional
artifacts, metrics and structured logging. Pipeline errors propagate to the
router unchanged so it can map each kind to an HTTP status.
"""

import time
from typing import List, Optional

from palette_service.config import config
from palette_service.schemas import PaletteOptions, PaletteResponse
from palette_service.utils.ids import generate_request_id
from palette_service.utils.logging import get_logger
from palette_service.utils.metrics import get_metrics

from .errors import PaletteError
from .runtime import PaletteRuntime, get_runtime
from .swatches import build_figure_payload, render_palette_strip

logger = get_logger(__name__)


def handle_build(hexcodes: List[str],
                 options: PaletteOptions,
                 runtime: Optional[PaletteRuntime] = None) -> PaletteResponse:
    """
    Build a palette for one request.

    Args:
        hexcodes: Colors to cluster
        options: Cluster count, color space, sort order and artifact flags
        runtime: Runtime to run on (defaults to the global one)

    Returns:
        PaletteResponse

    Raises:
        PaletteError: any typed pipeline failure
    """
    runtime = runtime or get_runtime()
    metrics = get_metrics()
    request_id = generate_request_id("pal")
    start_time = time.time()

    metrics.increment_request_count()
    metrics.increment_color_space_count(options.color_space)

    logger.info(
        f"Starting palette build: {len(hexcodes)} colors, k={options.cluster_count}",
        extra={"request_id": request_id, "color_space": options.color_space}
    )

    try:
        result = runtime.build(
            hexcodes,
            options.cluster_count,
            color_space=options.color_space,
            sort_order=options.sort_order
        )
    except PaletteError as e:
        metrics.increment_failure_count(e.kind)
        logger.warning(f"Palette build failed: {e.message}", extra={"request_id": request_id, "kind": e.kind})
        raise

    metrics.record_cluster_count(options.cluster_count)
    for stage, ms in result.timings_ms.items():
        metrics.record_timing(stage, ms)
    if not result.converged:
        metrics.increment_nonconverged_count()

    swatch_b64 = None
    if options.include_swatch:
        try:
            swatch_b64 = render_palette_strip(
                result.colors,
                result.weights,
                chip_width=config.SWATCH_CHIP_WIDTH,
                height=config.SWATCH_HEIGHT
            )
        except (ValueError, RuntimeError) as e:
            logger.warning(f"Swatch generation failed: {str(e)}", extra={"request_id": request_id})

    figure = build_figure_payload(result) if options.include_figure else None

    processing_ms = (time.time() - start_time) * 1000
    metrics.record_timing("palette_total", processing_ms)

    logger.info(
        f"Palette build complete: {len(result.colors)} colors",
        extra={"request_id": request_id, "ms_total": processing_ms, "n_iter": result.n_iter}
    )

    return PaletteResponse(
        request_id=request_id,
        colors=list(result.colors),
        weights=list(result.weights),
        labels=list(result.labels),
        cluster_sizes=list(result.cluster_sizes),
        color_space=result.color_space.value,
        sort_order=result.sort_order.value,
        seed=result.seed,
        n_iter=result.n_iter,
        converged=result.converged,
        processing_ms=processing_ms,
        swatch_png_b64=swatch_b64,
        figure=figure
    )
