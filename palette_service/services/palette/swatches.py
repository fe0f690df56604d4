"""
Palette Strip Rendering

Draws the ordered palette as a categorical bar strip: one equal-height chip
per color in palette order. Also builds the bar-chart payload a front-end
charting library consumes.
"""

import base64
from typing import Any, Dict, List, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from .conversion import hex_to_rgb
from .models import ColorSpace, PaletteResult


def hex_to_bgr(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to BGR tuple for OpenCV."""
    r, g, b = hex_to_rgb(hex_color)
    return (b, g, r)  # BGR for OpenCV


def render_palette_strip(colors: Sequence[str],
                         weights: Sequence[float] = None,
                         chip_width: int = 40,
                         height: int = 80,
                         separator_width: int = 0) -> str:
    """
    Render the palette as a horizontal strip of bars.

    Args:
        colors: Ordered hex colors
        weights: Bar heights relative to the tallest (defaults to uniform)
        chip_width: Width of each bar in pixels
        height: Strip height in pixels
        separator_width: White gap between bars in pixels

    Returns:
        Base64-encoded PNG image string
    """
    if not colors:
        raise ValueError("Empty colors list provided")
    if chip_width <= 0 or height <= 0:
        raise ValueError("chip_width and height must be positive")
    if weights is None:
        weights = [1] * len(colors)
    if len(weights) != len(colors):
        raise ValueError("colors and weights must have same length")

    n = len(colors)
    top = max(float(w) for w in weights) or 1.0
    img_width = n * chip_width + (n - 1) * separator_width
    img = np.full((height, img_width, 3), 255, dtype=np.uint8)

    logger.debug(f"Rendering palette strip with {n} colors, chip_width={chip_width}")

    for i, (hex_color, weight) in enumerate(zip(colors, weights)):
        x_start = i * (chip_width + separator_width)
        bar_height = int(round(height * max(float(weight), 0.0) / top))
        if bar_height == 0:
            continue
        cv2.rectangle(
            img,
            (x_start, height - bar_height),
            (x_start + chip_width - 1, height - 1),
            hex_to_bgr(hex_color),
            thickness=-1
        )

    success, buffer = cv2.imencode('.png', img)
    if not success:
        raise RuntimeError("Failed to encode palette strip as PNG")

    b64_string = base64.b64encode(buffer.tobytes()).decode('ascii')
    logger.debug(f"Encoded palette strip: {img_width}×{height} -> {len(b64_string)} chars")
    return b64_string


def build_figure_payload(result: PaletteResult, height: int = 400) -> Dict[str, Any]:
    """Bar-chart payload: x = position, y = weight, bar colors = palette."""
    space_name = "LCH" if result.color_space == ColorSpace.LCH else "HSL"
    colors: List[str] = list(result.colors)
    return {
        "data": [{
            "type": "bar",
            "x": list(range(len(colors))),
            "y": list(result.weights),
            "marker": {"color": colors},
            "hovertext": colors,
            "hoverinfo": "text"
        }],
        "layout": {
            "title": f"Color Palette (Sorted by {space_name} Color Space)",
            "xaxis": {"title": "Color Index"},
            "yaxis": {"title": ""},
            "showlegend": False,
            "height": height
        }
    }
