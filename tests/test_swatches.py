"""
Tests for palette strip rendering and the chart payload.
"""

import base64

import cv2
import numpy as np
import pytest

from palette_service.services.palette import build_palette
from palette_service.services.palette.swatches import build_figure_payload, hex_to_bgr, render_palette_strip


def decode_png(b64_str):
    buffer = np.frombuffer(base64.b64decode(b64_str), dtype=np.uint8)
    return cv2.imdecode(buffer, cv2.IMREAD_COLOR)


class TestRenderPaletteStrip:
    """Test PNG strip rendering"""

    def test_dimensions_and_chip_colors(self):
        colors = ["#FF0000", "#00FF00", "#0000FF"]
        img = decode_png(render_palette_strip(colors, chip_width=20, height=30))
        assert img.shape == (30, 60, 3)
        for i, hex_color in enumerate(colors):
            assert tuple(int(v) for v in img[15, i * 20 + 10]) == hex_to_bgr(hex_color)

    def test_weights_scale_bar_height(self):
        img = decode_png(render_palette_strip(["#000000", "#000000"], weights=[1, 0.5], chip_width=10, height=40))
        # Top of the half-height bar stays white
        assert tuple(int(v) for v in img[5, 15]) == (255, 255, 255)
        assert tuple(int(v) for v in img[5, 5]) == (0, 0, 0)

    def test_empty_colors_rejected(self):
        with pytest.raises(ValueError):
            render_palette_strip([])

    def test_mismatched_weights_rejected(self):
        with pytest.raises(ValueError):
            render_palette_strip(["#FF0000"], weights=[1, 1])


class TestFigurePayload:
    """Test bar-chart payload"""

    def test_fields(self):
        result = build_palette(["#FF0000", "#00FF00", "#0000FF"], 2, "hsl")
        figure = build_figure_payload(result)
        bar = figure["data"][0]
        assert bar["x"] == [0, 1, 2]
        assert bar["y"] == [1, 1, 1]
        assert bar["marker"]["color"] == list(result.colors)
        assert bar["hovertext"] == list(result.colors)
        assert figure["layout"]["title"] == "Color Palette (Sorted by HSL Color Space)"
        assert figure["layout"]["showlegend"] is False
        assert figure["layout"]["height"] == 400
