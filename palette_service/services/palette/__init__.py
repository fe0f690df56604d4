"""
Palette Clustering Module

Groups perceptually similar hex colors with seeded k-means and orders them
into a single display strip: color conversion (LCH/HSL), standardization,
clustering, intra-cluster perceptual sorting and palette assembly.
"""

from .errors import ComputationFailure, InvalidClusterCount, InvalidInput, NotReady, PaletteError
from .models import ColorSpace, PaletteResult, PerceptualCoordinate, SortOrder
from .pipeline import build_palette

__version__ = "1.0.0"

__all__ = [
    "build_palette",
    "ColorSpace",
    "SortOrder",
    "PerceptualCoordinate",
    "PaletteResult",
    "PaletteError",
    "InvalidInput",
    "InvalidClusterCount",
    "NotReady",
    "ComputationFailure",
]
