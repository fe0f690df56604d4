"""Data model for the palette pipeline: color spaces, coordinates, results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class ColorSpace(str, Enum):
    """Perceptual space used for clustering and sorting."""
    LCH = "lch"  # CIE LCh(ab), D65
    HSL = "hsl"


class SortOrder(str, Enum):
    """Lexicographic key used to order colors inside a cluster."""
    HUE_FIRST = "hue_first"              # (hue, chroma|saturation, lightness)
    LIGHTNESS_FIRST = "lightness_first"  # (lightness, chroma|saturation, hue)


SORT_DIMENSIONS: Dict[SortOrder, Tuple[str, str, str]] = {
    SortOrder.HUE_FIRST: ("hue", "chroma", "lightness"),
    SortOrder.LIGHTNESS_FIRST: ("lightness", "chroma", "hue"),
}


@dataclass(frozen=True)
class PerceptualCoordinate:
    """A color in LCH or HSL.

    For HSL, ``chroma`` carries saturation in [0, 1]; lightness is in [0, 1].
    For LCH, lightness is in [0, 100] and chroma is unbounded above.
    Hue is always degrees in [0, 360).
    """
    space: ColorSpace
    lightness: float
    chroma: float
    hue: float

    @property
    def saturation(self) -> float:
        return self.chroma

    def as_tuple(self) -> Tuple[float, float, float]:
        """Native ordering: (L, C, H) for LCH, (H, S, L) for HSL."""
        if self.space == ColorSpace.LCH:
            return (self.lightness, self.chroma, self.hue)
        return (self.hue, self.chroma, self.lightness)


@dataclass(frozen=True)
class PaletteResult:
    """Ordered palette plus parallel display weights and clustering diagnostics."""
    colors: Tuple[str, ...]
    weights: Tuple[int, ...]
    labels: Tuple[int, ...]  # cluster label of each entry in `colors`
    cluster_sizes: Tuple[int, ...]  # one entry per label 0..k-1, zeros allowed
    color_space: ColorSpace
    sort_order: SortOrder
    seed: int
    n_iter: int = 0
    converged: bool = True
    timings_ms: Dict[str, float] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colors": list(self.colors),
            "weights": list(self.weights),
            "labels": list(self.labels),
            "cluster_sizes": list(self.cluster_sizes),
            "color_space": self.color_space.value,
            "sort_order": self.sort_order.value,
            "seed": self.seed,
            "n_iter": self.n_iter,
            "converged": self.converged
        }
