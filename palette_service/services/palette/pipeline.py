"""
Palette pipeline entry point.

hex strings -> perceptual coordinates -> normalized features -> cluster
labels -> per-cluster sorted colors -> concatenated palette.

The input is first put into a canonical order (upper-cased hex, then the
original string) and every stage runs on that order. The result therefore
depends only on the input multiset, the cluster count and the seed.
"""

import time
from typing import Sequence, Union

from palette_service.utils.logging import get_logger

from .assembly import DEFAULT_DISPLAY_WEIGHT, assemble_palette
from .clustering import DEFAULT_MAX_ITER, DEFAULT_SEED, partition
from .conversion import convert_rgb, hexcodes_to_rgb, to_coordinates
from .errors import InvalidInput
from .models import ColorSpace, PaletteResult, SortOrder
from .normalization import normalize_features
from .validation import MAX_CLUSTERS, validate_cluster_count, validate_hexcodes

logger = get_logger(__name__)


def _coerce_enum(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidInput([str(value)], f"Unknown {label} {value!r}; expected one of: {allowed}")


def canonical_order(hexcodes: Sequence[str]) -> list:
    """Indices of `hexcodes` sorted by (upper-cased hex, original string)."""
    return sorted(range(len(hexcodes)), key=lambda i: (hexcodes[i].upper(), hexcodes[i]))


def build_palette(hexcodes: Sequence[str],
                  cluster_count: int,
                  color_space: Union[ColorSpace, str] = ColorSpace.LCH,
                  sort_order: Union[SortOrder, str] = SortOrder.HUE_FIRST,
                  seed: int = DEFAULT_SEED,
                  max_iter: int = DEFAULT_MAX_ITER,
                  max_clusters: int = MAX_CLUSTERS,
                  display_weight: int = DEFAULT_DISPLAY_WEIGHT,
                  validate: bool = True) -> PaletteResult:
    """
    Cluster hex colors and return them as one perceptually ordered strip.

    Args:
        hexcodes: Colors as '#RRGGBB' strings (case-insensitive)
        cluster_count: Number of k-means clusters, 1..min(max_clusters, len(hexcodes))
        color_space: 'lch' or 'hsl'
        sort_order: Intra-cluster key, 'hue_first' or 'lightness_first'
        seed: Seed for k-means++ initialization
        max_iter: Lloyd iteration bound
        max_clusters: Policy upper bound on cluster_count
        display_weight: Constant weight emitted per color
        validate: Run syntax checks on every hex string up front

    Returns:
        PaletteResult whose `colors` is a permutation of `hexcodes`

    Raises:
        InvalidInput: malformed hex strings (all listed) or empty input
        InvalidClusterCount: cluster_count out of range
        ComputationFailure: numeric failure in a stage
    """
    space = _coerce_enum(ColorSpace, color_space, "color space")
    order = _coerce_enum(SortOrder, sort_order, "sort order")

    hexcodes = list(hexcodes)
    if validate:
        validate_hexcodes(hexcodes)
    elif not hexcodes:
        raise InvalidInput([], "Please enter at least one hexcode.")
    k = validate_cluster_count(cluster_count, len(hexcodes), max_clusters)

    timings = {}

    start = time.perf_counter()
    # Parse before ordering so malformed entries of any type are reported together
    rgb = hexcodes_to_rgb(hexcodes)
    order_idx = canonical_order(hexcodes)
    canon = [hexcodes[i] for i in order_idx]
    values = convert_rgb(rgb[order_idx], space)
    coords = to_coordinates(values, space)
    timings["conversion"] = (time.perf_counter() - start) * 1000

    start = time.perf_counter()
    features = normalize_features(values)
    timings["normalization"] = (time.perf_counter() - start) * 1000

    start = time.perf_counter()
    assignment = partition(features, k, seed=seed, max_iter=max_iter, max_clusters=max_clusters)
    timings["clustering"] = (time.perf_counter() - start) * 1000

    start = time.perf_counter()
    colors, weights, labels = assemble_palette(canon, coords, assignment, order, display_weight)
    timings["assembly"] = (time.perf_counter() - start) * 1000

    logger.debug(
        f"Built palette: {len(colors)} colors in {k} clusters",
        extra={
            "color_space": space.value,
            "sort_order": order.value,
            "n_iter": assignment.n_iter,
            "ms_total": sum(timings.values())
        }
    )

    return PaletteResult(
        colors=colors,
        weights=weights,
        labels=labels,
        cluster_sizes=assignment.sizes(),
        color_space=space,
        sort_order=order,
        seed=seed,
        n_iter=assignment.n_iter,
        converged=assignment.converged,
        timings_ms=timings
    )
