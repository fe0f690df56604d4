"""
Intra-cluster ordering by a fixed lexicographic perceptual key.

Sorting reads raw perceptual values (not the standardized features). The
key is completed with the member's position so it is total: colors equal
in all three dimensions keep their relative order.
"""

from typing import List, Optional, Sequence, Tuple

from .models import SORT_DIMENSIONS, PerceptualCoordinate, SortOrder


def perceptual_key(coord: PerceptualCoordinate, sort_order: SortOrder = SortOrder.HUE_FIRST) -> Tuple[float, float, float]:
    """Key tuple for one coordinate, e.g. (hue, chroma, lightness)."""
    return tuple(getattr(coord, dim) for dim in SORT_DIMENSIONS[SortOrder(sort_order)])


def sort_indices(coords: Sequence[PerceptualCoordinate],
                 sort_order: SortOrder = SortOrder.HUE_FIRST,
                 positions: Optional[Sequence[int]] = None) -> List[int]:
    """
    Return member indices in perceptual order.

    Args:
        coords: Coordinates of the cluster members
        sort_order: Which dimension leads the key
        positions: Tie-break rank per member (defaults to member index)
    """
    if positions is None:
        positions = range(len(coords))
    if len(positions) != len(coords):
        raise ValueError("positions and coords must have same length")

    order = SortOrder(sort_order)
    return sorted(
        range(len(coords)),
        key=lambda i: perceptual_key(coords[i], order) + (positions[i],)
    )


def sort_cluster(colors: Sequence[str],
                 coords: Sequence[PerceptualCoordinate],
                 sort_order: SortOrder = SortOrder.HUE_FIRST) -> List[str]:
    """Return a cluster's hex colors in perceptual order (input order breaks ties)."""
    if len(colors) != len(coords):
        raise ValueError("colors and coords must have same length")
    return [colors[i] for i in sort_indices(coords, sort_order)]
