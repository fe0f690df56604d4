"""
Palette assembly: concatenate clusters in ascending label order.

Each cluster is perceptually sorted before concatenation. Labels that no
color was assigned to contribute nothing. Every output color carries the
same display weight (uniform bar height for the strip renderer).
"""

from typing import List, Sequence, Tuple

from .clustering import ClusterAssignment
from .errors import ComputationFailure
from .models import PerceptualCoordinate, SortOrder
from .sorting import sort_indices

DEFAULT_DISPLAY_WEIGHT = 1


def group_by_label(assignment: ClusterAssignment) -> List[List[int]]:
    """Input indices per label 0..k-1, each list in input order."""
    groups: List[List[int]] = [[] for _ in range(assignment.n_clusters)]
    for index, label in enumerate(assignment.labels):
        if not 0 <= label < assignment.n_clusters:
            raise ComputationFailure("assembly", f"label {label} outside [0, {assignment.n_clusters - 1}]")
        groups[label].append(index)
    return groups


def assemble_palette(colors: Sequence[str],
                     coords: Sequence[PerceptualCoordinate],
                     assignment: ClusterAssignment,
                     sort_order: SortOrder = SortOrder.HUE_FIRST,
                     display_weight: int = DEFAULT_DISPLAY_WEIGHT) -> Tuple[Tuple[str, ...], Tuple[int, ...], Tuple[int, ...]]:
    """
    Build the ordered palette.

    Args:
        colors: Hex colors, aligned with coords and assignment.labels
        coords: Raw perceptual coordinates
        assignment: Cluster labels from the partitioner
        sort_order: Intra-cluster key
        display_weight: Constant weight emitted per color

    Returns:
        Tuple of (ordered colors, weights, label of each ordered color)

    Raises:
        ComputationFailure: if inputs are misaligned or a color is dropped
    """
    n = len(colors)
    if len(coords) != n or len(assignment.labels) != n:
        raise ComputationFailure("assembly", "colors, coordinates and labels are misaligned")

    ordered: List[int] = []
    out_labels: List[int] = []
    for label, members in enumerate(group_by_label(assignment)):
        if not members:
            continue
        member_coords = [coords[i] for i in members]
        for j in sort_indices(member_coords, sort_order, positions=members):
            ordered.append(members[j])
            out_labels.append(label)

    if len(ordered) != n:
        raise ComputationFailure("assembly", f"palette has {len(ordered)} colors for {n} inputs")

    return (
        tuple(colors[i] for i in ordered),
        tuple([display_weight] * n),
        tuple(out_labels)
    )
