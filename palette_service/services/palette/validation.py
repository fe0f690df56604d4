"""
Caller-facing input validation for palette requests.

Mirrors the checks a front end performs before invoking the pipeline:
blank-line tolerant parsing, `#RRGGBB` syntax, and the cluster-count range.
All malformed hex strings are reported together.
"""

import re
from typing import List, Sequence

import numpy as np

from .errors import InvalidClusterCount, InvalidInput

HEX_CODE_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MAX_CLUSTERS = 20


def is_valid_hex_code(hex_code) -> bool:
    """True when `hex_code` is exactly '#' followed by six hex digits."""
    return isinstance(hex_code, str) and HEX_CODE_RE.fullmatch(hex_code) is not None


def parse_hex_lines(text: str) -> List[str]:
    """Split a newline-separated block into trimmed, non-empty entries."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def validate_hexcodes(hexcodes: Sequence[str]) -> List[str]:
    """
    Validate hex syntax for every entry.

    Raises:
        InvalidInput: if the list is empty, or listing every malformed entry
    """
    hexcodes = list(hexcodes)
    if not hexcodes:
        raise InvalidInput([], "Please enter at least one hexcode.")

    invalid = [code for code in hexcodes if not is_valid_hex_code(code)]
    if invalid:
        raise InvalidInput(invalid)
    return hexcodes


def validate_cluster_count(k, n_points: int, max_clusters: int = MAX_CLUSTERS) -> int:
    """
    Check 1 <= k <= min(max_clusters, n_points).

    Raises:
        InvalidClusterCount: if k is not an integer or out of range
    """
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidClusterCount(k, n_points, max_clusters)
    if k < 1 or k > max_clusters or k > n_points:
        raise InvalidClusterCount(k, n_points, max_clusters)
    return int(k)
