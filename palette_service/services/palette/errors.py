"""
Typed errors surfaced by the palette pipeline.

Every failure reaching a caller is one of these kinds with a human-readable
message; internal stage exceptions are wrapped, never leaked raw.
"""
from typing import Any, Dict, Iterable, List


class PaletteError(Exception):
    """Base class for palette pipeline errors."""

    kind: str = "PaletteError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class InvalidInput(PaletteError):
    """One or more hex strings are malformed (all offenders are listed)."""

    kind = "InvalidInput"

    def __init__(self, invalid_values: Iterable[str], message: str = None):
        self.invalid_values: List[str] = list(invalid_values)
        if message is None:
            message = f"Invalid hexcodes: {', '.join(repr(v) for v in self.invalid_values)}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["invalid_values"] = self.invalid_values
        return data


class InvalidClusterCount(PaletteError):
    """Cluster count outside [1, min(max_clusters, input_count)]."""

    kind = "InvalidClusterCount"

    def __init__(self, cluster_count: Any, input_count: int, max_clusters: int):
        self.cluster_count = cluster_count
        self.input_count = input_count
        self.max_clusters = max_clusters
        upper = min(max_clusters, input_count)
        super().__init__(
            f"Number of clusters must be between 1 and {upper} "
            f"(got {cluster_count} for {input_count} colors, policy max {max_clusters})."
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "cluster_count": self.cluster_count,
            "input_count": self.input_count,
            "max_clusters": self.max_clusters
        })
        return data


class NotReady(PaletteError):
    """Numeric backend has not finished initializing."""

    kind = "NotReady"

    def __init__(self, message: str = "Palette runtime is still initializing; retry shortly."):
        super().__init__(message)


class ComputationFailure(PaletteError):
    """Numeric failure inside a pipeline stage."""

    kind = "ComputationFailure"

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["stage"] = self.stage
        return data
