"""
Feature normalization: per-dimension standardization of perceptual coordinates.

Uses scikit-learn's StandardScaler (population standard deviation). A column
whose values are all identical has no spread; its standardized value is
defined as exactly 0 rather than a floating-point residue of `x - mean`.
"""

from typing import Sequence, Union

import numpy as np
from sklearn.preprocessing import StandardScaler

from .errors import ComputationFailure
from .models import PerceptualCoordinate


def coordinates_to_matrix(coords: Sequence[PerceptualCoordinate]) -> np.ndarray:
    """Stack coordinates into an (N, 3) float matrix in native column order."""
    return np.array([c.as_tuple() for c in coords], dtype=np.float64).reshape(-1, 3)


def normalize_features(coords: Union[Sequence[PerceptualCoordinate], np.ndarray]) -> np.ndarray:
    """
    Standardize coordinates to zero mean and unit variance per dimension.

    Args:
        coords: PerceptualCoordinate sequence or an (N, 3) matrix

    Returns:
        Read-only (N, 3) float64 array of normalized features

    Raises:
        ComputationFailure: on empty input or non-finite values
    """
    if isinstance(coords, np.ndarray):
        values = np.asarray(coords, dtype=np.float64).reshape(-1, 3)
    else:
        values = coordinates_to_matrix(coords)

    if values.shape[0] == 0:
        raise ComputationFailure("normalization", "no coordinates to normalize")
    if not np.all(np.isfinite(values)):
        raise ComputationFailure("normalization", "non-finite perceptual coordinate")

    scaler = StandardScaler()
    features = scaler.fit_transform(values)

    constant = np.ptp(values, axis=0) == 0
    features[:, constant] = 0.0

    if not np.all(np.isfinite(features)):
        raise ComputationFailure("normalization", "standardization produced non-finite values")

    features.setflags(write=False)
    return features
