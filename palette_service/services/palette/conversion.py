"""
Color conversion: sRGB hex strings to perceptual coordinates.

Both conversions are vectorized over an (N, 3) array of 8-bit RGB values.
LCH follows the CIE definitions (sRGB companding, linear sRGB -> XYZ with the
D65 matrix, XYZ -> Lab against the D65 reference white, Lab -> LCh(ab)).
HSL uses the standard max-channel hue formula.
"""

import re
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidInput
from .models import ColorSpace, PerceptualCoordinate

HEX_PATTERN = re.compile(r"^#([0-9A-Fa-f]{6})$")

# D65 reference white (2° observer)
D65_WHITE = (0.95047, 1.0, 1.08883)

_SRGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])

_LAB_EPSILON = 216 / 24389  # 0.008856
_LAB_KAPPA = 24389 / 27     # 903.3


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string (#RRGGBB, case-insensitive) to an RGB tuple."""
    m = HEX_PATTERN.fullmatch(hex_color) if isinstance(hex_color, str) else None
    if m is None:
        raise InvalidInput([hex_color])
    digits = m.group(1)
    return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))


def hexcodes_to_rgb(hexcodes: Sequence[str]) -> np.ndarray:
    """
    Parse a sequence of hex strings into an (N, 3) uint8 array.

    Raises:
        InvalidInput: listing every malformed entry, not just the first
    """
    rows = []
    invalid = []
    for hex_color in hexcodes:
        try:
            rows.append(hex_to_rgb(hex_color))
        except InvalidInput:
            invalid.append(hex_color)
    if invalid:
        raise InvalidInput(invalid)
    return np.array(rows, dtype=np.uint8).reshape(-1, 3)


def _wrap_degrees(hue: np.ndarray) -> np.ndarray:
    """Fold hue into [0, 360); `%` can round tiny negatives up to 360.0."""
    hue = np.mod(hue, 360.0)
    return np.where(hue >= 360.0, 0.0, hue)


def rgb_to_lch(rgb_u8: np.ndarray) -> np.ndarray:
    """Convert (N, 3) RGB (0-255) to (N, 3) CIE LCh columns (L, C, H°)."""
    rgb = np.asarray(rgb_u8, dtype=np.float64).reshape(-1, 3) / 255.0

    # Inverse sRGB companding
    linear = np.where(rgb > 0.04045, ((rgb + 0.055) / 1.055) ** 2.4, rgb / 12.92)

    xyz = linear @ _SRGB_TO_XYZ.T
    xyz = xyz / np.array(D65_WHITE)

    f = np.where(xyz > _LAB_EPSILON, np.cbrt(xyz), (_LAB_KAPPA * xyz + 16) / 116)
    fx, fy, fz = f[:, 0], f[:, 1], f[:, 2]

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b = 200 * (fy - fz)

    C = np.hypot(a, b)
    H = _wrap_degrees(np.degrees(np.arctan2(b, a)))
    return np.column_stack([L, C, H])


def rgb_to_hsl(rgb_u8: np.ndarray) -> np.ndarray:
    """Convert (N, 3) RGB (0-255) to (N, 3) HSL columns (H°, S, L)."""
    rgb = np.asarray(rgb_u8, dtype=np.float64).reshape(-1, 3) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    cmax = rgb.max(axis=1)
    cmin = rgb.min(axis=1)
    delta = cmax - cmin
    lightness = (cmax + cmin) / 2

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    # Max channel decides the sextant; red wins ties, then green
    hue = np.select(
        [cmax == r, cmax == g],
        [np.mod((g - b) / safe_delta, 6.0), (b - r) / safe_delta + 2.0],
        default=(r - g) / safe_delta + 4.0,
    )
    hue = np.where(chromatic, _wrap_degrees(60.0 * hue), 0.0)

    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.where(chromatic & (denom > 0), delta / np.where(denom > 0, denom, 1.0), 0.0)

    return np.column_stack([hue, saturation, lightness])


def convert_rgb(rgb_u8: np.ndarray, color_space: ColorSpace) -> np.ndarray:
    """Convert RGB rows to the native column order of `color_space`."""
    if ColorSpace(color_space) == ColorSpace.LCH:
        return rgb_to_lch(rgb_u8)
    return rgb_to_hsl(rgb_u8)


def to_coordinates(values: np.ndarray, color_space: ColorSpace) -> List[PerceptualCoordinate]:
    """Wrap native-order rows as PerceptualCoordinate objects."""
    space = ColorSpace(color_space)
    coords = []
    for row in np.asarray(values, dtype=np.float64):
        if space == ColorSpace.LCH:
            lightness, chroma, hue = row
        else:
            hue, chroma, lightness = row
        coords.append(PerceptualCoordinate(space, float(lightness), float(chroma), float(hue)))
    return coords


def hex_to_coordinate(hex_color: str, color_space: ColorSpace = ColorSpace.LCH) -> PerceptualCoordinate:
    """Convert one hex color to its perceptual coordinate."""
    rgb = np.array([hex_to_rgb(hex_color)], dtype=np.uint8)
    return to_coordinates(convert_rgb(rgb, color_space), color_space)[0]


def convert_hexcodes(hexcodes: Sequence[str], color_space: ColorSpace = ColorSpace.LCH) -> List[PerceptualCoordinate]:
    """Convert a sequence of hex colors, aggregating any parse errors."""
    rgb = hexcodes_to_rgb(hexcodes)
    return to_coordinates(convert_rgb(rgb, color_space), color_space)
