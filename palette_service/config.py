"""
Palette Service Configuration
Manages environment variables and defaults for the palette clustering service.
"""
import os
from typing import Literal


class Config:
    """Configuration class for the palette service."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("PALETTE_LOG_JSON", "0")))

    # Clustering defaults
    RANDOM_SEED: int = int(os.environ.get("PALETTE_RANDOM_SEED", "42"))
    MAX_ITER: int = int(os.environ.get("PALETTE_MAX_ITER", "300"))
    MAX_CLUSTERS: int = int(os.environ.get("PALETTE_MAX_CLUSTERS", "20"))

    # Perceptual space and intra-cluster ordering
    DEFAULT_COLOR_SPACE: Literal["lch", "hsl"] = os.environ.get("PALETTE_DEFAULT_COLOR_SPACE", "lch")
    DEFAULT_SORT_ORDER: Literal["hue_first", "lightness_first"] = os.environ.get(
        "PALETTE_DEFAULT_SORT_ORDER", "hue_first"
    )

    # Presentation
    DISPLAY_WEIGHT: int = int(os.environ.get("PALETTE_DISPLAY_WEIGHT", "1"))
    SWATCH_CHIP_WIDTH: int = int(os.environ.get("PALETTE_SWATCH_CHIP_WIDTH", "40"))
    SWATCH_HEIGHT: int = int(os.environ.get("PALETTE_SWATCH_HEIGHT", "80"))

    # Runtime bootstrap
    EAGER_INIT: bool = bool(int(os.environ.get("PALETTE_EAGER_INIT", "1")))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "*")

    SERVICE_NAME: str = "palette-service"
    VERSION: str = "1.0.0"

    @classmethod
    def validate_color_space(cls, color_space: str) -> bool:
        """Validate color space parameter."""
        return color_space in ["lch", "hsl"]

    @classmethod
    def validate_sort_order(cls, sort_order: str) -> bool:
        """Validate intra-cluster sort order parameter."""
        return sort_order in ["hue_first", "lightness_first"]

    def validate_defaults(self) -> None:
        """
        Check the env-provided request defaults.

        Raises:
            ValueError: if a default color space or sort order is unknown
        """
        if not self.validate_color_space(self.DEFAULT_COLOR_SPACE):
            raise ValueError(
                f"PALETTE_DEFAULT_COLOR_SPACE must be 'lch' or 'hsl', got {self.DEFAULT_COLOR_SPACE!r}"
            )
        if not self.validate_sort_order(self.DEFAULT_SORT_ORDER):
            raise ValueError(
                f"PALETTE_DEFAULT_SORT_ORDER must be 'hue_first' or 'lightness_first', "
                f"got {self.DEFAULT_SORT_ORDER!r}"
            )

    @classmethod
    def allowed_origins(cls) -> list:
        """Parse the comma-separated CORS origin list."""
        return [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]


# Global config instance
config = Config()
