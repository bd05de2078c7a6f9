"""Configuration for the pdf-repage pipeline."""

import logging
import os
from typing import Mapping, Optional, Tuple

PAGE_SIZES = {
    "letter": (612.0, 792.0),
    "a4": (595.276, 841.89),
}


def _env_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return value.lower() == "true"


class Config:
    """Explicit configuration value handed to each pipeline stage."""

    def __init__(self, license_key: Optional[str] = None):
        self._license_key = license_key

        # Page Composition Configuration
        self.MARGIN = 10.0
        self.PAGE_WIDTH, self.PAGE_HEIGHT = PAGE_SIZES["letter"]

        # Staging Configuration
        self.JPEG_QUALITY = 100
        self.TEMP_DIR_PREFIX = "repage-"

        # Decode Configuration
        self.SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".jpg", ".png")
        self.SORT_STAGED_FILES = True
        # Pillow decompression-bomb limit, None accepts any size
        self.MAX_IMAGE_PIXELS: Optional[int] = None

        # Logging Configuration
        self.LOG_LEVEL = logging.INFO
        self.LOG_FILE: Optional[str] = None
        self.PROFILE_MEMORY = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a configuration from REPAGE_* environment variables."""
        if environ is None:
            environ = os.environ

        config = cls(license_key=environ.get("REPAGE_LICENSE_KEY"))

        margin = environ.get("REPAGE_MARGIN")
        if margin:
            try:
                config.MARGIN = float(margin)
            except ValueError as e:
                raise ValueError(f"REPAGE_MARGIN must be a number, got {margin!r}") from e
            if config.MARGIN < 0:
                raise ValueError(f"REPAGE_MARGIN must not be negative, got {margin!r}")

        page_size = environ.get("REPAGE_PAGE_SIZE")
        if page_size:
            if page_size.lower() not in PAGE_SIZES:
                raise ValueError(
                    f"REPAGE_PAGE_SIZE must be one of {sorted(PAGE_SIZES)}, got {page_size!r}"
                )
            config.PAGE_WIDTH, config.PAGE_HEIGHT = PAGE_SIZES[page_size.lower()]

        if config.USABLE_WIDTH <= 0:
            raise ValueError(
                f"Margin {config.MARGIN} leaves no usable width on a {config.PAGE_WIDTH}pt page"
            )

        max_pixels = environ.get("REPAGE_MAX_IMAGE_PIXELS")
        if max_pixels:
            try:
                config.MAX_IMAGE_PIXELS = int(max_pixels)
            except ValueError as e:
                raise ValueError(
                    f"REPAGE_MAX_IMAGE_PIXELS must be an integer, got {max_pixels!r}"
                ) from e
            if config.MAX_IMAGE_PIXELS <= 0:
                config.MAX_IMAGE_PIXELS = None

        config.SORT_STAGED_FILES = _env_flag(environ, "REPAGE_SORT_STAGED", True)
        config.PROFILE_MEMORY = _env_flag(environ, "REPAGE_PROFILE_MEMORY", False)
        config.LOG_LEVEL = (
            logging.DEBUG if _env_flag(environ, "REPAGE_DEBUG", False) else logging.INFO
        )
        config.LOG_FILE = environ.get("REPAGE_LOG_FILE") or None
        return config

    @property
    def LICENSE_KEY(self) -> Optional[str]:
        """Get the license key."""
        return self._license_key

    @LICENSE_KEY.setter
    def LICENSE_KEY(self, value: str) -> None:
        """Set the license key."""
        if not value:
            raise ValueError("LICENSE_KEY cannot be empty")
        self._license_key = value

    @property
    def USABLE_WIDTH(self) -> float:
        """Page width left between the two side margins."""
        return self.PAGE_WIDTH - 2 * self.MARGIN
