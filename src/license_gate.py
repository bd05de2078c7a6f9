"""Startup activation check that must pass before any PDF is opened."""

import logging
import re
from typing import Optional

from config import Config
from errors import LicenseError

log = logging.getLogger(__name__)

LICENSE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def validate_license_key(key: Optional[str]) -> bool:
    """Return True when the key is present and well formed."""
    if not key:
        return False
    return LICENSE_KEY_PATTERN.match(key.strip()) is not None


def require_license(config: Config) -> None:
    if config.LICENSE_KEY is None or not config.LICENSE_KEY.strip():
        raise LicenseError(
            "REPAGE_LICENSE_KEY environment variable is not set. "
            "Please set it with: export REPAGE_LICENSE_KEY='your-license-key'"
        )
    if not validate_license_key(config.LICENSE_KEY):
        raise LicenseError(
            "REPAGE_LICENSE_KEY is malformed: expected 16-128 letters, digits, '-' or '_'"
        )
    log.debug("License key accepted")
