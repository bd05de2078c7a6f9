"""Callback definitions for pipeline progress reporting."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .image_metadata import ImagePlacement


def _ignore(*args) -> None:
    return None


@dataclass
class ProgressCallbacks:
    """Callbacks that pipeline stages call to report progress"""

    on_page_count: Callable[[int], None] = _ignore
    on_page_images: Callable[[int, int], None] = _ignore
    on_image_staged: Callable[[Path, Optional[ImagePlacement]], None] = _ignore
    on_page_composed: Callable[[int, int], None] = _ignore
