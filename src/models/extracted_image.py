"""Extracted image dataclass combining page position with the decoded raster."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from PIL import Image


from .image_metadata import ImagePlacement

STAGED_IMAGE_PATTERN = "p{}_{}.jpg"

# Modes the JPEG encoder writes directly
JPEG_MODES = ("RGB", "L", "CMYK")


@dataclass
class ExtractedImage:
    """One image found on a source page, ready to be staged."""

    page_number: int
    index: int
    image: Image.Image
    placement: Optional[ImagePlacement] = None

    @property
    def staged_name(self) -> str:
        return STAGED_IMAGE_PATTERN.format(self.page_number, self.index)

    def to_jpeg_compatible(self) -> Image.Image:
        """Convert to a mode the JPEG encoder accepts."""
        if self.image.mode in JPEG_MODES:
            return self.image
        if self.image.mode == "I;16":
            return self.image.convert("I").point(lambda v: v * (1 / 256)).convert("L")
        return self.image.convert("RGB")

    def save_to_disk(self, images_dir: Path, quality: int = 100) -> Path:
        """Save image as JPEG and return its path."""
        filepath = images_dir / self.staged_name
        filepath.parent.mkdir(parents=True, exist_ok=True)
        self.to_jpeg_compatible().save(filepath, "JPEG", quality=quality)
        return filepath
