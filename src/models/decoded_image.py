"""Data models for decoded staging images."""

from dataclasses import dataclass
from typing import Tuple
from PIL import Image


@dataclass
class DecodedImage:
    """A staged file decoded into memory."""

    source_name: str
    image: Image.Image

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.image.size
