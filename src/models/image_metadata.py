"""Placement metadata recorded for images found in a source page."""

from typing import Sequence

from pydantic import BaseModel, Field


class ImagePlacement(BaseModel):
    """Where an image is drawn on its source page"""

    x: float = Field(description="Left edge of the drawn image, from the page's left edge")
    y: float = Field(description="Top edge of the drawn image, from the page's top edge")
    width: float = Field(description="Drawn width in page units")
    height: float = Field(description="Drawn height in page units")

    @classmethod
    def from_bbox(cls, bbox: Sequence[float]) -> "ImagePlacement":
        """Build from an (x0, y0, x1, y1) bounding box in top-left page coordinates."""
        x0, y0, x1, y1 = (float(v) for v in bbox)
        return cls(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    def describe(self) -> str:
        return (
            f"X: {self.x:.2f} Y: {self.y:.2f}, "
            f"Width: {self.width:.2f}, Height: {self.height:.2f}"
        )
