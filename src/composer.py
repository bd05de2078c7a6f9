"""Build the output PDF, one decoded image per page."""

import logging
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

import fitz
from PIL import Image

from config import Config
from errors import CompositionError, SerializationError
from gc_profiler import MemoryProfiler
from models.callbacks import ProgressCallbacks
from models.decoded_image import DecodedImage

log = logging.getLogger(__name__)

PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I;16")


def scale_to_width(width: float, height: float, target_width: float) -> Tuple[float, float]:
    """Scale (width, height) uniformly so that width becomes target_width."""
    if width <= 0 or height <= 0:
        raise CompositionError(f"Cannot scale an image of size {width}x{height}")
    return target_width, height * (target_width / width)


def placement_rect(dimensions: Tuple[float, float], config: Config) -> fitz.Rect:
    """Rectangle for an image whose top-left corner sits at (margin, margin)."""
    width, height = scale_to_width(dimensions[0], dimensions[1], config.USABLE_WIDTH)
    return fitz.Rect(
        config.MARGIN, config.MARGIN, config.MARGIN + width, config.MARGIN + height
    )


def encode_for_page(img: Image.Image) -> bytes:
    """Encode a decoded image losslessly for embedding"""
    if img.mode not in PNG_MODES:
        img = img.convert("RGB")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def compose_pdf(
    images: Sequence[DecodedImage],
    config: Config,
    profiler: Optional[MemoryProfiler] = None,
    callbacks: Optional[ProgressCallbacks] = None,
) -> bytes:
    """Place each image on its own page, scaled to the usable page width."""
    if not images:
        raise CompositionError("No images to compose")
    callbacks = callbacks or ProgressCallbacks()

    doc = fitz.open()
    try:
        for page_num, decoded in enumerate(images, start=1):
            rect = placement_rect(decoded.dimensions, config)
            try:
                page = doc.new_page(width=config.PAGE_WIDTH, height=config.PAGE_HEIGHT)
                page.insert_image(rect, stream=encode_for_page(decoded.image))
            except Exception as e:
                raise CompositionError(
                    f"Failed to draw {decoded.source_name} on page {page_num}: {e}"
                ) from e

            log.debug(
                f"Page {page_num}: {decoded.source_name} at "
                f"({rect.x0:.2f}, {rect.y0:.2f}) size {rect.width:.2f}x{rect.height:.2f}"
            )
            if rect.y1 > config.PAGE_HEIGHT:
                log.warning(
                    f"{decoded.source_name} is taller than page {page_num} after scaling, bottom is clipped"
                )
            callbacks.on_page_composed(page_num, len(images))
            if profiler is not None:
                profiler.log_stats(f"page {page_num}")

        try:
            return doc.tobytes()
        except Exception as e:
            raise SerializationError(f"Failed to serialize output PDF: {e}") from e
    finally:
        doc.close()
