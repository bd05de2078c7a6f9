import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional

import fitz
from PIL import Image
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from config import Config
from errors import (
    DocumentOpenError,
    DocumentStructureError,
    ImageExtractionError,
    ImageWriteError,
)
from models.callbacks import ProgressCallbacks
from models.extracted_image import ExtractedImage
from models.image_metadata import ImagePlacement

log = logging.getLogger(__name__)

IMAGE_BLOCK = 1


def open_document(pdf_path: Path) -> PdfReader:
    """Open the source PDF for reading"""
    if not pdf_path.is_file():
        raise DocumentOpenError(f"Input PDF not found: {pdf_path}")
    try:
        return PdfReader(str(pdf_path))
    except (PdfReadError, OSError, ValueError) as e:
        raise DocumentOpenError(f"Failed to open {pdf_path} as a PDF: {e}") from e


def count_pages(reader: PdfReader) -> int:
    """Quick count of pages using PDF metadata"""
    try:
        return len(reader.pages)
    except Exception as e:
        raise DocumentStructureError(f"Failed to read page tree: {e}") from e


def open_drawing_source(pdf_path: Path, num_pages: int) -> fitz.Document:
    """Open the PDF with MuPDF, which interprets the page content streams."""
    try:
        doc = fitz.open(str(pdf_path))
    except Exception as e:
        raise DocumentOpenError(f"Failed to open {pdf_path} for image extraction: {e}") from e
    if doc.page_count != num_pages:
        doc.close()
        raise DocumentStructureError(
            f"Page tree of {pdf_path} is inconsistent: {num_pages} pages in metadata, "
            f"{doc.page_count} readable"
        )
    return doc


def drawn_image_blocks(page: fitz.Page, page_number: int) -> List[Dict[str, Any]]:
    """Image blocks for every image the page draws, in drawing order.

    One block per draw: an image painted twice yields two blocks, inline
    images are included, and images that are only declared in /Resources
    are not.
    """
    try:
        # No TEXT_MEDIABOX_CLIP, so images drawn partly off the page are kept
        content = page.get_text("dict", flags=fitz.TEXT_PRESERVE_IMAGES)
    except Exception as e:
        raise ImageExtractionError(
            f"Failed to interpret content stream of page {page_number}: {e}"
        ) from e
    return [block for block in content["blocks"] if block.get("type") == IMAGE_BLOCK]


def extract_page_images(page: fitz.Page, page_number: int) -> List[ExtractedImage]:
    """Decode every image drawn on a page"""
    result = []
    for idx, block in enumerate(drawn_image_blocks(page, page_number)):
        try:
            img = Image.open(BytesIO(block["image"]))
            img.load()
        except Exception as e:
            raise ImageExtractionError(
                f"Failed to decode image {idx} ({block.get('ext', 'unknown')}) "
                f"on page {page_number}: {e}"
            ) from e

        placement = ImagePlacement.from_bbox(block["bbox"])
        result.append(ExtractedImage(page_number, idx, img, placement))

    return result


def stage_image(image: ExtractedImage, staging_dir: Path, quality: int = 100) -> Path:
    """Write an extracted image into the staging directory"""
    try:
        return image.save_to_disk(staging_dir, quality=quality)
    except (OSError, ValueError) as e:
        raise ImageWriteError(
            f"Failed to write {image.staged_name} to {staging_dir}: {e}"
        ) from e


def extract_images_to_dir(
    pdf_path: Path,
    staging_dir: Path,
    config: Config,
    callbacks: Optional[ProgressCallbacks] = None,
) -> List[Path]:
    """Extract every image drawn in the PDF as a JPEG in staging_dir.

    Pages are visited in document order. Returns the staged paths in the
    order they were written. The first failing image aborts the whole run.
    """
    callbacks = callbacks or ProgressCallbacks()

    reader = open_document(pdf_path)
    num_pages = count_pages(reader)
    log.info(f"PDF Num Pages: {num_pages}")
    callbacks.on_page_count(num_pages)

    staged: List[Path] = []
    total_images = 0
    doc = open_drawing_source(pdf_path, num_pages)
    try:
        for page_number in range(1, num_pages + 1):
            try:
                page = doc.load_page(page_number - 1)
            except Exception as e:
                raise DocumentStructureError(
                    f"Failed to read page {page_number}: {e}"
                ) from e

            page_images = extract_page_images(page, page_number)
            log.info(f"Page {page_number}: {len(page_images)} images")
            callbacks.on_page_images(page_number, len(page_images))

            for extracted in page_images:
                log.info(
                    f"Image {total_images + extracted.index + 1} - {extracted.placement.describe()}"
                )
                filepath = stage_image(extracted, staging_dir, quality=config.JPEG_QUALITY)
                log.debug(f"Staged {filepath.name}")
                callbacks.on_image_staged(filepath, extracted.placement)
                staged.append(filepath)

            total_images += len(page_images)
    finally:
        doc.close()

    log.info(f"Total: {total_images} images")
    return staged
