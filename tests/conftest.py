"""Shared fixtures: source PDFs built with Pillow, PyPDF2 and PyMuPDF."""

from io import BytesIO
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import fitz
import pytest
from PIL import Image
from PyPDF2 import PdfWriter

from config import Config

LICENSE_KEY = "test-license-key-0123456789"

COLORS = ["red", "green", "blue", "orange", "purple", "teal"]


def make_image(size: Tuple[int, int], color: str = "blue", mode: str = "RGB") -> Image.Image:
    return Image.new(mode, size, color=color)


@pytest.fixture
def config() -> Config:
    return Config(license_key=LICENSE_KEY)


@pytest.fixture
def license_env(monkeypatch):
    monkeypatch.setenv("REPAGE_LICENSE_KEY", LICENSE_KEY)
    return LICENSE_KEY


@pytest.fixture
def image_pdf(tmp_path) -> Callable[[Sequence[Tuple[int, int]]], Path]:
    """Build a PDF with one image per page, each page exactly the image's size."""

    def build(sizes: Sequence[Tuple[int, int]], name: str = "source.pdf") -> Path:
        images = [
            make_image(size, COLORS[i % len(COLORS)]) for i, size in enumerate(sizes)
        ]
        path = tmp_path / name
        images[0].save(
            path, "PDF", resolution=72.0, save_all=True, append_images=images[1:]
        )
        return path

    return build


@pytest.fixture
def blank_pdf(tmp_path) -> Callable[[int], Path]:
    """Build a PDF with pages that hold no images."""

    def build(num_pages: int, name: str = "blank.pdf") -> Path:
        writer = PdfWriter()
        for _ in range(num_pages):
            writer.add_blank_page(width=612, height=792)
        path = tmp_path / name
        with open(path, "wb") as f:
            writer.write(f)
        return path

    return build


@pytest.fixture
def two_image_pdf(tmp_path) -> Path:
    """A single page carrying two distinct images."""
    doc = fitz.open()
    page = doc.new_page(width=612, height=792)
    for rect, color in [
        (fitz.Rect(50, 50, 250, 150), "red"),
        (fitz.Rect(50, 300, 150, 500), "green"),
    ]:
        buffer = BytesIO()
        make_image((int(rect.width), int(rect.height)), color).save(buffer, format="PNG")
        page.insert_image(rect, stream=buffer.getvalue())
    path = tmp_path / "two_images.pdf"
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def image_boxes() -> Callable[[bytes], List[List[Tuple[float, ...]]]]:
    """Image bounding boxes of every page of a serialized PDF."""

    def read(pdf_bytes: bytes) -> List[List[Tuple[float, ...]]]:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        try:
            return [
                [tuple(info["bbox"]) for info in page.get_image_info()] for page in doc
            ]
        finally:
            doc.close()

    return read


def raw_pdf(objects: List[bytes]) -> bytes:
    """Serialize numbered object bodies (1-based, object 1 is the catalog)."""
    out = BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n" % num + body + b"\nendobj\n")
    xref = out.tell()
    out.write(b"xref\n0 %d\n" % (len(objects) + 1))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(b"%010d 00000 n \n" % offset)
    out.write(
        b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n"
        % (len(objects) + 1, xref)
    )
    return out.getvalue()


def raw_stream(entries: bytes, data: bytes) -> bytes:
    return b"<< " + entries + b" /Length %d >>\nstream\n" % len(data) + data + b"\nendstream"


def raw_rgb_image(width: int, height: int, rgb: Tuple[int, int, int]) -> bytes:
    entries = (
        b"/Type /XObject /Subtype /Image /Width %d /Height %d "
        b"/ColorSpace /DeviceRGB /BitsPerComponent 8" % (width, height)
    )
    return raw_stream(entries, bytes(rgb) * width * height)


@pytest.fixture
def shared_resources_pdf(tmp_path) -> Path:
    """Two pages inheriting one /Resources from the /Pages node.

    Page 1 draws /Im1 (4x2), page 2 draws /Im2 (3x3); /Im3 (5x5) is
    declared but never drawn.
    """
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 /MediaBox [0 0 200 200] "
        b"/Resources << /XObject << /Im1 7 0 R /Im2 8 0 R /Im3 9 0 R >> >> >>",
        b"<< /Type /Page /Parent 2 0 R /Contents 5 0 R >>",
        b"<< /Type /Page /Parent 2 0 R /Contents 6 0 R >>",
        raw_stream(b"", b"q 100 0 0 50 10 10 cm /Im1 Do Q"),
        raw_stream(b"", b"q 90 0 0 90 10 10 cm /Im2 Do Q"),
        raw_rgb_image(4, 2, (255, 0, 0)),
        raw_rgb_image(3, 3, (0, 255, 0)),
        raw_rgb_image(5, 5, (0, 0, 255)),
    ]
    path = tmp_path / "shared_resources.pdf"
    path.write_bytes(raw_pdf(objects))
    return path


@pytest.fixture
def repeated_draw_pdf(tmp_path) -> Path:
    """One page that paints the same image XObject twice at different sizes."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 200 200] "
        b"/Resources << /XObject << /Im1 5 0 R >> >> /Contents 4 0 R >>",
        raw_stream(
            b"",
            b"q 40 0 0 20 10 10 cm /Im1 Do Q\nq 80 0 0 40 100 100 cm /Im1 Do Q",
        ),
        raw_rgb_image(4, 2, (255, 128, 0)),
    ]
    path = tmp_path / "repeated_draw.pdf"
    path.write_bytes(raw_pdf(objects))
    return path


@pytest.fixture
def inline_image_pdf(tmp_path) -> Path:
    """One page whose only image is an inline (BI ... ID ... EI) image."""
    hex_pixels = b"FF0000" * 8
    content = (
        b"q 100 0 0 50 10 10 cm\n"
        b"BI /W 4 /H 2 /CS /RGB /BPC 8 /F /AHx ID\n" + hex_pixels + b">\nEI\nQ"
    )
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 200 200] "
        b"/Resources << >> /Contents 4 0 R >>",
        raw_stream(b"", content),
    ]
    path = tmp_path / "inline_image.pdf"
    path.write_bytes(raw_pdf(objects))
    return path
