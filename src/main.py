"""
Command line entry point: extract the images of a PDF and re-page them
into a new PDF, one image per page.
"""

import logging
import sys
import tempfile
from contextlib import nullcontext
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from composer import compose_pdf
from config import Config
from errors import ArgumentError, RepageError, SerializationError
from gc_profiler import MemoryProfiler
from license_gate import require_license
from models.callbacks import ProgressCallbacks
from pdf_handler import extract_images_to_dir
from processing import load_staged_images

log = logging.getLogger(__name__)

USAGE = "Usage: pdf-repage input.pdf output.pdf"


def configure_logging(config: Config) -> None:
    if config.LOG_FILE:
        logging.basicConfig(
            level=config.LOG_LEVEL,
            filename=config.LOG_FILE,
            filemode="w",
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=config.LOG_LEVEL,
            format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def parse_args(argv: List[str]) -> Tuple[Path, Path]:
    if len(argv) != 2:
        raise ArgumentError(f"Expected 2 arguments, got {len(argv)}")
    return Path(argv[0]), Path(argv[1])


def write_output(output_path: Path, pdf_bytes: bytes) -> None:
    try:
        output_path.write_bytes(pdf_bytes)
    except OSError as e:
        raise SerializationError(f"Failed to write {output_path}: {e}") from e


def run(
    input_path: Path,
    output_path: Path,
    config: Config,
    callbacks: Optional[ProgressCallbacks] = None,
) -> int:
    """Run the whole pipeline and return the number of pages written.

    The staging directory is removed on every exit path. When the input
    holds no images nothing is written and 0 is returned.
    """
    # Scanned pages can exceed Pillow's default decompression-bomb guard
    Image.MAX_IMAGE_PIXELS = config.MAX_IMAGE_PIXELS
    profiler = MemoryProfiler() if config.PROFILE_MEMORY else None

    with tempfile.TemporaryDirectory(
        prefix=config.TEMP_DIR_PREFIX,
        suffix=f"-{input_path.name}",
        ignore_cleanup_errors=True,
    ) as temp_dir:
        staging_dir = Path(temp_dir)
        log.info(f"Creating temporary directory at: {staging_dir}")

        extract_images_to_dir(input_path, staging_dir, config, callbacks)
        images = load_staged_images(staging_dir, config)

        if not images:
            log.warning(f"No images found in {input_path}, {output_path} not written")
            return 0

        with profiler if profiler is not None else nullcontext():
            pdf_bytes = compose_pdf(images, config, profiler=profiler, callbacks=callbacks)

        write_output(output_path, pdf_bytes)
        log.info(f"Wrote {len(images)} pages to {output_path}")
        return len(images)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        input_path, output_path = parse_args(argv)
    except ArgumentError:
        print(USAGE)
        return 1

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    configure_logging(config)

    try:
        require_license(config)
        run(input_path, output_path, config)
    except RepageError as e:
        log.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
