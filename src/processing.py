import logging
import os
import re
from pathlib import Path
from typing import List, Sequence, Tuple
from PIL import Image

from config import Config
from errors import ImageDecodeError
from models.decoded_image import DecodedImage

log = logging.getLogger(__name__)

STAGED_NAME_RE = re.compile(r"^p(\d+)_(\d+)$")


def staged_sort_key(path: Path) -> Tuple[int, int, int, str]:
    """Order staged files by source page, then by index within the page.

    Names that don't follow p<page>_<index> sort after all that do.
    """
    match = STAGED_NAME_RE.match(path.stem)
    if match:
        return (0, int(match.group(1)), int(match.group(2)), path.name)
    return (1, 0, 0, path.name)


def list_staged_files(staging_dir: Path, sort_by_position: bool = True) -> List[Path]:
    # os.listdir order is filesystem-defined
    entries = [staging_dir / name for name in os.listdir(staging_dir)]
    if sort_by_position:
        entries.sort(key=staged_sort_key)
    return entries


def is_supported(path: Path, extensions: Sequence[str]) -> bool:
    return path.suffix in extensions


def decode_staged_image(path: Path) -> DecodedImage:
    """Decode a staged file fully into memory"""
    try:
        with Image.open(path) as img:
            img.load()
            # Detach from the file handle so the image outlives the with block
            decoded = img.copy()
    except Exception as e:
        raise ImageDecodeError(f"Failed to decode staged image {path.name}: {e}") from e
    return DecodedImage(path.name, decoded)


def load_staged_images(staging_dir: Path, config: Config) -> List[DecodedImage]:
    """Decode every supported file in the staging directory"""
    files = list_staged_files(staging_dir, sort_by_position=config.SORT_STAGED_FILES)
    log.info(f"total staged files: {len(files)}")

    images = []
    for path in files:
        if not path.is_file():
            log.warning(f"not a file, skipping: {path.name}")
            continue
        if not is_supported(path, config.SUPPORTED_EXTENSIONS):
            log.warning(f"extension not supported: {path.suffix or '(none)'} ({path.name})")
            continue

        decoded = decode_staged_image(path)
        width, height = decoded.dimensions
        log.debug(f"Decoded {path.name}: {width}x{height} {decoded.image.mode}")
        images.append(decoded)

    log.info(f"Decoded {len(images)} images")
    return images
