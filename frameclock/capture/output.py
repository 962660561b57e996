"""
Frame output directory

Frame files are zero-padded to a fixed width so that lexical and numeric
ordering agree, which is what image-sequence encoders expect.
"""

import logging
import shutil
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

MIN_INDEX_WIDTH = 5


def index_width(total_frames: int) -> int:
    """Digits needed for the largest frame index"""
    return max(MIN_INDEX_WIDTH, len(str(max(total_frames - 1, 0))))


def frame_filename(index: int, total_frames: int) -> str:
    return f"{index:0{index_width(total_frames)}d}.png"


def frame_pattern(total_frames: int) -> str:
    """printf-style pattern matching frame_filename, e.g. %05d.png"""
    return f"%0{index_width(total_frames)}d.png"


def prepare_output_dir(path: Path) -> Path:
    """
    Clear and recreate the frame directory

    A missing directory is not an error.

    Args:
        path: Output directory

    Returns:
        The (now empty) directory
    """
    if path.exists():
        shutil.rmtree(path)
        logger.debug(f"Removed previous output: {path}")
    path.mkdir(parents=True)
    logger.info(f"Made output directory at {path}")
    return path


def missing_frames(output_dir: Path, total_frames: int) -> list[int]:
    """Frame indices in [0, total_frames) with no file on disk"""
    return [
        index
        for index in range(total_frames)
        if not (output_dir / frame_filename(index, total_frames)).exists()
    ]


def read_frame_size(path: Path) -> tuple[int, int]:
    """Pixel size (width, height) of a captured frame"""
    with Image.open(path) as image:
        return image.size
