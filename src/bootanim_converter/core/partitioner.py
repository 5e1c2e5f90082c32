"""Split a flat frame directory into part0, part1, ... of bounded size."""

import logging
import shutil
from pathlib import Path
from typing import List

from bootanim_converter.errors import InvalidDimension, IOFailure, NoFramesToProcess

DEFAULT_MAX_FRAMES = 400

logger = logging.getLogger(__name__)


def part_dir(result_dir: Path, index: int) -> Path:
    return result_dir / f"part{index}"


def partition_frames(frames_dir: Path, result_dir: Path, max_frames: int = DEFAULT_MAX_FRAMES) -> int:
    """Move frames into partN directories holding at most max_frames each.

    Frames are taken in filename order; the extraction step writes
    zero-padded names so this is also numeric order.

    Returns:
        The highest part index used (parts are 0..num_parts inclusive).

    Raises:
        NoFramesToProcess: If frames_dir holds no files.
        InvalidDimension: If max_frames is below 1.
    """
    if max_frames < 1:
        raise InvalidDimension(f"max frames per part must be at least 1, got {max_frames}")

    logger.info("Organizing frames into parts...")
    frames = sorted(path for path in frames_dir.iterdir() if path.is_file())
    if not frames:
        raise NoFramesToProcess("No frames found to process")

    part_index = 0
    frame_index = 0
    current_dir = part_dir(result_dir, part_index)
    current_dir.mkdir(parents=True, exist_ok=True)

    for frame in frames:
        if frame_index >= max_frames:
            frame_index = 0
            part_index += 1
            current_dir = part_dir(result_dir, part_index)
            current_dir.mkdir(parents=True, exist_ok=True)

        try:
            shutil.move(str(frame), current_dir / frame.name)
        except OSError as e:
            raise IOFailure(f"Failed to move frame {frame}: {e}") from e
        frame_index += 1

    logger.info(f"Created {part_index + 1} parts from {len(frames)} frames")
    return part_index


def count_part_frames(result_dir: Path, num_parts: int) -> List[int]:
    """Number of frames (files other than audio.wav) in each of part0..partN."""
    counts = []
    for index in range(num_parts + 1):
        directory = part_dir(result_dir, index)
        counts.append(sum(
            1 for path in directory.iterdir()
            if path.is_file() and path.name != "audio.wav"
        ))
    return counts
