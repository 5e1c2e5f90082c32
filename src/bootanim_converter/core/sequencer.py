"""
Collect frames from partN directories into one globally numbered sequence.
"""

import logging
import re
import shutil
from dataclasses import replace
from pathlib import Path
from typing import List, Tuple

from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from bootanim_converter.errors import IOFailure, NoFramesFound
from bootanim_converter.models.descriptor import Descriptor
from bootanim_converter.models.part import Part

AUDIO_NAME = "audio.wav"
FRAME_NAME_WIDTH = 5

_DIGIT_RUN = re.compile(r"[0-9]+")
_EXTENSION_ALIASES = {
    "png": {".png"},
    "jpg": {".jpg", ".jpeg"},
}

logger = logging.getLogger(__name__)


def extract_ordinal(filename: str) -> int:
    """Return the last run of digits in the filename stem, or 0.

    'frame007.png' -> 7, 'img012_2.png' -> 2, 'noNumbers.png' -> 0
    """
    runs = _DIGIT_RUN.findall(Path(filename).stem)
    return int(runs[-1]) if runs else 0


def detect_frame_extension(part_dir: Path) -> str:
    """Pick 'png' or 'jpg' for the frames in a part directory.

    Any PNG wins; JPG/JPEG is the fallback.

    Raises:
        NoFramesFound: If the directory holds neither.
    """
    png_count = 0
    jpg_count = 0

    for path in part_dir.iterdir():
        suffix = path.suffix.lower()
        if suffix == ".png":
            png_count += 1
        elif suffix in (".jpg", ".jpeg"):
            jpg_count += 1

    if png_count > 0:
        return "png"
    if jpg_count > 0:
        return "jpg"
    raise NoFramesFound(f"No valid frames (PNG or JPG) found in {part_dir}")


def list_frames(part_dir: Path, extension: str) -> List[Path]:
    """List frames with the given extension, ordered by their filename ordinal."""
    suffixes = _EXTENSION_ALIASES.get(extension, {f".{extension}"})
    frames = [
        path for path in sorted(part_dir.iterdir())
        if path.is_file() and path.suffix.lower() in suffixes
    ]
    return sorted(frames, key=lambda path: extract_ordinal(path.name))


def _part_sort_key(path: Path) -> Tuple[int, str]:
    return extract_ordinal(path.name), path.name


def collect_parts(extract_dir: Path, descriptor: Descriptor) -> List[Part]:
    """Find the part directories of an extracted boot animation.

    Directories named by the descriptor's directives are used in directive
    order. Without directives every subdirectory is a part, sorted so that
    part10 follows part9.
    """
    if descriptor.parts:
        root = extract_dir.resolve()
        directories = []
        for directive in descriptor.parts:
            path = extract_dir / directive.part_name
            if not path.resolve().is_relative_to(root) or path.resolve() == root:
                logger.warning(f"desc.txt part outside the archive, skipping: {directive.part_name}")
                continue
            if path in directories:
                continue
            if not path.is_dir():
                logger.warning(f"desc.txt references missing part directory: {directive.part_name}")
                continue
            directories.append(path)
    else:
        directories = sorted(
            (path for path in extract_dir.iterdir()
             if path.is_dir() and not path.name.startswith((".", "__MACOSX"))),
            key=_part_sort_key,
        )

    if not directories:
        raise NoFramesFound(f"No valid parts found in {extract_dir}")

    parts = []
    for index, path in enumerate(directories):
        audio_path = path / AUDIO_NAME
        parts.append(Part(index=index, path=path, audio_path=audio_path if audio_path.is_file() else None))
        logger.debug(f"Found {path.name}" + (" (with audio)" if audio_path.is_file() else ""))

    return parts


def renumber_frames(
    parts: List[Part],
    dest_dir: Path,
    extension: str,
    start_counter: int = 1,
) -> Tuple[List[Part], int]:
    """Copy every part's frames into dest_dir as 00001.ext, 00002.ext, ...

    Numbering continues across part boundaries without gaps, so part k
    occupies [start_frame, start_frame + frame_count - 1].

    Returns:
        Tuple of (parts with start_frame/frame_count set, next unused counter)
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    counter = start_counter
    numbered: List[Part] = []

    part_frames = [(part, list_frames(part.path, extension)) for part in parts]
    total = sum(len(frames) for _, frames in part_frames)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        transient=True,
    ) as progress:
        task = progress.add_task("Collecting frames...", total=total)

        for part, frames in part_frames:
            start_frame = counter
            for frame in frames:
                target = dest_dir / f"{counter:0{FRAME_NAME_WIDTH}d}.{extension}"
                try:
                    shutil.copyfile(frame, target)
                except OSError as e:
                    raise IOFailure(f"Failed to copy frame {frame}: {e}") from e
                counter += 1
                progress.update(task, advance=1)

            numbered.append(replace(part, start_frame=start_frame, frame_count=counter - start_frame))
            logger.info(f"  {counter - start_frame} frames from {part.path.name}")

    return numbered, counter
