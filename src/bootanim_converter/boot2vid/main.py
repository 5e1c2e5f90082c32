#!/usr/bin/env python3
"""
Convert an Android bootanimation.zip into a single video
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from bootanim_converter.core.archive import extract_archive
from bootanim_converter.core.audio import parts_with_audio
from bootanim_converter.core.descriptor import DESCRIPTOR_NAME, read_descriptor
from bootanim_converter.core.sequencer import (
    FRAME_NAME_WIDTH,
    collect_parts,
    detect_frame_extension,
    renumber_frames,
)
from bootanim_converter.errors import InvalidDimension, IOFailure, NoFramesFound
from bootanim_converter.models.descriptor import Descriptor
from bootanim_converter.models.part import Part
from bootanim_converter.utils.codec import Codec

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """What a decode run produced."""
    descriptor: Descriptor
    parts: List[Part]
    total_frames: int
    used_audio: bool
    segments: List[Path] = field(default_factory=list)


def validate_descriptor(descriptor: Descriptor) -> None:
    for name, value in (("width", descriptor.width), ("height", descriptor.height), ("fps", descriptor.fps)):
        if value <= 0:
            raise InvalidDimension(f"desc.txt {name} must be positive, got {value}")


def encode_parts(
    codec: Codec,
    parts: List[Part],
    pattern: Path,
    work_dir: Path,
    resolution: str,
    fps: int,
) -> List[Path]:
    """Encode one segment per part, with that part's audio when it has any.

    Returns:
        Segment files in part order.
    """
    segments = []

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        transient=True,
    ) as progress:
        task = progress.add_task("Encoding parts...", total=len(parts))

        for part in parts:
            if part.frame_count == 0:
                logger.warning(f"Skipping part {part.index} ({part.path.name}): no frames")
                progress.update(task, advance=1)
                continue

            logger.info(
                f"Processing part {part.index} {'with' if part.has_audio else 'without'} audio "
                f"({part.frame_count} frames)"
            )
            segment = work_dir / f"part{part.index}.mp4"
            codec.encode_segment(
                pattern,
                segment,
                start_frame=part.start_frame,
                frame_count=part.frame_count,
                resolution=resolution,
                fps=fps,
                audio=part.audio_path,
            )
            segments.append(segment)
            progress.update(task, advance=1)

    return segments


def decode_bootanimation(
    archive_path: Path,
    output_path: Path,
    codec: Codec,
    with_audio: bool = False,
) -> DecodeResult:
    """
    Convert a bootanimation.zip into a video file.

    Args:
        archive_path: Path to the bootanimation.zip
        output_path: Path to the output video file
        codec: Codec used to encode frames and merge segments
        with_audio: Include each part's audio.wav when present
    """
    with tempfile.TemporaryDirectory(prefix="bootanim_") as temp_dir:
        work_dir = Path(temp_dir)
        extract_dir = work_dir / "extracted"
        frames_dir = work_dir / "frames"

        extract_archive(archive_path, extract_dir)

        descriptor = read_descriptor(extract_dir / DESCRIPTOR_NAME)
        validate_descriptor(descriptor)
        logger.info(f"Resolution: {descriptor.resolution}, FPS: {descriptor.fps}")

        parts = collect_parts(extract_dir, descriptor)

        # Format is detected on the first part and assumed for all of them
        extension = detect_frame_extension(parts[0].path)
        logger.info(f"Detected frame format: {extension.upper()}")

        logger.info("Collecting and renaming all frames...")
        parts, counter = renumber_frames(parts, frames_dir, extension)
        total_frames = counter - 1
        if total_frames == 0:
            raise NoFramesFound(f"No {extension.upper()} frames found in any part")
        logger.info(f"Total frames collected: {total_frames}")

        pattern = frames_dir / f"%0{FRAME_NAME_WIDTH}d.{extension}"
        output_path.parent.mkdir(parents=True, exist_ok=True)

        use_audio = with_audio and bool(parts_with_audio(parts))
        segments: List[Path] = []

        if use_audio:
            logger.info("Processing with audio...")
            segments = encode_parts(codec, parts, pattern, work_dir, descriptor.resolution, descriptor.fps)

            if len(segments) > 1:
                logger.info(f"Merging {len(segments)} video parts...")
                codec.concat(segments, output_path, work_dir)
            else:
                try:
                    shutil.copyfile(segments[0], output_path)
                except OSError as e:
                    raise IOFailure(f"Failed to write {output_path}: {e}") from e
        else:
            if with_audio:
                logger.info("No audio found, processing without audio...")
            else:
                logger.info("Generating video without audio...")
            codec.encode_sequence(pattern, output_path, descriptor.resolution, descriptor.fps)

    logger.info(f"Video saved to: {output_path}")
    return DecodeResult(
        descriptor=descriptor,
        parts=parts,
        total_frames=total_frames,
        used_audio=use_audio,
        segments=segments,
    )


def main(input_file: str, output_file: str, codec: Codec, with_audio: bool = False) -> DecodeResult:
    return decode_bootanimation(Path(input_file), Path(output_file), codec, with_audio)
