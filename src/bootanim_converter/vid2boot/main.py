#!/usr/bin/env python3
"""
Convert a video into an Android bootanimation.zip
"""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from bootanim_converter.core.archive import create_archive
from bootanim_converter.core.audio import attach_audio_to_parts, slice_audio_blocks
from bootanim_converter.core.descriptor import (
    DESCRIPTOR_NAME,
    build_descriptor,
    read_descriptor_from_archive,
    write_descriptor,
)
from bootanim_converter.core.partitioner import DEFAULT_MAX_FRAMES, count_part_frames, partition_frames
from bootanim_converter.errors import InvalidDimension, IOFailure, MissingRequiredValue
from bootanim_converter.models.descriptor import Descriptor, ImageFormat, LoopMode, validate_color
from bootanim_converter.utils.codec import Codec
from bootanim_converter.utils.video import VideoProperties

logger = logging.getLogger(__name__)


class EncodeOptions(BaseModel):
    """Requested output settings; unset values come from the seed or the probe."""
    width: Optional[int] = Field(None, ge=0)
    height: Optional[int] = Field(None, ge=0)
    fps: Optional[int] = Field(None, ge=0)
    loop_mode: LoopMode = LoopMode.STOP_ON_BOOT
    background: Optional[str] = None
    with_audio: bool = False
    max_frames: int = Field(DEFAULT_MAX_FRAMES, ge=1)
    image_format: ImageFormat = ImageFormat.JPG
    global_format: bool = False
    offset_x: Optional[int] = Field(None, ge=0)
    offset_y: Optional[int] = Field(None, ge=0)
    seed: Optional[Descriptor] = None

    @field_validator("background")
    @classmethod
    def check_background(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else validate_color(value)


class OutputSettings(BaseModel):
    """Fully resolved settings for the archive being written."""
    width: int
    height: int
    fps: int
    global_format: bool
    offset_x: int
    offset_y: int

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class EncodeResult:
    """What an encode run produced."""
    settings: OutputSettings
    descriptor: Descriptor
    num_parts: int
    frame_counts: List[int]
    audio_parts: List[int] = field(default_factory=list)
    probed: Optional[VideoProperties] = None


def needs_probe(options: EncodeOptions) -> bool:
    """Whether ffprobe has to run before frames can be extracted.

    Audio slicing needs the duration and stream list, so requesting audio
    always probes.
    """
    if options.with_audio:
        return True
    if options.seed is not None:
        return False
    return any(getattr(options, name) is None for name in ("width", "height", "fps"))


def _resolve(name: str, explicit: Optional[int], seed: Optional[Descriptor], probed: Optional[VideoProperties]) -> int:
    if explicit is not None:
        value = explicit
    elif seed is not None:
        value = getattr(seed, name)
    elif probed is not None:
        value = getattr(probed, name)
    else:
        raise MissingRequiredValue(f"No {name} given and none could be read from the source")

    if value <= 0:
        raise InvalidDimension(f"{name} must be positive, got {value}")
    return value


def resolve_settings(options: EncodeOptions, probed: Optional[VideoProperties] = None) -> OutputSettings:
    """Resolve each value as explicit option > seed descriptor > probed video."""
    seed = options.seed

    offset_x = options.offset_x if options.offset_x is not None else (seed.offset_x if seed else 0)
    offset_y = options.offset_y if options.offset_y is not None else (seed.offset_y if seed else 0)

    return OutputSettings(
        width=_resolve("width", options.width, seed, probed),
        height=_resolve("height", options.height, seed, probed),
        fps=_resolve("fps", options.fps, seed, probed),
        global_format=options.global_format or (seed is not None and seed.is_global),
        offset_x=offset_x,
        offset_y=offset_y,
    )


def load_seed(archive_path: Path) -> Descriptor:
    """Load desc.txt from an existing boot animation to reuse its settings."""
    seed = read_descriptor_from_archive(archive_path)
    logger.info(
        f"Using settings from {archive_path.name}: {seed.resolution} @ {seed.fps} fps"
        + (f", global format offset ({seed.offset_x}, {seed.offset_y})" if seed.is_global else "")
    )
    return seed


def encode_bootanimation(
    video_path: Path,
    output_path: Path,
    codec: Codec,
    options: EncodeOptions,
) -> EncodeResult:
    """
    Convert a video into a bootanimation.zip.

    Args:
        video_path: Path to the input video
        output_path: Path to the bootanimation.zip to write
        codec: Codec used to probe and extract frames and audio
        options: Requested output settings
    """
    if not video_path.is_file():
        raise IOFailure(f"Input video file does not exist: {video_path}")

    probed = None
    if needs_probe(options):
        logger.info("Analyzing video...")
        probed = codec.probe(video_path)
    else:
        logger.debug("All output settings supplied, skipping probe")

    settings = resolve_settings(options, probed)
    logger.info(f"Output: {settings.resolution} @ {settings.fps} fps, loop mode {options.loop_mode.value}")
    if options.background:
        logger.info(f"Background: {options.background}")

    use_audio = options.with_audio and probed is not None and probed.has_audio
    if options.with_audio and not use_audio:
        logger.warning("Audio requested but video has no audio stream")

    with tempfile.TemporaryDirectory(prefix="bootanim_") as temp_dir:
        work_dir = Path(temp_dir)
        frames_dir = work_dir / "frames"
        audio_dir = work_dir / "audio"
        result_dir = work_dir / "result"
        frames_dir.mkdir()
        result_dir.mkdir()

        logger.info("Extracting frames from video...")
        codec.extract_frames(video_path, frames_dir, settings.width, settings.height, settings.fps, options.image_format)

        if use_audio:
            slice_audio_blocks(codec, video_path, audio_dir, settings.fps, probed.duration, options.max_frames)

        num_parts = partition_frames(frames_dir, result_dir, options.max_frames)
        frame_counts = count_part_frames(result_dir, num_parts)

        audio_parts: List[int] = []
        if use_audio:
            audio_parts = attach_audio_to_parts(audio_dir, result_dir, num_parts)

        descriptor = build_descriptor(
            settings.width,
            settings.height,
            settings.fps,
            num_parts,
            loop_mode=options.loop_mode,
            background=options.background,
            global_format=settings.global_format,
            offset_x=settings.offset_x,
            offset_y=settings.offset_y,
        )
        write_descriptor(result_dir / DESCRIPTOR_NAME, descriptor)

        create_archive(result_dir, output_path)

    logger.info(f"Bootanimation saved to: {output_path}")
    return EncodeResult(
        settings=settings,
        descriptor=descriptor,
        num_parts=num_parts,
        frame_counts=frame_counts,
        audio_parts=audio_parts,
        probed=probed,
    )


def main(input_file: str, output_file: str, codec: Codec, options: EncodeOptions) -> EncodeResult:
    return encode_bootanimation(Path(input_file), Path(output_file), codec, options)
