"""
Pair parts with audio.

Decoding reads each part's own audio.wav. Encoding slices the source track
into blocks of max_frames / fps seconds so block i lines up with part i.
"""

import logging
import shutil
from pathlib import Path
from typing import List

from bootanim_converter.core.partitioner import part_dir
from bootanim_converter.core.sequencer import AUDIO_NAME
from bootanim_converter.errors import ExternalToolFailure, InvalidDimension, IOFailure
from bootanim_converter.models.part import AudioSegment, Part
from bootanim_converter.utils.codec import Codec

logger = logging.getLogger(__name__)


def parts_with_audio(parts: List[Part]) -> List[Part]:
    return [part for part in parts if part.has_audio]


def block_duration(max_frames: int, fps: int) -> float:
    """Seconds of audio covered by one full part."""
    if fps <= 0:
        raise InvalidDimension(f"Invalid fps: {fps}")
    return max_frames / fps


def audio_block_path(audio_dir: Path, index: int) -> Path:
    return audio_dir / f"audio{index}.wav"


def plan_audio_blocks(duration: float, max_frames: int, fps: int, audio_dir: Path) -> List[AudioSegment]:
    """Lay out the audio blocks covering [0, duration).

    Block start times are index * block length so rounding never accumulates.
    """
    length = block_duration(max_frames, fps)
    blocks = []
    index = 0
    while index * length < duration:
        blocks.append(AudioSegment(
            part_index=index,
            start=index * length,
            duration=length,
            path=audio_block_path(audio_dir, index),
        ))
        index += 1
    return blocks


def slice_audio_blocks(
    codec: Codec,
    video: Path,
    audio_dir: Path,
    fps: int,
    duration: float,
    max_frames: int,
) -> List[AudioSegment]:
    """Extract audio{i}.wav blocks; a block that fails is skipped with a warning.

    Returns:
        The blocks that were extracted.
    """
    logger.info("Extracting audio blocks...")
    audio_dir.mkdir(parents=True, exist_ok=True)

    extracted = []
    for block in plan_audio_blocks(duration, max_frames, fps, audio_dir):
        try:
            codec.extract_audio_block(video, block.path, block.start, block.duration)
        except ExternalToolFailure as e:
            logger.warning(f"Failed to extract audio for block {block.part_index}: {e}")
            continue
        extracted.append(block)

    logger.debug(f"Extracted {len(extracted)} audio blocks")
    return extracted


def attach_audio_to_parts(audio_dir: Path, result_dir: Path, num_parts: int) -> List[int]:
    """Copy audio{i}.wav to part{i}/audio.wav for i in 0..num_parts.

    Returns:
        Indices of the parts that received audio.
    """
    logger.info("Adding audio to parts...")
    attached = []

    for index in range(num_parts + 1):
        block = audio_block_path(audio_dir, index)
        if not block.is_file():
            logger.warning(f"Audio file {block} not found, part{index} will have no audio")
            continue

        try:
            shutil.copyfile(block, part_dir(result_dir, index) / AUDIO_NAME)
        except OSError as e:
            raise IOFailure(f"Failed to copy audio for part {index}: {e}") from e
        logger.debug(f"Added audio to part{index}")
        attached.append(index)

    return attached
