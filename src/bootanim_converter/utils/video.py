import logging
from typing import Any

import ffmpeg
from pydantic import BaseModel, Field

from bootanim_converter.errors import ExternalToolFailure

logger: logging.Logger = logging.getLogger(__name__)


class VideoProperties(BaseModel):
    """Source video properties extracted from ffprobe."""

    width: int = Field(..., gt=0, description="Video width in pixels")
    height: int = Field(..., gt=0, description="Video height in pixels")
    fps: int = Field(..., ge=0, description="Frames per second, rounded to an integer")
    duration: float = Field(..., ge=0, description="Duration in seconds")
    has_audio: bool = Field(False, description="Whether the container has an audio stream")


def parse_frame_rate(value: Any) -> int:
    """Turn an ffprobe rate like '30000/1001' or '25' into a whole fps."""
    if isinstance(value, str) and '/' in value:
        num, denom = value.split('/', 1)
        if float(denom) == 0:
            return 0
        return round(float(num) / float(denom))
    return round(float(value))


def get_video_properties(filename: str, ffprobe_path: str = "ffprobe") -> VideoProperties:
    try:
        probe = ffmpeg.probe(filename, cmd=ffprobe_path)
    except ffmpeg.Error as e:
        stderr = e.stderr.decode(errors="replace") if e.stderr else ""
        raise ExternalToolFailure(f"ffprobe failed on {filename}", stderr) from e
    except FileNotFoundError as e:
        raise ExternalToolFailure(f"ffprobe not found: {ffprobe_path}") from e

    streams: list[Any] = probe.get('streams', [])
    video = next((s for s in streams if s.get('codec_type') == 'video'), None)
    if video is None:
        raise ExternalToolFailure(f"No video stream found in {filename}")

    duration = probe.get('format', {}).get('duration') or video.get('duration') or 0

    try:
        properties = VideoProperties(
            width=video['width'],
            height=video['height'],
            fps=parse_frame_rate(video.get('r_frame_rate', '0')),
            duration=float(duration),
            has_audio=any(s.get('codec_type') == 'audio' for s in streams),
        )
    except (KeyError, ValueError) as e:
        raise ExternalToolFailure(f"Unexpected ffprobe output for {filename}: {e}") from e

    logger.info(
        f"Video detected: {properties.width}x{properties.height}, "
        f"{properties.fps} fps, {properties.duration:.2f}s, "
        f"audio: {'yes' if properties.has_audio else 'no'}"
    )
    return properties
