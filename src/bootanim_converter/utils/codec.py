"""
ffmpeg-backed codec operations used by both conversion directions.

Pipelines talk to the Codec protocol so they can run against a fake in tests.
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol

import ffmpeg
from pydantic import BaseModel

from bootanim_converter.errors import ExternalToolFailure, IOFailure
from bootanim_converter.models.descriptor import ImageFormat
from bootanim_converter.utils.video import VideoProperties, get_video_properties

EXTRACTED_FRAME_PATTERN = "%06d"
AUDIO_SAMPLE_RATE = 44100
AUDIO_CHANNELS = 2

# Per-format quality options for extracted frames
FRAME_QUALITY_ARGS = {
    ImageFormat.JPG: {'qscale:v': 2},
    ImageFormat.PNG: {'compression_level': 3},
}

logger = logging.getLogger(__name__)


class CodecConfig(BaseModel):
    """Locations of the external tools and how chatty they may be."""
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    quiet: bool = False


class Codec(Protocol):
    def probe(self, video: Path) -> VideoProperties: ...

    def extract_frames(self, video: Path, frames_dir: Path, width: int, height: int, fps: int, image_format: ImageFormat) -> None: ...

    def extract_audio_block(self, video: Path, output: Path, start: float, duration: float) -> None: ...

    def encode_segment(
        self,
        pattern: Path,
        output: Path,
        start_frame: int,
        frame_count: int,
        resolution: str,
        fps: int,
        audio: Optional[Path] = None,
    ) -> None: ...

    def encode_sequence(self, pattern: Path, output: Path, resolution: str, fps: int) -> None: ...

    def concat(self, segments: List[Path], output: Path, work_dir: Path) -> None: ...


class FFmpegCodec:
    """Codec implementation that shells out to ffmpeg via ffmpeg-python."""

    def __init__(self, config: CodecConfig | None = None):
        self.config = config or CodecConfig()

    def _run(self, stream, description: str) -> None:
        stream = stream.global_args('-hide_banner')
        if self.config.quiet:
            stream = stream.global_args('-loglevel', 'error')
        logger.debug(f"Running: {' '.join(ffmpeg.compile(stream, cmd=self.config.ffmpeg_path))}")

        try:
            ffmpeg.run(stream, cmd=self.config.ffmpeg_path, overwrite_output=True, capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode(errors="replace") if e.stderr else ""
            logger.debug(f"FFmpeg stderr: {stderr}")
            raise ExternalToolFailure(f"FFmpeg failed to {description}", stderr) from e
        except FileNotFoundError as e:
            raise ExternalToolFailure(f"ffmpeg not found: {self.config.ffmpeg_path}") from e

    def probe(self, video: Path) -> VideoProperties:
        return get_video_properties(str(video), self.config.ffprobe_path)

    def extract_frames(self, video: Path, frames_dir: Path, width: int, height: int, fps: int, image_format: ImageFormat) -> None:
        pattern = frames_dir / f"{EXTRACTED_FRAME_PATTERN}.{image_format.value}"
        stream = (
            ffmpeg
            .input(str(video))
            .filter('fps', fps=fps)
            .filter('scale', width, height)
            .output(str(pattern), **FRAME_QUALITY_ARGS[image_format])
        )
        self._run(stream, "extract frames")

    def extract_audio_block(self, video: Path, output: Path, start: float, duration: float) -> None:
        stream = (
            ffmpeg
            .input(str(video), ss=start, t=duration)
            .output(str(output), vn=None, acodec='pcm_s16le', ar=AUDIO_SAMPLE_RATE, ac=AUDIO_CHANNELS)
        )
        self._run(stream, f"extract audio block at {start:.2f}s")

    def encode_segment(
        self,
        pattern: Path,
        output: Path,
        start_frame: int,
        frame_count: int,
        resolution: str,
        fps: int,
        audio: Optional[Path] = None,
    ) -> None:
        video_input = ffmpeg.input(str(pattern), start_number=start_frame, framerate=fps)
        output_kwargs = {
            'frames:v': frame_count,
            'vcodec': 'libx264',
            'pix_fmt': 'yuv420p',
            's': resolution,
        }

        if audio is not None:
            audio_input = ffmpeg.input(str(audio))
            stream = ffmpeg.output(
                video_input['v'], audio_input['a'], str(output),
                shortest=None, acodec='aac', **output_kwargs,
            )
        else:
            stream = ffmpeg.output(video_input, str(output), **output_kwargs)

        self._run(stream, "generate video segment")

    def encode_sequence(self, pattern: Path, output: Path, resolution: str, fps: int) -> None:
        stream = (
            ffmpeg
            .input(str(pattern), framerate=fps)
            .output(str(output), vcodec='libx264', pix_fmt='yuv420p', s=resolution)
        )
        self._run(stream, "generate video")

    def concat(self, segments: List[Path], output: Path, work_dir: Path) -> None:
        concat_file = work_dir / "concat_list.txt"
        try:
            with open(concat_file, 'w') as f:
                for segment in segments:
                    f.write(f"file '{segment.resolve()}'\n")
        except OSError as e:
            raise IOFailure(f"Failed to write {concat_file}: {e}") from e

        stream = ffmpeg.input(str(concat_file), f='concat', safe=0).output(str(output), c='copy')
        self._run(stream, "merge videos")
