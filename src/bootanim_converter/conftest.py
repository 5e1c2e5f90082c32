"""Shared fixtures: a fake codec and a bootanimation.zip builder."""

import zipfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from bootanim_converter.errors import ExternalToolFailure
from bootanim_converter.models.descriptor import ImageFormat
from bootanim_converter.utils.video import VideoProperties


class FakeCodec:
    """Records codec calls and writes placeholder files instead of running ffmpeg."""

    def __init__(self, properties: Optional[VideoProperties] = None, failing_blocks=()):
        self.properties = properties or VideoProperties(width=320, height=240, fps=10, duration=20.0, has_audio=False)
        self.failing_blocks = set(failing_blocks)
        self.calls: List[tuple] = []
        self.sequence_frames: List[str] = []
        self.segments: List[dict] = []

    def probe(self, video: Path) -> VideoProperties:
        self.calls.append(("probe", video))
        return self.properties

    def extract_frames(self, video: Path, frames_dir: Path, width: int, height: int, fps: int, image_format: ImageFormat) -> None:
        self.calls.append(("extract_frames", width, height, fps, image_format))
        total = int(self.properties.duration * fps)
        for number in range(1, total + 1):
            (frames_dir / f"{number:06d}.{image_format.value}").write_bytes(b"frame")

    def extract_audio_block(self, video: Path, output: Path, start: float, duration: float) -> None:
        index = int(output.stem.removeprefix("audio"))
        self.calls.append(("extract_audio_block", index, start, duration))
        if index in self.failing_blocks:
            raise ExternalToolFailure(f"block {index} failed")
        output.write_bytes(b"RIFF")

    def encode_segment(self, pattern, output, start_frame, frame_count, resolution, fps, audio=None) -> None:
        self.calls.append(("encode_segment", start_frame, frame_count))
        self.segments.append({
            "output": output.name,
            "start_frame": start_frame,
            "frame_count": frame_count,
            "resolution": resolution,
            "fps": fps,
            "audio": audio.parent.name if audio is not None else None,
        })
        output.write_bytes(b"segment")

    def encode_sequence(self, pattern, output, resolution, fps) -> None:
        self.calls.append(("encode_sequence", resolution, fps))
        self.sequence_frames = sorted(path.name for path in pattern.parent.iterdir())
        output.write_bytes(b"video")

    def concat(self, segments, output, work_dir) -> None:
        self.calls.append(("concat", [segment.name for segment in segments]))
        output.write_bytes(b"merged")


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def codec_factory():
    return FakeCodec


@pytest.fixture
def make_archive(tmp_path: Path):
    """Build a bootanimation.zip from a desc.txt string and {part: [frame names]}."""
    def _make(
        desc: str,
        parts: Dict[str, List[str]],
        audio_parts=(),
        name: str = "bootanimation.zip",
    ) -> Path:
        archive_path = tmp_path / name
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_STORED) as archive:
            archive.writestr("desc.txt", desc)
            for part_name, frames in parts.items():
                for frame in frames:
                    archive.writestr(f"{part_name}/{frame}", b"img")
                if part_name in audio_parts:
                    archive.writestr(f"{part_name}/audio.wav", b"RIFF")
        return archive_path

    return _make
