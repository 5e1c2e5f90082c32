"""Parts and audio segments tracked during one conversion run."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Part:
    """A partN directory: a run of frames plus an optional audio.wav."""
    index: int
    path: Path
    audio_path: Path | None = None
    frame_count: int = 0
    start_frame: int = 0  # first global frame number, set by renumbering

    @property
    def end_frame(self) -> int:
        return self.start_frame + self.frame_count - 1

    @property
    def has_audio(self) -> bool:
        return self.audio_path is not None


@dataclass(frozen=True)
class AudioSegment:
    """A slice of the source audio track belonging to one part."""
    part_index: int
    start: float
    duration: float
    path: Path
