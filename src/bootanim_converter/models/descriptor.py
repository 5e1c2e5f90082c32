"""Pydantic models for desc.txt and its part directives."""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from bootanim_converter.errors import InvalidColor


class LoopMode(str, Enum):
    """Playback behaviour of a part."""
    STOP_ON_BOOT = "stop-on-boot"
    PLAY_FULL = "play-full"
    LOOP_INFINITE = "loop-infinite"


class ImageFormat(str, Enum):
    """Frame image formats a boot animation can carry."""
    JPG = "jpg"
    PNG = "png"


# (mode, count, pause) for each loop mode
LOOP_MODE_FLAGS = {
    LoopMode.STOP_ON_BOOT: ("p", 1, 0),
    LoopMode.PLAY_FULL: ("c", 1, 0),
    LoopMode.LOOP_INFINITE: ("c", 0, 0),
}


def validate_color(color: str) -> str:
    """Normalize a hex color to '#RGB' or '#RRGGBB'.

    Input may omit the leading '#' and use either case; the digits are kept
    as given.

    Raises:
        InvalidColor: If the value is not 3 or 6 hex digits.
    """
    digits = color[1:] if color.startswith("#") else color

    if len(digits) not in (3, 6):
        raise InvalidColor(f"Invalid color format '{color}'. Use #RRGGBB or #RGB")

    if not all(c in "0123456789abcdefABCDEF" for c in digits):
        raise InvalidColor(f"Invalid hex color code '{color}'")

    return f"#{digits}"


class StandardHeader(BaseModel):
    """Header line 'W H FPS'."""
    kind: Literal["standard"] = "standard"
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    fps: int = Field(..., ge=0)


class GlobalHeader(BaseModel):
    """Header line 'g W H OFFX OFFY FPS'."""
    kind: Literal["global"] = "global"
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    offset_x: int = Field(0, ge=0)
    offset_y: int = Field(0, ge=0)
    fps: int = Field(..., ge=0)


Header = Annotated[Union[StandardHeader, GlobalHeader], Field(discriminator="kind")]


class PartDirective(BaseModel):
    """One '<mode> <count> <pause> <part> [color] [extra...]' line."""
    mode: Literal["p", "c"]
    count: int = Field(..., ge=0)
    pause: int = Field(..., ge=0)
    part_name: str
    background: Optional[str] = None
    extra: List[str] = Field(default_factory=list)

    @field_validator("background")
    @classmethod
    def check_background(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return validate_color(value)

    @property
    def loop_kind(self) -> Optional[LoopMode]:
        for loop_mode, flags in LOOP_MODE_FLAGS.items():
            if flags == (self.mode, self.count, self.pause):
                return loop_mode
        return None

    @classmethod
    def from_loop_mode(cls, loop_mode: LoopMode, part_name: str, background: Optional[str] = None) -> "PartDirective":
        mode, count, pause = LOOP_MODE_FLAGS[loop_mode]
        return cls(mode=mode, count=count, pause=pause, part_name=part_name, background=background)


class Descriptor(BaseModel):
    """Parsed desc.txt."""
    header: Header
    parts: List[PartDirective] = Field(default_factory=list)

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def fps(self) -> int:
        return self.header.fps

    @property
    def is_global(self) -> bool:
        return isinstance(self.header, GlobalHeader)

    @property
    def offset_x(self) -> int:
        return self.header.offset_x if isinstance(self.header, GlobalHeader) else 0

    @property
    def offset_y(self) -> int:
        return self.header.offset_y if isinstance(self.header, GlobalHeader) else 0

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"
