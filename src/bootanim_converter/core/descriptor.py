"""
Parse and write desc.txt, the boot animation descriptor.

Two header dialects exist:

    W H FPS                 standard
    g W H OFFX OFFY FPS     global (carries x/y offsets)

followed by one directive per part:

    <p|c> <count> <pause> <partN> [#RRGGBB] [extra...]
"""

import logging
import zipfile
from pathlib import Path
from typing import List, Optional

from bootanim_converter.errors import IOFailure, MalformedDescriptor, MissingDescriptor
from bootanim_converter.models.descriptor import (
    Descriptor,
    GlobalHeader,
    LoopMode,
    PartDirective,
    StandardHeader,
    validate_color,
)

DESCRIPTOR_NAME = "desc.txt"

logger = logging.getLogger(__name__)


def _is_skipped(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def _parse_int(token: str, field: str, line_no: int) -> int:
    if not (token.isascii() and token.isdigit()):
        raise MalformedDescriptor(f"desc.txt line {line_no}: {field} must be a non-negative integer, got '{token}'")
    return int(token)


def _parse_header(tokens: List[str], line_no: int) -> StandardHeader | GlobalHeader | None:
    if tokens[0] == "g" and len(tokens) >= 6:
        return GlobalHeader(
            width=_parse_int(tokens[1], "width", line_no),
            height=_parse_int(tokens[2], "height", line_no),
            offset_x=_parse_int(tokens[3], "offset x", line_no),
            offset_y=_parse_int(tokens[4], "offset y", line_no),
            fps=_parse_int(tokens[5], "fps", line_no),
        )
    if len(tokens) >= 3:
        return StandardHeader(
            width=_parse_int(tokens[0], "width", line_no),
            height=_parse_int(tokens[1], "height", line_no),
            fps=_parse_int(tokens[2], "fps", line_no),
        )
    return None


def _parse_directive(tokens: List[str], line_no: int) -> PartDirective:
    if len(tokens) < 4:
        raise MalformedDescriptor(f"desc.txt line {line_no}: expected '<mode> <count> <pause> <part>', got '{' '.join(tokens)}'")

    mode = tokens[0]
    if mode not in ("p", "c"):
        raise MalformedDescriptor(f"desc.txt line {line_no}: unknown part mode '{mode}'")

    background = validate_color(tokens[4]) if len(tokens) > 4 else None

    return PartDirective(
        mode=mode,
        count=_parse_int(tokens[1], "count", line_no),
        pause=_parse_int(tokens[2], "pause", line_no),
        part_name=tokens[3],
        background=background,
        extra=tokens[5:],
    )


def parse_descriptor(text: str) -> Descriptor:
    """Parse desc.txt content.

    Raises:
        MissingDescriptor: If no header line is present.
        MalformedDescriptor: If a header or directive token is invalid.
        InvalidColor: If a directive carries a bad background color.
    """
    header = None
    parts: List[PartDirective] = []

    for line_no, line in enumerate(text.splitlines(), start=1):
        if _is_skipped(line):
            continue
        tokens = line.split()

        if header is None:
            header = _parse_header(tokens, line_no)
            if header is None:
                logger.debug(f"Ignoring desc.txt line {line_no} before header: {line.strip()!r}")
            continue

        parts.append(_parse_directive(tokens, line_no))

    if header is None:
        raise MissingDescriptor("Unable to parse desc.txt: no header line found")

    return Descriptor(header=header, parts=parts)


def serialize_descriptor(descriptor: Descriptor) -> str:
    header = descriptor.header
    if isinstance(header, GlobalHeader):
        lines = [f"g {header.width} {header.height} {header.offset_x} {header.offset_y} {header.fps}"]
    else:
        lines = [f"{header.width} {header.height} {header.fps}"]

    for part in descriptor.parts:
        tokens = [part.mode, str(part.count), str(part.pause), part.part_name]
        if part.background is not None:
            tokens.append(part.background)
        tokens.extend(part.extra)
        lines.append(" ".join(tokens))

    return "\n".join(lines) + "\n"


def build_descriptor(
    width: int,
    height: int,
    fps: int,
    num_parts: int,
    loop_mode: LoopMode = LoopMode.STOP_ON_BOOT,
    background: Optional[str] = None,
    global_format: bool = False,
    offset_x: int = 0,
    offset_y: int = 0,
) -> Descriptor:
    """Build a descriptor listing part0..partN (num_parts inclusive)."""
    if global_format:
        header = GlobalHeader(width=width, height=height, offset_x=offset_x, offset_y=offset_y, fps=fps)
    else:
        header = StandardHeader(width=width, height=height, fps=fps)

    parts = [
        PartDirective.from_loop_mode(loop_mode, f"part{index}", background)
        for index in range(num_parts + 1)
    ]
    return Descriptor(header=header, parts=parts)


def read_descriptor(path: Path) -> Descriptor:
    if not path.is_file():
        raise MissingDescriptor(f"{DESCRIPTOR_NAME} not found: {path}")
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise IOFailure(f"Failed to read {path}: {e}") from e
    return parse_descriptor(text)


def write_descriptor(path: Path, descriptor: Descriptor) -> None:
    try:
        path.write_text(serialize_descriptor(descriptor), encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Failed to write {path}: {e}") from e


def read_descriptor_from_archive(zip_path: Path) -> Descriptor:
    """Read desc.txt straight out of a bootanimation.zip without extracting it."""
    try:
        with zipfile.ZipFile(zip_path) as archive:
            try:
                data = archive.read(DESCRIPTOR_NAME)
            except KeyError:
                raise MissingDescriptor(f"{DESCRIPTOR_NAME} not found in {zip_path}")
    except (OSError, zipfile.BadZipFile) as e:
        raise IOFailure(f"Failed to read archive {zip_path}: {e}") from e

    return parse_descriptor(data.decode("utf-8", errors="replace"))
