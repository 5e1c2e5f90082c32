"""Shared utilities for checking external tool dependencies and their versions."""

import re
import subprocess


def parse_version_tuple(version_str: str) -> tuple[int, ...]:
    """Parse a version string like '6.1.1' or '4.4' into a tuple of ints."""
    return tuple(int(x) for x in version_str.split("."))


def _check_ffmpeg_tool(
    name: str,
    path: str,
    min_version: tuple[int, ...],
) -> str:
    try:
        result = subprocess.run(
            [path, "-version"], capture_output=True, text=True, timeout=5, check=False,
        )
    except OSError as e:
        raise RuntimeError(f"Required tool not found: {name} ({path}): {e}")

    if result.returncode != 0:
        raise RuntimeError(f"{name} at {path} failed to run: {result.stderr.strip()}")

    match = re.search(rf"{name} version n?(\S+)", result.stdout)
    if not match:
        raise RuntimeError(f"Could not parse {name} version from output: {result.stdout.strip()[:200]}")

    version_str = match.group(1)
    release = re.match(r"\d+(?:\.\d+)*", version_str)
    # Git snapshots ('N-112233-g...') carry no release number to compare
    if release is None:
        return version_str

    if parse_version_tuple(release.group(0)) < min_version:
        raise RuntimeError(
            f"{name} version {version_str} is not supported. "
            f"Required: >= {'.'.join(map(str, min_version))}"
        )

    return version_str


def check_ffmpeg(path: str = "ffmpeg", min_version: tuple[int, ...] = (4,)) -> str:
    """Verify ffmpeg is available and recent enough.

    Parses version from output like 'ffmpeg version 6.1.1 Copyright ...'.

    Returns:
        The detected version string.

    Raises:
        RuntimeError: If ffmpeg is not found or version is too old.
    """
    return _check_ffmpeg_tool("ffmpeg", path, min_version)


def check_ffprobe(path: str = "ffprobe", min_version: tuple[int, ...] = (4,)) -> str:
    """Verify ffprobe is available and recent enough."""
    return _check_ffmpeg_tool("ffprobe", path, min_version)
