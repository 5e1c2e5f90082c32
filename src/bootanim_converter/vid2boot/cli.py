"""CLI command for vid2boot."""

import logging
from pathlib import Path
from typing import Optional

import typer

from bootanim_converter.core.archive import normalize_output_path
from bootanim_converter.core.partitioner import DEFAULT_MAX_FRAMES
from bootanim_converter.models.descriptor import ImageFormat, LoopMode
from bootanim_converter.utils.cli import cli_error_handler, console, setup_logging
from bootanim_converter.utils.codec import CodecConfig, FFmpegCodec
from bootanim_converter.utils.dependencies import check_ffmpeg, check_ffprobe
from bootanim_converter.vid2boot.main import EncodeOptions, load_seed, main, needs_probe


@cli_error_handler
def vid2boot(
    input_file: Path = typer.Option(..., "--input", "-i", help="Input video file"),
    output_file: Path = typer.Option(Path("bootanimation.zip"), "--output", "-o", help="Output bootanimation.zip (a path without extension is treated as a directory)"),
    width: Optional[int] = typer.Option(None, "--width", "-W", min=1, help="Output width (default: video width)"),
    height: Optional[int] = typer.Option(None, "--height", "-H", min=1, help="Output height (default: video height)"),
    fps: Optional[int] = typer.Option(None, "--fps", "-f", min=1, help="Frame rate (default: video frame rate)"),
    loop_mode: LoopMode = typer.Option(LoopMode.STOP_ON_BOOT, "--loop-mode", "-l", help="Animation loop behavior"),
    background: Optional[str] = typer.Option(None, "--background", "-b", help="Background color in hex format (e.g., #FFFFFF or FFFFFF)"),
    with_audio: bool = typer.Option(False, "--with-audio", help="Include audio (creates audio.wav in each part)"),
    max_frames: int = typer.Option(DEFAULT_MAX_FRAMES, "--max-frames", min=1, help="Maximum frames per part"),
    image_format: ImageFormat = typer.Option(ImageFormat.JPG, "--format", help="Image format for frames"),
    config_from: Optional[Path] = typer.Option(None, "--config-from", help="Existing bootanimation.zip to copy resolution, fps, offsets and format from"),
    global_format: bool = typer.Option(False, "--global-format", "-g", help="Write the 'g W H OFFX OFFY FPS' header used by OxygenOS"),
    offset_x: Optional[int] = typer.Option(None, "--offset-x", min=0, help="Horizontal offset for the global format header"),
    offset_y: Optional[int] = typer.Option(None, "--offset-y", min=0, help="Vertical offset for the global format header"),
    ffmpeg_path: str = typer.Option("ffmpeg", "--ffmpeg", envvar="FFMPEG_PATH", help="ffmpeg executable"),
    ffprobe_path: str = typer.Option("ffprobe", "--ffprobe", envvar="FFPROBE_PATH", help="ffprobe executable"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show ffmpeg errors"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Convert a video to an Android bootanimation.zip.

    Frames are split into parts of at most --max-frames each. With
    --with-audio, the video's soundtrack is cut into matching blocks and
    stored as audio.wav in each part.
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    if not input_file.exists():
        console.print(f"[bold red]Error:[/bold red] Input video file does not exist: {input_file}")
        raise typer.Exit(code=1)

    if config_from is not None and not config_from.is_file():
        console.print(f"[bold red]Error:[/bold red] Config archive does not exist: {config_from}")
        raise typer.Exit(code=1)

    if (offset_x is not None or offset_y is not None) and not global_format and config_from is None:
        logger.warning("Offsets only apply to the global format; pass --global-format to write them")

    options = EncodeOptions(
        width=width,
        height=height,
        fps=fps,
        loop_mode=loop_mode,
        background=background,
        with_audio=with_audio,
        max_frames=max_frames,
        image_format=image_format,
        global_format=global_format,
        offset_x=offset_x,
        offset_y=offset_y,
        seed=load_seed(config_from) if config_from is not None else None,
    )

    ffmpeg_version = check_ffmpeg(ffmpeg_path)
    logger.debug(f"ffmpeg version: {ffmpeg_version}")
    if needs_probe(options):
        ffprobe_version = check_ffprobe(ffprobe_path)
        logger.debug(f"ffprobe version: {ffprobe_version}")

    codec = FFmpegCodec(CodecConfig(ffmpeg_path=ffmpeg_path, ffprobe_path=ffprobe_path, quiet=quiet))
    output_path = normalize_output_path(output_file)

    logger.info(f"Converting video: {input_file}")
    result = main(str(input_file), str(output_path), codec, options)
    console.print(
        f"\n[bold green]Success![/bold green] {result.num_parts + 1} parts saved to: {output_path}"
    )
