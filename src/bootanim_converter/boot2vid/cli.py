"""CLI command for boot2vid."""

import logging
from pathlib import Path

import typer

from bootanim_converter.boot2vid.main import main
from bootanim_converter.utils.cli import cli_error_handler, console, setup_logging
from bootanim_converter.utils.codec import CodecConfig, FFmpegCodec
from bootanim_converter.utils.dependencies import check_ffmpeg


@cli_error_handler
def boot2vid(
    input_file: Path = typer.Option(..., "--input", "-i", help="Input bootanimation.zip file"),
    output_file: Path = typer.Option(..., "--output", "-o", help="Output video file (e.g., boot.mp4)"),
    with_audio: bool = typer.Option(False, "--with-audio", help="Include audio from the bootanimation parts if available"),
    ffmpeg_path: str = typer.Option("ffmpeg", "--ffmpeg", envvar="FFMPEG_PATH", help="ffmpeg executable"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show ffmpeg errors"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """
    Convert an Android bootanimation.zip to a video.

    All parts are played back to back at the resolution and frame rate from
    desc.txt. With --with-audio, each part is encoded with its own audio.wav
    and the segments are joined without re-encoding.
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    if not input_file.exists():
        console.print(f"[bold red]Error:[/bold red] Input file does not exist: {input_file}")
        raise typer.Exit(code=1)

    if not input_file.is_file():
        console.print(f"[bold red]Error:[/bold red] Input path is not a file: {input_file}")
        raise typer.Exit(code=1)

    ffmpeg_version = check_ffmpeg(ffmpeg_path)
    logger.debug(f"ffmpeg version: {ffmpeg_version}")

    codec = FFmpegCodec(CodecConfig(ffmpeg_path=ffmpeg_path, quiet=quiet))

    logger.info(f"Converting bootanimation: {input_file}")
    result = main(str(input_file), str(output_file), codec, with_audio)
    console.print(
        f"\n[bold green]Success![/bold green] {result.total_frames} frames from "
        f"{len(result.parts)} parts saved to: {output_file}"
    )
