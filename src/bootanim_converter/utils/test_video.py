"""Tests for ffprobe parsing and ffmpeg command construction; ffmpeg itself is mocked."""

from pathlib import Path
from unittest.mock import patch

import ffmpeg
import pytest

from bootanim_converter.errors import ExternalToolFailure
from bootanim_converter.models.descriptor import ImageFormat
from bootanim_converter.utils.codec import CodecConfig, FFmpegCodec
from bootanim_converter.utils.video import get_video_properties, parse_frame_rate

PROBE_OUTPUT = {
    "streams": [
        {"codec_type": "video", "width": 1920, "height": 1080, "r_frame_rate": "30000/1001"},
        {"codec_type": "audio"},
    ],
    "format": {"duration": "20.5"},
}


@pytest.mark.parametrize("value, expected", [
    ("30000/1001", 30),
    ("25/1", 25),
    ("24", 24),
    ("0/0", 0),
])
def test_parse_frame_rate(value, expected):
    assert parse_frame_rate(value) == expected


def test_get_video_properties():
    with patch("bootanim_converter.utils.video.ffmpeg.probe", return_value=PROBE_OUTPUT) as probe:
        props = get_video_properties("in.mp4", "/opt/ffprobe")
    probe.assert_called_once_with("in.mp4", cmd="/opt/ffprobe")
    assert (props.width, props.height, props.fps, props.duration, props.has_audio) == (1920, 1080, 30, 20.5, True)


def test_get_video_properties_without_video_stream():
    with patch("bootanim_converter.utils.video.ffmpeg.probe", return_value={"streams": [{"codec_type": "audio"}]}):
        with pytest.raises(ExternalToolFailure):
            get_video_properties("in.mp4")


def test_get_video_properties_probe_error():
    error = ffmpeg.Error("ffprobe", b"", b"in.mp4: No such file")
    with patch("bootanim_converter.utils.video.ffmpeg.probe", side_effect=error):
        with pytest.raises(ExternalToolFailure) as excinfo:
            get_video_properties("in.mp4")
    assert "No such file" in excinfo.value.stderr


def _captured_args(run_mock) -> list:
    stream = run_mock.call_args.args[0]
    return ffmpeg.get_args(stream)


def test_encode_segment_with_audio(tmp_path: Path):
    codec = FFmpegCodec(CodecConfig(ffmpeg_path="/opt/ffmpeg"))
    with patch("bootanim_converter.utils.codec.ffmpeg.run") as run:
        codec.encode_segment(
            tmp_path / "%05d.png", tmp_path / "part1.mp4",
            start_frame=301, frame_count=150, resolution="1080x1920", fps=30,
            audio=tmp_path / "audio.wav",
        )
    args = _captured_args(run)
    assert run.call_args.kwargs["cmd"] == "/opt/ffmpeg"
    assert args[args.index("-start_number") + 1] == "301"
    assert args[args.index("-frames:v") + 1] == "150"
    assert args[args.index("-s") + 1] == "1080x1920"
    assert "-shortest" in args
    assert args[args.index("-acodec") + 1] == "aac"
    assert "-hide_banner" in args


def test_extract_frames_resamples_scales_and_sets_quality(tmp_path: Path):
    codec = FFmpegCodec()
    with patch("bootanim_converter.utils.codec.ffmpeg.run") as run:
        codec.extract_frames(tmp_path / "in.mp4", tmp_path, 480, 800, 30, ImageFormat.JPG)
    args = _captured_args(run)
    graph = args[args.index("-filter_complex") + 1]
    assert "fps=fps=30" in graph
    assert graph.index("fps=fps=30") < graph.index("scale=480:800")
    assert args[args.index("-qscale:v") + 1] == "2"
    assert str(tmp_path / "%06d.jpg") in args


def test_extract_audio_block_args(tmp_path: Path):
    codec = FFmpegCodec(CodecConfig(quiet=True))
    with patch("bootanim_converter.utils.codec.ffmpeg.run") as run:
        codec.extract_audio_block(tmp_path / "in.mp4", tmp_path / "audio1.wav", 40.0, 40.0)
    args = _captured_args(run)
    assert args[args.index("-ss") + 1] == "40.0"
    assert args[args.index("-acodec") + 1] == "pcm_s16le"
    assert args[args.index("-ar") + 1] == "44100"
    assert args[args.index("-loglevel") + 1] == "error"


def test_run_failure_raises_external_tool_failure(tmp_path: Path):
    codec = FFmpegCodec()
    error = ffmpeg.Error("ffmpeg", b"", b"boom")
    with patch("bootanim_converter.utils.codec.ffmpeg.run", side_effect=error):
        with pytest.raises(ExternalToolFailure) as excinfo:
            codec.encode_sequence(tmp_path / "%05d.png", tmp_path / "out.mp4", "10x10", 10)
    assert excinfo.value.stderr == "boom"


def test_concat_writes_list_in_order(tmp_path: Path):
    codec = FFmpegCodec()
    segments = [tmp_path / "part0.mp4", tmp_path / "part1.mp4"]
    with patch("bootanim_converter.utils.codec.ffmpeg.run") as run:
        codec.concat(segments, tmp_path / "out.mp4", tmp_path)
    lines = (tmp_path / "concat_list.txt").read_text().splitlines()
    assert lines == [f"file '{segment.resolve()}'" for segment in segments]
    args = _captured_args(run)
    assert args[args.index("-c") + 1] == "copy"
    assert args[args.index("-f") + 1] == "concat"
