"""Tests for desc.txt parsing and writing."""

import zipfile
from pathlib import Path

import pytest

from bootanim_converter.core.descriptor import (
    build_descriptor,
    parse_descriptor,
    read_descriptor,
    read_descriptor_from_archive,
    serialize_descriptor,
)
from bootanim_converter.errors import InvalidColor, IOFailure, MalformedDescriptor, MissingDescriptor
from bootanim_converter.models.descriptor import LoopMode, validate_color


def test_standard_header():
    desc = parse_descriptor("1080 2400 30\np 1 0 part0\nc 0 0 part1\n")
    assert not desc.is_global
    assert (desc.width, desc.height, desc.fps) == (1080, 2400, 30)
    assert [p.part_name for p in desc.parts] == ["part0", "part1"]
    assert desc.parts[0].loop_kind is LoopMode.STOP_ON_BOOT
    assert desc.parts[1].loop_kind is LoopMode.LOOP_INFINITE


def test_global_header():
    desc = parse_descriptor("g 1080 2400 4 8 60\nc 1 0 part0\n")
    assert desc.is_global
    assert (desc.width, desc.height, desc.offset_x, desc.offset_y, desc.fps) == (1080, 2400, 4, 8, 60)
    assert desc.parts[0].loop_kind is LoopMode.PLAY_FULL


def test_comments_and_blank_lines_are_skipped():
    text = "# boot animation\n\n   \n720 1280 24\n# parts follow\n\np 1 0 part0\n"
    desc = parse_descriptor(text)
    assert desc.resolution == "720x1280"
    assert len(desc.parts) == 1


def test_short_lines_before_header_are_ignored():
    desc = parse_descriptor("hello\n720 1280 24\n")
    assert desc.fps == 24


def test_g_with_too_few_tokens_is_not_global():
    with pytest.raises(MalformedDescriptor):
        parse_descriptor("g 1080 2400 30\n")


def test_non_numeric_header():
    with pytest.raises(MalformedDescriptor):
        parse_descriptor("1080 wide 30\n")


def test_negative_header_value():
    with pytest.raises(MalformedDescriptor):
        parse_descriptor("1080 -5 30\n")


def test_missing_header():
    with pytest.raises(MissingDescriptor):
        parse_descriptor("# only comments\n\n")


def test_bad_directive():
    with pytest.raises(MalformedDescriptor):
        parse_descriptor("100 100 10\nx 1 0 part0\n")
    with pytest.raises(MalformedDescriptor):
        parse_descriptor("100 100 10\np 1 part0\n")


def test_directive_background_and_extra_tokens():
    desc = parse_descriptor("100 100 10\np 2 5 part0 ffffff 123\n")
    part = desc.parts[0]
    assert (part.mode, part.count, part.pause) == ("p", 2, 5)
    assert part.background == "#ffffff"
    assert part.extra == ["123"]
    assert part.loop_kind is None


def test_directive_bad_background():
    with pytest.raises(InvalidColor):
        parse_descriptor("100 100 10\np 1 0 part0 #GGGGGG\n")


@pytest.mark.parametrize("text", [
    "1080 1920 30\np 1 0 part0\np 1 0 part1\n",
    "g 1080 1920 4 8 30\nc 0 0 part0 #FFF\nc 1 0 part1 #00ff00\n",
    "320 240 12\np 3 10 part0 #abcdef 7\n",
])
def test_round_trip(text):
    desc = parse_descriptor(text)
    assert serialize_descriptor(desc) == text
    assert parse_descriptor(serialize_descriptor(desc)) == desc


def test_build_descriptor_standard():
    desc = build_descriptor(480, 800, 15, 2, LoopMode.PLAY_FULL, "#000")
    assert serialize_descriptor(desc) == (
        "480 800 15\n"
        "c 1 0 part0 #000\n"
        "c 1 0 part1 #000\n"
        "c 1 0 part2 #000\n"
    )


def test_build_descriptor_global():
    desc = build_descriptor(480, 800, 15, 0, global_format=True, offset_x=4, offset_y=8)
    assert serialize_descriptor(desc) == "g 480 800 4 8 15\np 1 0 part0\n"


@pytest.mark.parametrize("value, expected", [
    ("FFFFFF", "#FFFFFF"),
    ("#FFF", "#FFF"),
    ("abc123", "#abc123"),
])
def test_validate_color(value, expected):
    assert validate_color(value) == expected


@pytest.mark.parametrize("value", ["#GGGGGG", "12345", "", "#"])
def test_validate_color_rejects(value):
    with pytest.raises(InvalidColor):
        validate_color(value)


def test_read_descriptor_missing_file(tmp_path: Path):
    with pytest.raises(MissingDescriptor):
        read_descriptor(tmp_path / "desc.txt")


def test_read_descriptor_from_archive(tmp_path: Path):
    archive_path = tmp_path / "old.zip"
    with zipfile.ZipFile(archive_path, "w") as archive:
        archive.writestr("desc.txt", "g 1080 2400 4 8 30\np 1 0 part0\n")
    desc = read_descriptor_from_archive(archive_path)
    assert desc.is_global and desc.offset_y == 8


def test_read_descriptor_from_archive_without_desc(tmp_path: Path):
    archive_path = tmp_path / "old.zip"
    with zipfile.ZipFile(archive_path, "w") as archive:
        archive.writestr("part0/00001.png", b"img")
    with pytest.raises(MissingDescriptor):
        read_descriptor_from_archive(archive_path)


def test_read_descriptor_from_corrupt_archive(tmp_path: Path):
    archive_path = tmp_path / "broken.zip"
    archive_path.write_bytes(b"not a zip")
    with pytest.raises(IOFailure):
        read_descriptor_from_archive(archive_path)
