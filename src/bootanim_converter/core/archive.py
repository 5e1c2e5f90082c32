"""Read and write bootanimation.zip containers."""

import logging
import zipfile
from pathlib import Path

from bootanim_converter.core.descriptor import DESCRIPTOR_NAME
from bootanim_converter.core.sequencer import extract_ordinal
from bootanim_converter.errors import IOFailure, MissingDescriptor

DEFAULT_ARCHIVE_NAME = "bootanimation.zip"

logger = logging.getLogger(__name__)


def normalize_output_path(path: Path) -> Path:
    """Treat a path without a suffix as a directory to write bootanimation.zip into."""
    if path.suffix:
        return path
    return path / DEFAULT_ARCHIVE_NAME


def extract_archive(zip_path: Path, dest_dir: Path) -> None:
    logger.info(f"Extracting {zip_path.name}...")
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(zip_path) as archive:
            archive.extractall(dest_dir)
    except (OSError, zipfile.BadZipFile) as e:
        raise IOFailure(f"Failed to extract {zip_path}: {e}") from e


def create_archive(result_dir: Path, output_path: Path) -> None:
    """Pack desc.txt and every partN directory, uncompressed.

    Android requires stored entries so frames can be mapped straight from
    the archive.
    """
    logger.info(f"Creating {output_path.name}...")
    desc_path = result_dir / DESCRIPTOR_NAME
    if not desc_path.is_file():
        raise MissingDescriptor(f"{DESCRIPTOR_NAME} not found in {result_dir}")

    part_dirs = sorted(
        (path for path in result_dir.iterdir() if path.is_dir() and path.name.startswith("part")),
        key=lambda path: (extract_ordinal(path.name), path.name),
    )

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output_path, 'w', compression=zipfile.ZIP_STORED) as archive:
            archive.write(desc_path, DESCRIPTOR_NAME)
            for directory in part_dirs:
                for file_path in sorted(directory.iterdir()):
                    if file_path.is_file():
                        archive.write(file_path, f"{directory.name}/{file_path.name}")
    except OSError as e:
        raise IOFailure(f"Failed to create {output_path}: {e}") from e

    logger.debug(f"Packed {len(part_dirs)} parts into {output_path}")
