"""Image file detection and directory import."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from PIL import Image, UnidentifiedImageError

from photo_albums.config.config import ConfigManager
from photo_albums.model.user import User

logger = logging.getLogger(__name__)

# Callback signature: (current_count, total_count, filepath)
ProgressCallback = Callable[[int, int, str], None]

# Pillow format names accepted for each file extension
_PIL_FORMATS: dict[str, set[str]] = {
    "bmp": {"BMP", "DIB"},
    "gif": {"GIF"},
    "jpeg": {"JPEG", "MPO"},
    "jpg": {"JPEG", "MPO"},
    "png": {"PNG"},
    "tif": {"TIFF"},
    "tiff": {"TIFF"},
    "webp": {"WEBP"},
}


@dataclass
class ScanResult:
    """Result of a directory import."""

    total_found: int = 0
    added: int = 0
    skipped: int = 0
    errors: int = 0
    error_files: list[str] = field(default_factory=list)


class ImageScanner:
    """Decide which files are photos and add them to a user's album."""

    def __init__(self, config: ConfigManager | None = None):
        self._config = config
        self._supported_formats = self._get_supported_formats()
        self._ignore_hidden = True
        self._verify = False
        if config:
            self._ignore_hidden = config.get(
                "file_scanning.ignore_hidden_files", True
            )
            self._verify = bool(config.get("file_scanning.verify_images", False))

    @property
    def supported_formats(self) -> set[str]:
        return set(self._supported_formats)

    def is_image_file(self, path: str | Path) -> bool:
        """True for an existing file with a supported extension.

        With file_scanning.verify_images enabled, Pillow must also identify
        the file as an image of a matching format.
        """
        path = Path(path)
        if not path.is_file():
            return False
        ext = path.suffix.lower().lstrip(".")
        if ext not in self._supported_formats:
            return False
        if self._verify:
            return self._identify(path, ext)
        return True

    def find_image_files(
        self, directory: str | Path, recursive: bool = False
    ) -> list[Path]:
        """Image files in a directory, sorted by path."""
        directory = Path(directory)
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        candidates = directory.rglob("*") if recursive else directory.iterdir()
        image_files: list[Path] = []
        for path in candidates:
            rel_parts = path.relative_to(directory).parts
            if self._ignore_hidden and any(p.startswith(".") for p in rel_parts):
                continue
            if self.is_image_file(path):
                image_files.append(path)
        return sorted(image_files)

    def import_directory(
        self,
        user: User,
        album_name: str,
        directory: str | Path,
        recursive: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> ScanResult:
        """Add every image in a directory to one of the user's albums.

        Files already in the album count as skipped. Raises
        NotADirectoryError for a bad directory and KeyError for an unknown
        album.
        """
        if user.get_album(album_name) is None:
            raise KeyError(f"No album named '{album_name}'")

        image_files = self.find_image_files(directory, recursive)
        result = ScanResult(total_found=len(image_files))
        for i, filepath in enumerate(image_files):
            if progress_callback:
                progress_callback(i + 1, len(image_files), str(filepath))
            existing = user.find_photo(filepath)
            album = user.get_album(album_name)
            if existing is not None and album.contains_photo(existing):
                result.skipped += 1
                continue
            if user.add_photo(filepath, album_name) is None:
                result.errors += 1
                result.error_files.append(str(filepath))
                continue
            result.added += 1

        logger.info(
            f"Imported {directory} into '{album_name}': {result.added} added, "
            f"{result.skipped} skipped, {result.errors} errors"
        )
        return result

    def _identify(self, path: Path, ext: str) -> bool:
        try:
            with Image.open(path) as img:
                fmt = img.format
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Not a readable image, skipping {path}: {e}")
            return False
        expected = _PIL_FORMATS.get(ext)
        return expected is None or fmt in expected

    def _get_supported_formats(self) -> set[str]:
        if self._config:
            formats = self._config.get("file_scanning.supported_formats", [])
            if formats:
                return set(f.lower() for f in formats)
        return {"bmp", "gif", "jpeg", "jpg", "png"}
