"""Shared fixtures: photo files on disk with controlled modification times."""

import os
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image


def set_mtime(path: Path, when: datetime) -> None:
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def photo_dir(tmp_path):
    path = tmp_path / "photos"
    path.mkdir()
    return path


@pytest.fixture
def make_photo_file(photo_dir):
    """Factory: write a small file and date it via its mtime."""

    def _make(name, taken=datetime(2020, 6, 15, 12, 0, 0), content=b"not really a jpeg"):
        path = photo_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        set_mtime(path, taken)
        return path

    return _make


@pytest.fixture
def make_image_file(photo_dir):
    """Factory: write a real image with Pillow."""

    def _make(name, fmt="PNG", taken=datetime(2020, 6, 15, 12, 0, 0)):
        path = photo_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (8, 8), color=(200, 30, 30)).save(path, format=fmt)
        set_mtime(path, taken)
        return path

    return _make
