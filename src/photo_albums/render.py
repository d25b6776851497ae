"""Rendering hook for the presentation layer.

The library never decodes image data. A user interface supplies an
ImageRenderer and photos hand it their file path.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

THUMBNAIL_SIZE = (150, 150)


@runtime_checkable
class ImageRenderer(Protocol):
    """Turns a file path into whatever image object the host toolkit uses."""

    def render_thumbnail(self, file_path: str, width: int, height: int) -> Any:
        ...

    def render_full(self, file_path: str) -> Any:
        ...


class PathRenderer:
    """Renderer that returns the file path itself.

    Useful where no image toolkit is available, such as in tests or scripts.
    """

    def render_thumbnail(self, file_path: str, width: int, height: int) -> str:
        return file_path

    def render_full(self, file_path: str) -> str:
        return file_path
