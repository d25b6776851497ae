"""Photo model: a file on disk with a caption, a capture date and tags."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from photo_albums.model.tag import Tag
from photo_albums.render import THUMBNAIL_SIZE, ImageRenderer


def resolve_photo_path(path: str | Path) -> str:
    return str(Path(path).expanduser().resolve())


def file_modified_time(path: str | Path) -> datetime:
    """Last-modified time of a file as a local datetime, whole seconds only."""
    mtime = Path(path).stat().st_mtime
    return datetime.fromtimestamp(int(mtime))


class Photo:
    """A photo identified by its absolute file path.

    Two Photo objects with the same path are equal, whichever way they were
    built. Within one user the registry makes sure only one instance exists
    per path, so caption and tag edits show up in every album.
    """

    def __init__(
        self,
        file_path: str | Path,
        date_taken: datetime,
        caption: str | None = "",
        tags: Iterable[Tag] = (),
    ):
        self._file_path = resolve_photo_path(file_path)
        self._date_taken = date_taken.replace(microsecond=0)
        self._caption = caption if caption is not None else ""
        self._tags: list[Tag] = []
        for tag in tags:
            if tag not in self._tags:
                self._tags.append(tag)

    @classmethod
    def from_file(cls, file_path: str | Path) -> Photo:
        """Create a Photo from a file, dated by its last-modified time.

        Raises FileNotFoundError if the file does not exist.
        """
        path = Path(file_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"Photo file not found: {path}")
        return cls(path, file_modified_time(path))

    @property
    def file_path(self) -> str:
        return self._file_path

    @property
    def file_name(self) -> str:
        return Path(self._file_path).name

    @property
    def date_taken(self) -> datetime:
        return self._date_taken

    @property
    def caption(self) -> str:
        return self._caption

    @caption.setter
    def caption(self, caption: str | None) -> None:
        self._caption = caption if caption is not None else ""

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    # --- Tags ---

    def add_tag(self, name: str | None, value: str | None) -> bool:
        """Add a tag. Returns False if an equal tag is already present."""
        tag = Tag(name, value)
        if tag in self._tags:
            return False
        self._tags.append(tag)
        return True

    def remove_tag(self, name: str | None, value: str | None) -> bool:
        """Remove a tag. Returns False if no equal tag was present."""
        tag = Tag(name, value)
        if tag not in self._tags:
            return False
        self._tags.remove(tag)
        return True

    def has_tag(self, name: str | None, value: str | None) -> bool:
        return Tag(name, value) in self._tags

    def get_tags_by_name(self, name: str) -> list[Tag]:
        name = name.lower()
        return [t for t in self._tags if t.name == name]

    # --- Rendering ---

    def thumbnail(
        self,
        renderer: ImageRenderer,
        size: tuple[int, int] = THUMBNAIL_SIZE,
    ) -> Any:
        return renderer.render_thumbnail(self._file_path, size[0], size[1])

    def full_image(self, renderer: ImageRenderer) -> Any:
        return renderer.render_full(self._file_path)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Photo):
            return NotImplemented
        return self._file_path == other._file_path

    def __hash__(self) -> int:
        return hash(self._file_path)

    def __repr__(self) -> str:
        return f"Photo({self._file_path!r})"

    def __str__(self) -> str:
        if self._caption:
            return f"{self.file_name} - {self._caption}"
        return self.file_name
