"""Per-user arena of Photo instances keyed by absolute file path."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from photo_albums.model.photo import Photo, resolve_photo_path


class PhotoRegistry:
    """Owns exactly one Photo per file path.

    Albums store only the path keys and look photos up here, so a file added
    to two albums is always the same object.
    """

    def __init__(self) -> None:
        self._photos: dict[str, Photo] = {}

    def __len__(self) -> int:
        return len(self._photos)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Photo):
            return key.file_path in self._photos
        return key in self._photos

    def __iter__(self) -> Iterator[Photo]:
        return iter(list(self._photos.values()))

    def get(self, file_path: str | Path) -> Photo | None:
        return self._photos.get(resolve_photo_path(file_path))

    def lookup(self, key: str) -> Photo:
        """Return the photo for an already-resolved key. Raises KeyError."""
        return self._photos[key]

    def get_or_create(self, file_path: str | Path) -> Photo:
        """Return the registered photo for a path, creating it from the file.

        Raises FileNotFoundError when a new photo's file is missing.
        """
        photo = self.get(file_path)
        if photo is None:
            photo = Photo.from_file(file_path)
            self._photos[photo.file_path] = photo
        return photo

    def intern(self, photo: Photo) -> Photo:
        """Register a photo, or return the instance already held for its path."""
        return self._photos.setdefault(photo.file_path, photo)

    def discard(self, file_path: str) -> None:
        self._photos.pop(file_path, None)

    def retain(self, keys: Iterable[str]) -> None:
        """Drop every photo whose path is not in keys."""
        keep = set(keys)
        for key in list(self._photos):
            if key not in keep:
                del self._photos[key]

    def clear(self) -> None:
        self._photos.clear()
