"""Album model: a named, ordered collection of photos."""

from __future__ import annotations

from datetime import datetime

from photo_albums.model.photo import Photo
from photo_albums.model.registry import PhotoRegistry


class Album:
    """A named list of photos with a derived date range.

    The album keeps file-path keys only; photos live in the registry it was
    given (the owning user's registry, or a private one for a standalone
    album). start_date/end_date are the min/max date_taken of the members,
    both None while the album is empty.
    """

    def __init__(self, name: str, registry: PhotoRegistry | None = None):
        self._name = name
        self._registry = registry if registry is not None else PhotoRegistry()
        self._keys: list[str] = []
        self._start_date: datetime | None = None
        self._end_date: datetime | None = None

    @property
    def name(self) -> str:
        return self._name

    def rename(self, new_name: str) -> None:
        """Change the name. Uniqueness is the owning user's concern."""
        self._name = new_name

    @property
    def photos(self) -> list[Photo]:
        return [self._registry.lookup(key) for key in self._keys]

    @property
    def photo_keys(self) -> list[str]:
        return list(self._keys)

    @property
    def photo_count(self) -> int:
        return len(self._keys)

    @property
    def start_date(self) -> datetime | None:
        return self._start_date

    @property
    def end_date(self) -> datetime | None:
        return self._end_date

    def get_photo(self, index: int) -> Photo | None:
        """Photo at a 0-based index, or None when out of range."""
        if 0 <= index < len(self._keys):
            return self._registry.lookup(self._keys[index])
        return None

    def contains_photo(self, photo: Photo) -> bool:
        return photo.file_path in self._keys

    def add_photo(self, photo: Photo) -> bool:
        """Append a photo. Returns False if its file is already in the album."""
        if photo.file_path in self._keys:
            return False
        self._registry.intern(photo)
        self._keys.append(photo.file_path)
        self.update_date_range()
        return True

    def remove_photo(self, photo: Photo) -> bool:
        """Remove a photo. Returns False if it was not in the album."""
        if photo.file_path not in self._keys:
            return False
        self._keys.remove(photo.file_path)
        self.update_date_range()
        return True

    def prune_missing(self) -> list[str]:
        """Drop keys the registry cannot resolve and refresh the date range.

        Returns the dropped keys.
        """
        missing = [key for key in self._keys if key not in self._registry]
        for key in missing:
            self._keys.remove(key)
        self.update_date_range()
        return missing

    def update_date_range(self) -> None:
        """Recompute start/end dates from the current members."""
        self._start_date = None
        self._end_date = None
        for photo in self.photos:
            taken = photo.date_taken
            if self._start_date is None or taken < self._start_date:
                self._start_date = taken
            if self._end_date is None or taken > self._end_date:
                self._end_date = taken

    def date_range_string(self) -> str:
        if self._start_date is None or self._end_date is None:
            return "No photos"
        if self._start_date == self._end_date:
            return self._start_date.isoformat(sep=" ")
        return (
            f"{self._start_date.isoformat(sep=' ')} to "
            f"{self._end_date.isoformat(sep=' ')}"
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Album):
            return NotImplemented
        return self._name.lower() == other._name.lower()

    def __hash__(self) -> int:
        return hash(self._name.lower())

    def __repr__(self) -> str:
        return f"Album({self._name!r}, photos={len(self._keys)})"

    def __str__(self) -> str:
        return f"{self._name} ({len(self._keys)} photos)"
