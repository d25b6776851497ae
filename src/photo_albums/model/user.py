"""User model: albums, the photo registry, user-level tags and tag types."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable

from photo_albums.model.album import Album
from photo_albums.model.photo import Photo
from photo_albums.model.registry import PhotoRegistry
from photo_albums.model.tag import Tag, TagCriteria

logger = logging.getLogger(__name__)

SINGLE = "single"
MULTIPLE = "multiple"

# Tag types every user starts with: name -> cardinality
DEFAULT_TAG_TYPES: dict[str, str] = {
    "location": SINGLE,
    "person": MULTIPLE,
    "event": SINGLE,
}


class User:
    """A user's photo library.

    Every Photo reachable from the user's albums is held once in the
    registry; albums refer to photos by file path. The registry is derived
    data: after loading a user from disk, call rehydrate() to rebuild it.
    """

    def __init__(self, username: str):
        self._username = username
        self._registry = PhotoRegistry()
        self._albums: list[Album] = []
        self._tag_types: dict[str, str] = dict(DEFAULT_TAG_TYPES)
        self._tags: list[Tag] = []

    @property
    def username(self) -> str:
        return self._username

    @property
    def registry(self) -> PhotoRegistry:
        return self._registry

    # --- Albums ---

    @property
    def albums(self) -> list[Album]:
        return list(self._albums)

    def get_album(self, name: str | None) -> Album | None:
        """Find an album by name, ignoring case."""
        if name is None:
            return None
        wanted = name.lower()
        for album in self._albums:
            if album.name.lower() == wanted:
                return album
        return None

    def create_album(self, name: str | None) -> bool:
        """Create an empty album. False if the name is blank or taken."""
        if name is None or not name.strip():
            return False
        if self.get_album(name) is not None:
            return False
        self._albums.append(Album(name, self._registry))
        return True

    def delete_album(self, name: str) -> bool:
        album = self.get_album(name)
        if album is None:
            return False
        self._albums.remove(album)
        self._release_unreferenced()
        return True

    def rename_album(self, old_name: str, new_name: str | None) -> bool:
        """Rename an album. False if old is missing or new collides."""
        if new_name is None or not new_name.strip():
            return False
        album = self.get_album(old_name)
        if album is None:
            return False
        existing = self.get_album(new_name)
        if existing is not None and existing is not album:
            return False
        album.rename(new_name)
        return True

    # --- Photos ---

    def add_photo(self, file_path: str | Path, album_name: str) -> Photo | None:
        """Add a file to an album, reusing the user's Photo for that path.

        Returns the Photo, or None if the album does not exist, the file is
        missing, or the photo is already in that album.
        """
        album = self.get_album(album_name)
        if album is None:
            return None
        try:
            photo = self._registry.get_or_create(file_path)
        except OSError as e:
            logger.warning(f"Cannot add {file_path} to '{album_name}': {e}")
            return None
        if album.add_photo(photo):
            return photo
        return None

    def remove_photo_from_album(self, photo: Photo, album_name: str) -> bool:
        """Remove a photo from one album.

        Once no album holds the photo it leaves the registry, and its caption
        and tags are discarded; adding the file again starts a fresh Photo.
        """
        album = self.get_album(album_name)
        if album is None:
            return False
        removed = album.remove_photo(photo)
        if removed:
            self._release_unreferenced()
        return removed

    def copy_photo(self, photo: Photo, from_album: str, to_album: str) -> bool:
        """Put a photo from one album into another as well.

        Fails if either album is missing, the photo is not in the source, or
        it is already in the destination.
        """
        source = self.get_album(from_album)
        dest = self.get_album(to_album)
        if source is None or dest is None:
            return False
        if not source.contains_photo(photo):
            return False
        return dest.add_photo(photo)

    def move_photo(self, photo: Photo, from_album: str, to_album: str) -> bool:
        if self.copy_photo(photo, from_album, to_album):
            return self.remove_photo_from_album(photo, from_album)
        return False

    def get_all_photos(self) -> list[Photo]:
        """Every distinct photo across all albums, in first-added order."""
        return list(self._registry)

    def find_photo(self, file_path: str | Path) -> Photo | None:
        return self._registry.get(file_path)

    def add_photo_tag(self, photo: Photo, name: str, value: str) -> bool:
        """Tag a photo, honouring single-valued tag types.

        A single-valued tag name accepts a new value only once the photo has
        no value for it yet.
        """
        if not name or not value:
            return False
        if self.is_single_valued(name) and photo.get_tags_by_name(name):
            return False
        return photo.add_tag(name, value)

    # --- Search ---

    def search_by_date_range(
        self, start: datetime, end: datetime
    ) -> list[Photo]:
        """Photos taken between start and end, both ends included."""
        return [
            p for p in self.get_all_photos()
            if start <= p.date_taken <= end
        ]

    def search_by_tags(self, criteria: TagCriteria) -> list[Photo]:
        return [p for p in self.get_all_photos() if criteria.matches(p)]

    def create_album_from_search(
        self, name: str, photos: Iterable[Photo]
    ) -> bool:
        """Create an album holding the given photos.

        False if the name is taken. Photos already in the new album are
        skipped silently. A photo this user does not hold yet is copied, so
        it is never shared with another user's library.
        """
        if not self.create_album(name):
            return False
        album = self.get_album(name)
        for photo in photos:
            if photo not in self._registry:
                photo = Photo(
                    photo.file_path,
                    photo.date_taken,
                    photo.caption,
                    [Tag(t.name, t.value) for t in photo.tags],
                )
            album.add_photo(photo)
        return True

    # --- Tag types ---

    @property
    def tag_types(self) -> dict[str, str]:
        return dict(self._tag_types)

    def add_tag_type(self, name: str | None, single_valued: bool) -> bool:
        if name is None or not name.strip():
            return False
        key = name.lower()
        if key in self._tag_types:
            return False
        self._tag_types[key] = SINGLE if single_valued else MULTIPLE
        return True

    def is_single_valued(self, name: str) -> bool:
        return self._tag_types.get(name.lower()) == SINGLE

    # --- User-level tags ---

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def add_tag(self, tag: Tag | None) -> bool:
        if tag is None or tag in self._tags:
            return False
        self._tags.append(tag)
        return True

    def remove_tag(self, tag: Tag | None) -> bool:
        if tag is None or tag not in self._tags:
            return False
        self._tags.remove(tag)
        return True

    def get_tags_by_name(self, name: str | None) -> list[Tag]:
        if name is None:
            return []
        name = name.lower()
        return [t for t in self._tags if t.name == name]

    def clear_tags(self) -> None:
        self._tags.clear()

    # --- Loading ---

    def restore(
        self,
        albums: list[tuple[str, list[Photo]]],
        tag_types: dict[str, str] | None,
        tags: Iterable[Tag],
    ) -> None:
        """Replace the user's state with deserialized data, then rehydrate."""
        self._registry.clear()
        self._albums = []
        for name, photos in albums:
            album = Album(name, self._registry)
            for photo in photos:
                album.add_photo(photo)
            self._albums.append(album)
        self._tag_types = {
            k.lower(): v for k, v in (tag_types or {}).items()
        }
        self._tags = []
        for tag in tags:
            self.add_tag(tag)
        self.rehydrate()

    def rehydrate(self) -> None:
        """Rebuild derived state after deserialization.

        Re-indexes the registry from the albums' photo keys, dropping
        entries no album refers to and album keys with no photo behind them,
        recomputes album date ranges, and reseeds default tag types when
        none are defined.
        """
        referenced: list[str] = []
        for album in self._albums:
            for key in album.prune_missing():
                logger.warning(
                    f"User '{self._username}': album '{album.name}' "
                    f"refers to unknown photo {key}; dropped"
                )
            referenced.extend(album.photo_keys)
        self._registry.retain(referenced)
        if not self._tag_types:
            self._tag_types = dict(DEFAULT_TAG_TYPES)

    def _release_unreferenced(self) -> None:
        keys = [key for album in self._albums for key in album.photo_keys]
        self._registry.retain(keys)

    def __repr__(self) -> str:
        return f"User({self._username!r}, albums={len(self._albums)})"

    def __str__(self) -> str:
        return self._username
