"""Conversion between model objects and plain dicts for YAML storage.

A photo that belongs to several albums is emitted as one shared dict, so
yaml.safe_dump writes it once with an anchor and later albums refer to it by
alias. Loading turns each distinct file path back into a single Photo.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from photo_albums.model.admin import ADMIN_USERNAME, Admin
from photo_albums.model.photo import Photo
from photo_albums.model.tag import Tag
from photo_albums.model.user import User

FORMAT_VERSION = 1


class FormatError(ValueError):
    """Stored data does not have the expected shape."""


def tag_to_dict(tag: Tag) -> dict[str, str]:
    return {"name": tag.name, "value": tag.value}


def tag_from_dict(data: dict[str, Any]) -> Tag:
    return Tag(data["name"], data.get("value", ""))


def photo_to_dict(photo: Photo) -> dict[str, Any]:
    return {
        "file_path": photo.file_path,
        "caption": photo.caption,
        "date_taken": photo.date_taken.isoformat(),
        "tags": [tag_to_dict(t) for t in photo.tags],
    }


def photo_from_dict(data: dict[str, Any]) -> Photo:
    taken = data["date_taken"]
    if not isinstance(taken, datetime):
        taken = datetime.fromisoformat(str(taken))
    return Photo(
        data["file_path"],
        taken,
        caption=data.get("caption", ""),
        tags=[tag_from_dict(t) for t in data.get("tags") or []],
    )


def user_to_dict(user: User) -> dict[str, Any]:
    records: dict[str, dict[str, Any]] = {}

    def record(photo: Photo) -> dict[str, Any]:
        if photo.file_path not in records:
            records[photo.file_path] = photo_to_dict(photo)
        return records[photo.file_path]

    return {
        "format_version": FORMAT_VERSION,
        "username": user.username,
        "albums": [
            {"name": album.name, "photos": [record(p) for p in album.photos]}
            for album in user.albums
        ],
        "tag_types": user.tag_types,
        "tags": [tag_to_dict(t) for t in user.tags],
    }


def user_from_dict(data: Any) -> User:
    """Build a rehydrated User from stored data. Raises FormatError."""
    _check_version(data)
    try:
        user = User(data["username"])
        photos: dict[str, Photo] = {}
        albums: list[tuple[str, list[Photo]]] = []
        for album_data in data.get("albums") or []:
            members: list[Photo] = []
            for photo_data in album_data.get("photos") or []:
                photo = photo_from_dict(photo_data)
                # The first record seen for a path wins.
                photo = photos.setdefault(photo.file_path, photo)
                members.append(photo)
            albums.append((album_data["name"], members))
        tags = [tag_from_dict(t) for t in data.get("tags") or []]
        user.restore(albums, data.get("tag_types"), tags)
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise FormatError(f"Malformed user record: {e}") from e
    return user


def admin_to_dict(admin: Admin) -> dict[str, Any]:
    return {
        "format_version": FORMAT_VERSION,
        "usernames": [
            name for name in admin.list_users()
            if name.lower() != ADMIN_USERNAME
        ],
    }


def admin_from_dict(data: Any) -> Admin:
    """Build an Admin from stored data. Raises FormatError."""
    _check_version(data)
    usernames = data.get("usernames") or []
    if not isinstance(usernames, list):
        raise FormatError("Malformed admin record: usernames is not a list")
    return Admin(str(name) for name in usernames)


def _check_version(data: Any) -> None:
    if not isinstance(data, dict):
        raise FormatError("Stored record is not a mapping")
    version = data.get("format_version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise FormatError(f"Unsupported format version: {version}")
