"""File-per-user YAML store for user libraries and the admin registry."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from photo_albums.config.config import ConfigManager
from photo_albums.model.admin import Admin
from photo_albums.model.user import User
from photo_albums.store.serializer import (
    FormatError,
    admin_from_dict,
    admin_to_dict,
    user_from_dict,
    user_to_dict,
)

logger = logging.getLogger(__name__)


class UserStore:
    """Reads and writes <data_dir>/<admin_file> and <data_dir>/<users_dir>/*.

    I/O and format problems are logged and reported as None (loads) or
    False (saves and deletes); they never propagate.
    """

    def __init__(
        self, data_dir: str | Path, config: ConfigManager | None = None
    ):
        config = config or ConfigManager()
        self._data_dir = Path(data_dir)
        self._users_dir = self._data_dir / config.get("storage.users_dir", "users")
        self._admin_path = self._data_dir / config.get(
            "storage.admin_file", "admin.yaml"
        )
        self._suffix = config.get("storage.user_file_suffix", ".yaml")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def users_dir(self) -> Path:
        return self._users_dir

    @property
    def admin_path(self) -> Path:
        return self._admin_path

    def ensure_directories(self) -> None:
        """Create the data and users directories if missing."""
        self._users_dir.mkdir(parents=True, exist_ok=True)

    # --- Admin ---

    def load_admin(self) -> Admin | None:
        """Load the admin registry. None if missing or unreadable."""
        if not self._admin_path.exists():
            return None
        data = self._read(self._admin_path)
        if data is None:
            return None
        try:
            admin = admin_from_dict(data)
        except FormatError as e:
            logger.error(f"Error loading admin data from {self._admin_path}: {e}")
            return None
        admin.attach_store(self)
        return admin

    def save_admin(self, admin: Admin) -> bool:
        return self._write(self._admin_path, admin_to_dict(admin))

    # --- Users ---

    def user_path(self, username: str) -> Path:
        return self._users_dir / f"{username}{self._suffix}"

    def list_usernames(self) -> list[str]:
        """Usernames that have a stored file."""
        if not self._users_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(self._suffix)]
            for p in self._users_dir.iterdir()
            if p.is_file() and p.name.endswith(self._suffix)
        )

    def has_user(self, username: str) -> bool:
        return self._find_user_file(username) is not None

    def load_user(self, username: str) -> User | None:
        """Load and rehydrate a user. None if missing or unreadable."""
        path = self._find_user_file(username)
        if path is None:
            return None
        data = self._read(path)
        if data is None:
            return None
        try:
            user = user_from_dict(data)
        except FormatError as e:
            logger.error(f"Error loading user data from {path}: {e}")
            return None
        logger.debug(
            f"Loaded user '{user.username}' "
            f"({len(user.albums)} albums, {len(user.get_all_photos())} photos)"
        )
        return user

    def save_user(self, user: User) -> bool:
        return self._write(self.user_path(user.username), user_to_dict(user))

    def delete_user(self, username: str) -> bool:
        """Delete a user's file. False if it did not exist or could not go."""
        path = self._find_user_file(username)
        if path is None:
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Error deleting user data {path}: {e}")
            return False
        return True

    # --- Private helpers ---

    def _find_user_file(self, username: str) -> Path | None:
        path = self.user_path(username)
        if path.is_file():
            return path
        wanted = username.lower()
        for name in self.list_usernames():
            if name.lower() == wanted:
                return self.user_path(name)
        return None

    def _read(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error reading {path}: {e}")
            return None

    def _write(self, path: Path, data: dict[str, Any]) -> bool:
        """Write YAML to a temp file beside path, then swap it in."""
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    data, f, default_flow_style=False, sort_keys=False,
                    allow_unicode=True,
                )
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error saving {path}: {e}")
            return False
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        return True
