"""Admin model: the registry of account names."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from photo_albums.model.user import User

if TYPE_CHECKING:
    from photo_albums.store.store import UserStore

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
STOCK_USERNAME = "stock"

_FORBIDDEN_CHARS = set('/\\:*?"<>|')


def is_valid_username(username: str) -> bool:
    """Usernames double as file names, so path characters are rejected."""
    return (
        bool(username)
        and not username.startswith(".")
        and not any(ch in _FORBIDDEN_CHARS for ch in username)
    )


class Admin:
    """Keeps the list of account names.

    "stock" is always present and cannot be deleted. "admin" names the
    privileged session; it is never stored here and can never be created.
    When a store is attached, creating an account also writes an empty user
    file and deleting one removes it.
    """

    def __init__(
        self,
        usernames: Iterable[str] = (),
        store: UserStore | None = None,
    ):
        self._store = store
        self._usernames: list[str] = [STOCK_USERNAME]
        for name in usernames:
            if (
                name
                and name.lower() != ADMIN_USERNAME
                and not self.user_exists(name)
            ):
                self._usernames.append(name)

    def attach_store(self, store: UserStore) -> None:
        self._store = store

    def create_user(self, username: str | None) -> bool:
        """Register a new account and persist an empty User for it.

        False for blank, reserved, duplicate (ignoring case) or unusable
        names.
        """
        if username is None or not username.strip():
            return False
        username = username.strip()
        if self.user_exists(username):
            return False
        if username.lower() == ADMIN_USERNAME:
            return False
        if not is_valid_username(username):
            return False

        self._usernames.append(username)
        if self._store is not None:
            self._store.save_user(User(username))
        logger.info(f"Created user '{username}'")
        return True

    def adopt_user(self, username: str) -> bool:
        """Register a name whose user data already exists. Writes nothing."""
        if (
            self.user_exists(username)
            or username.lower() == ADMIN_USERNAME
            or not is_valid_username(username)
        ):
            return False
        self._usernames.append(username)
        return True

    def delete_user(self, username: str | None) -> bool:
        """Remove an account and its stored data. False if not allowed."""
        if username is None or not username.strip():
            return False
        username = username.strip()
        if username.lower() in (STOCK_USERNAME, ADMIN_USERNAME):
            return False
        existing = self._find(username)
        if existing is None:
            return False

        self._usernames.remove(existing)
        if self._store is not None:
            self._store.delete_user(existing)
        logger.info(f"Deleted user '{existing}'")
        return True

    def list_users(self) -> list[str]:
        return list(self._usernames)

    def user_exists(self, username: str | None) -> bool:
        return self._find(username) is not None

    def canonical_name(self, username: str | None) -> str | None:
        """The registered spelling of a username, or None."""
        return self._find(username)

    def _find(self, username: str | None) -> str | None:
        if username is None:
            return None
        wanted = username.strip().lower()
        for existing in self._usernames:
            if existing.lower() == wanted:
                return existing
        return None
