"""Login state: logged out, admin, or a specific user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from photo_albums.model.user import User


@dataclass(frozen=True)
class LoggedOut:
    """No one is logged in."""


@dataclass(frozen=True)
class AdminSession:
    """The privileged admin identity, which has no User data."""


@dataclass(frozen=True)
class UserSession:
    user: User


Session = Union[LoggedOut, AdminSession, UserSession]
