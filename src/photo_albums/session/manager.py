"""Library coordinator: loads users and the admin registry, tracks logins."""

from __future__ import annotations

import logging
from pathlib import Path

from photo_albums.config.config import ConfigManager, get_data_config_path
from photo_albums.model.admin import ADMIN_USERNAME, STOCK_USERNAME, Admin
from photo_albums.model.user import User
from photo_albums.scanner.scanner import ImageScanner
from photo_albums.session.session import (
    AdminSession,
    LoggedOut,
    Session,
    UserSession,
)
from photo_albums.store.store import UserStore

logger = logging.getLogger(__name__)


class DataManager:
    """Owns one photo library directory for the life of a session.

    Typical use::

        manager = DataManager.open("data")
        if manager.login("alice"):
            manager.current_user.create_album("Trip")
        manager.close()

    Nothing is written automatically on mutation; callers flush through
    save_current_user(), save_admin(), save_users() or save_data(), and
    logout()/close() save the logged-in user.
    """

    def __init__(
        self, data_dir: str | Path, config: ConfigManager | None = None
    ):
        self._data_dir = Path(data_dir)
        if config is None:
            config = ConfigManager(get_data_config_path(self._data_dir))
        self._config = config
        self._store = UserStore(self._data_dir, config)
        self._admin: Admin | None = None
        self._users: list[User] = []
        self._session: Session = LoggedOut()

    @classmethod
    def open(
        cls, data_dir: str | Path, config: ConfigManager | None = None
    ) -> DataManager:
        """Create a manager for data_dir and load everything in it."""
        manager = cls(data_dir, config)
        manager.load()
        return manager

    def load(self) -> None:
        """Load the admin registry and every stored user.

        A library without an admin file is initialised: a fresh registry is
        saved and the stock user is created with its album.
        """
        self._store.ensure_directories()
        self._users = []
        self._session = LoggedOut()

        admin = self._store.load_admin()
        if admin is None:
            fresh = not self._store.admin_path.exists()
            admin = Admin(store=self._store)
            if fresh:
                logger.info(f"Initialising new photo library in {self._data_dir}")
                self._store.save_admin(admin)
            else:
                logger.warning("Admin data unreadable; starting from defaults")
        self._admin = admin

        self._load_all_users()
        logger.info(
            f"Loaded {len(self._users)} users from {self._data_dir}"
        )

    def close(self) -> None:
        """Save the logged-in user and the admin registry, then detach."""
        if self._admin is None:
            return
        self.logout()
        self.save_admin()
        self._admin = None
        self._users = []

    def __enter__(self) -> DataManager:
        if self._admin is None:
            self.load()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._admin is not None

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def config(self) -> ConfigManager:
        return self._config

    @property
    def store(self) -> UserStore:
        return self._store

    @property
    def admin(self) -> Admin:
        self._ensure_open()
        return self._admin

    # --- Session ---

    @property
    def session(self) -> Session:
        return self._session

    @property
    def current_user(self) -> User | None:
        """The logged-in User, or None when logged out or in as admin."""
        if isinstance(self._session, UserSession):
            return self._session.user
        return None

    def is_admin_logged_in(self) -> bool:
        return isinstance(self._session, AdminSession)

    def is_logged_in(self) -> bool:
        return not isinstance(self._session, LoggedOut)

    def login(self, username: str | None) -> bool:
        """Start a session. False, with the session unchanged, if unknown.

        "admin" (any case) always succeeds and starts the admin session.
        Other names must be registered accounts; their User is taken from
        memory, loaded from disk, or created empty on first login.
        """
        self._ensure_open()
        if username is None or not username.strip():
            return False
        username = username.strip()

        if username.lower() == ADMIN_USERNAME:
            self._end_session()
            self._session = AdminSession()
            logger.info("Admin logged in")
            return True

        canonical = self._admin.canonical_name(username)
        if canonical is None:
            logger.info(f"Login refused for unknown user '{username}'")
            return False

        user = self.get_user(canonical)
        if user is None:
            user = self._store.load_user(canonical)
            if user is None:
                user = User(canonical)
                self._store.save_user(user)
            self._users.append(user)

        self._end_session()
        self._session = UserSession(user)
        logger.info(f"User '{canonical}' logged in")
        return True

    def logout(self) -> None:
        """Save the current user, if any, and end the session."""
        self._end_session()
        self._session = LoggedOut()

    # --- Users ---

    @property
    def users(self) -> list[User]:
        return list(self._users)

    def get_user(self, username: str) -> User | None:
        wanted = username.lower()
        for user in self._users:
            if user.username.lower() == wanted:
                return user
        return None

    def add_user(self, user: User) -> bool:
        """Track and save a User built elsewhere. False if the name is taken."""
        self._ensure_open()
        if self.get_user(user.username) is not None:
            return False
        if not self._admin.user_exists(user.username):
            if not self._admin.adopt_user(user.username):
                return False
        self._users.append(user)
        self._store.save_user(user)
        return True

    def create_user(self, username: str | None) -> bool:
        """Register an account through the admin and track its new User."""
        self._ensure_open()
        if not self._admin.create_user(username):
            return False
        canonical = self._admin.canonical_name(username)
        user = self._store.load_user(canonical) or User(canonical)
        self._users.append(user)
        return True

    def delete_user(self, username: str | None) -> bool:
        """Delete an account, its in-memory User and its file.

        Refuses "admin" and "stock". Deleting the logged-in user ends the
        session without saving it.
        """
        self._ensure_open()
        if username is None or username.strip().lower() == ADMIN_USERNAME:
            return False
        user = self.get_user(username.strip())
        if not self._admin.delete_user(username):
            return False
        if user is not None:
            self._users.remove(user)
            if self.current_user is user:
                self._session = LoggedOut()
        return True

    # --- Persistence ---

    def save_current_user(self) -> bool:
        user = self.current_user
        if user is None:
            return False
        return self._store.save_user(user)

    def save_admin(self) -> bool:
        self._ensure_open()
        return self._store.save_admin(self._admin)

    def save_users(self) -> bool:
        """Save every loaded user except the admin placeholder."""
        ok = True
        for user in self._users:
            if user.username.lower() == ADMIN_USERNAME:
                continue
            ok = self._store.save_user(user) and ok
        return ok

    def save_data(self) -> bool:
        users_ok = self.save_users()
        admin_ok = self.save_admin()
        return users_ok and admin_ok

    # --- Private helpers ---

    def _ensure_open(self) -> None:
        if self._admin is None:
            raise RuntimeError("Photo library is not open")

    def _end_session(self) -> None:
        user = self.current_user
        if user is not None:
            self._store.save_user(user)
            logger.info(f"User '{user.username}' logged out")

    def _load_all_users(self) -> None:
        """Load stored users, reconciling files with the admin registry."""
        for stored_name in self._store.list_usernames():
            if stored_name.lower() == ADMIN_USERNAME:
                continue
            user = self._store.load_user(stored_name)
            if user is None:
                continue
            if not self._admin.user_exists(user.username):
                if not self._admin.adopt_user(user.username):
                    logger.warning(
                        f"Ignoring stored data for invalid user '{user.username}'"
                    )
                    continue
                logger.warning(
                    f"User file for '{user.username}' had no admin entry; "
                    f"registered it"
                )
            if user.username.lower() == STOCK_USERNAME:
                self._ensure_stock_user(user)
            self._users.append(user)

        if self.get_user(STOCK_USERNAME) is None:
            self._initialize_stock_user()

        # The admin identity has no stored data, only this placeholder.
        if self.get_user(ADMIN_USERNAME) is None:
            self._users.append(User(ADMIN_USERNAME))

    def _initialize_stock_user(self) -> None:
        stock = User(STOCK_USERNAME)
        self._ensure_stock_user(stock)
        if self.get_user(STOCK_USERNAME) is None:
            self._users.append(stock)

    def _ensure_stock_user(self, stock: User) -> None:
        """Give the stock user its album and the configured stock photos."""
        album_name = self._stock_album_name()
        if stock.get_album(album_name) is None and not stock.create_album(album_name):
            logger.warning(f"Cannot create stock album '{album_name}'")
            self._store.save_user(stock)
            return

        photos_dir = self._config.get("stock.photos_dir")
        if photos_dir:
            photos_dir = Path(photos_dir)
            if not photos_dir.is_absolute():
                photos_dir = self._data_dir / photos_dir
            if photos_dir.is_dir():
                scanner = ImageScanner(self._config)
                scanner.import_directory(stock, album_name, photos_dir)
            else:
                logger.warning(f"Stock photo directory not found: {photos_dir}")
        self._store.save_user(stock)

    def _stock_album_name(self) -> str:
        value = self._config.get("stock.album_name", STOCK_USERNAME)
        name = str(value).strip() if value is not None else ""
        if not name:
            logger.warning(
                f"Blank stock.album_name in config; using '{STOCK_USERNAME}'"
            )
            return STOCK_USERNAME
        if not isinstance(value, str):
            logger.warning(f"stock.album_name {value!r} is not a string; using '{name}'")
        return name
