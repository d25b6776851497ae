"""Command-line front end for a photo library."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from photo_albums.config.config import ConfigManager, get_data_config_path
from photo_albums.model.tag import TagCriteria
from photo_albums.model.user import User
from photo_albums.scanner.scanner import ImageScanner
from photo_albums.session.manager import DataManager

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")


def setup_logging(config: ConfigManager, verbose: bool = False) -> None:
    """Setup logging configuration."""
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(config.get("logging.level", "INFO")).upper(),
                        logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.get("logging.log_to_file", False):
        handlers.append(
            logging.FileHandler(config.get("logging.log_file", "photo_albums.log"),
                                encoding="utf-8")
        )

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _parse_date(text: str) -> datetime:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(f"invalid date: {text!r}")


def _parse_end_date(text: str) -> datetime:
    """Like _parse_date, but a bare date means the end of that day."""
    when = _parse_date(text)
    try:
        datetime.strptime(text, DATE_FORMATS[0])
    except ValueError:
        return when
    return when.replace(hour=23, minute=59, second=59)


def _parse_tag(text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip() or not value.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    return name.strip(), value.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-albums",
        description="Photo Albums - manage per-user photo albums and tags",
    )
    parser.add_argument(
        "--data-dir", default=None,
        help="Library directory (default: storage.data_dir from config)",
    )
    parser.add_argument("--config", default=None, help="Config YAML file")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    users = sub.add_parser("users", help="Manage accounts (admin)")
    users_sub = users.add_subparsers(dest="action", required=True)
    users_sub.add_parser("list", help="List accounts")
    for action in ("create", "delete"):
        p = users_sub.add_parser(action, help=f"{action.capitalize()} an account")
        p.add_argument("username")

    p = sub.add_parser("albums", help="List a user's albums")
    p.add_argument("user")

    p = sub.add_parser("create-album", help="Create an album")
    p.add_argument("user")
    p.add_argument("album")

    p = sub.add_parser("delete-album", help="Delete an album")
    p.add_argument("user")
    p.add_argument("album")

    p = sub.add_parser("rename-album", help="Rename an album")
    p.add_argument("user")
    p.add_argument("album")
    p.add_argument("new_name")

    p = sub.add_parser("photos", help="List the photos in an album")
    p.add_argument("user")
    p.add_argument("album")

    p = sub.add_parser("add-photo", help="Add photo files to an album")
    p.add_argument("user")
    p.add_argument("album")
    p.add_argument("files", nargs="+")

    p = sub.add_parser("import", help="Add every image in a directory")
    p.add_argument("user")
    p.add_argument("album")
    p.add_argument("directory")
    p.add_argument("--recursive", "-r", action="store_true")

    p = sub.add_parser("tag", help="Add or remove a photo tag")
    p.add_argument("user")
    p.add_argument("file")
    p.add_argument("tag", type=_parse_tag, metavar="NAME=VALUE")
    p.add_argument("--remove", action="store_true")

    p = sub.add_parser("caption", help="Set a photo caption")
    p.add_argument("user")
    p.add_argument("file")
    p.add_argument("caption")

    p = sub.add_parser("search", help="Search photos by date range or tags")
    p.add_argument("user")
    p.add_argument("--from", dest="start", type=_parse_date)
    p.add_argument("--to", dest="end", type=_parse_end_date)
    p.add_argument(
        "--tag", dest="tags", type=_parse_tag, action="append",
        metavar="NAME=VALUE", help="Tag to match (give at most two)",
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--and", dest="conjunctive", action="store_true",
                      help="Require both tags")
    mode.add_argument("--or", dest="conjunctive", action="store_false",
                      help="Accept either tag (default)")
    p.add_argument("--save-as", metavar="ALBUM",
                   help="Create an album from the results")
    p.set_defaults(conjunctive=False)
    return parser


def _load_config(args: argparse.Namespace) -> tuple[ConfigManager, Path]:
    config = ConfigManager()
    if args.config:
        config.load_layered(cli_config_path=args.config)
    data_dir = Path(
        args.data_dir or config.get("storage.data_dir", "data")
    ).expanduser().resolve()
    config.load_layered(get_data_config_path(data_dir), args.config)
    return config, data_dir


def _find_photo_or_report(user: User, file: str):
    photo = user.find_photo(file)
    if photo is None:
        print(f"Error: '{file}' is not in any of {user.username}'s albums.")
    return photo


def _run_users(manager: DataManager, args: argparse.Namespace) -> int:
    manager.login("admin")
    if args.action == "list":
        for name in manager.admin.list_users():
            print(name)
        return 0
    if args.action == "create":
        if not manager.create_user(args.username):
            print(f"Error: cannot create user '{args.username}'.")
            return 1
        manager.save_admin()
        print(f"Created user '{args.username}'.")
        return 0
    if not manager.delete_user(args.username):
        print(f"Error: cannot delete user '{args.username}'.")
        return 1
    manager.save_admin()
    print(f"Deleted user '{args.username}'.")
    return 0


def _run_search(user: User, args: argparse.Namespace) -> int:
    if args.tags:
        if len(args.tags) > 2:
            print("Error: at most two --tag options are supported.")
            return 1
        (name, value), *rest = args.tags
        if rest:
            name2, value2 = rest[0]
            criteria = TagCriteria(name, value, name2, value2, args.conjunctive)
        else:
            criteria = TagCriteria(name, value)
        results = user.search_by_tags(criteria)
    elif args.start or args.end:
        start = args.start or datetime.min
        end = args.end or datetime.max
        results = user.search_by_date_range(start, end)
    else:
        print("Error: give --from/--to or --tag.")
        return 1

    for photo in results:
        print(f"{photo.date_taken.isoformat(sep=' ')}  {photo.file_path}")
    print(f"{len(results)} photo(s) found.")

    if args.save_as:
        if not user.create_album_from_search(args.save_as, results):
            print(f"Error: album '{args.save_as}' already exists.")
            return 1
        print(f"Created album '{args.save_as}'.")
    return 0


def _run_user_command(
    user: User, args: argparse.Namespace, config: ConfigManager
) -> int:
    command = args.command

    if command == "albums":
        for album in user.albums:
            print(f"{album}  [{album.date_range_string()}]")
        return 0

    if command == "create-album":
        if not user.create_album(args.album):
            print(f"Error: album '{args.album}' already exists.")
            return 1
        return 0

    if command == "delete-album":
        if not user.delete_album(args.album):
            print(f"Error: no album named '{args.album}'.")
            return 1
        return 0

    if command == "rename-album":
        if not user.rename_album(args.album, args.new_name):
            print(f"Error: cannot rename '{args.album}' to '{args.new_name}'.")
            return 1
        return 0

    if command == "photos":
        album = user.get_album(args.album)
        if album is None:
            print(f"Error: no album named '{args.album}'.")
            return 1
        for photo in album.photos:
            tags = ", ".join(str(t) for t in photo.tags)
            print(f"{photo.date_taken.isoformat(sep=' ')}  {photo}  {tags}")
        return 0

    if command == "add-photo":
        if user.get_album(args.album) is None:
            print(f"Error: no album named '{args.album}'.")
            return 1
        failed = 0
        for file in args.files:
            if user.add_photo(file, args.album) is None:
                print(f"Skipped '{file}' (missing or already in album).")
                failed += 1
        return 1 if failed else 0

    if command == "import":
        if user.get_album(args.album) is None:
            print(f"Error: no album named '{args.album}'.")
            return 1
        try:
            result = ImageScanner(config).import_directory(
                user, args.album, args.directory, recursive=args.recursive
            )
        except NotADirectoryError as e:
            print(f"Error: {e}")
            return 1
        print(
            f"{result.added} added, {result.skipped} skipped, "
            f"{result.errors} errors (of {result.total_found})."
        )
        return 1 if result.errors else 0

    if command == "tag":
        photo = _find_photo_or_report(user, args.file)
        if photo is None:
            return 1
        name, value = args.tag
        if args.remove:
            ok = photo.remove_tag(name, value)
        else:
            ok = user.add_photo_tag(photo, name, value)
        if not ok:
            print(f"Error: tag {name}={value} was not "
                  f"{'removed' if args.remove else 'added'}.")
            return 1
        return 0

    if command == "caption":
        photo = _find_photo_or_report(user, args.file)
        if photo is None:
            return 1
        photo.caption = args.caption
        return 0

    if command == "search":
        return _run_search(user, args)

    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config, data_dir = _load_config(args)
    setup_logging(config, args.verbose)

    with DataManager.open(data_dir, config) as manager:
        if args.command == "users":
            return _run_users(manager, args)

        if not manager.login(args.user):
            print(f"Error: unknown user '{args.user}'.")
            return 1
        user = manager.current_user
        if user is None:
            print("Error: the admin account has no albums.")
            return 1
        return _run_user_command(user, args, config)


if __name__ == "__main__":
    raise SystemExit(main())
