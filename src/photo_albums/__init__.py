"""
Photo Albums - per-user photo library

Users create albums, add photos, tag them and search by date range or tag
combinations. An admin account manages the user list. Each user's library is
kept in its own YAML file.
"""

__version__ = "0.1.0"

from .model.tag import Tag, TagCriteria, SearchType
from .model.photo import Photo
from .model.album import Album
from .model.user import User
from .model.admin import Admin
from .session.manager import DataManager

__all__ = [
    'Tag',
    'TagCriteria',
    'SearchType',
    'Photo',
    'Album',
    'User',
    'Admin',
    'DataManager',
]
