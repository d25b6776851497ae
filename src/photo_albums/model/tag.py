"""Tags and tag-based search criteria."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photo_albums.model.photo import Photo


class Tag:
    """A name/value pair attached to a photo or a user.

    The name is stored lower-cased. Equality ignores case on both fields,
    although the value keeps the casing it was given.
    """

    __slots__ = ("_name", "_value")

    def __init__(self, name: str | None, value: str | None):
        self._name = name.lower() if name is not None else ""
        self._value = value if value is not None else ""

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str | None) -> None:
        self._value = value if value is not None else ""

    def matches(self, name: str | None, value: str | None) -> bool:
        """Return True if this tag equals Tag(name, value)."""
        return self == Tag(name, value)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Tag):
            return NotImplemented
        return (
            self._name.lower() == other._name.lower()
            and self._value.lower() == other._value.lower()
        )

    def __hash__(self) -> int:
        return hash((self._name.lower(), self._value.lower()))

    def __repr__(self) -> str:
        return f"Tag({self._name!r}, {self._value!r})"

    def __str__(self) -> str:
        return f"{self._name}: {self._value}"


class SearchType(Enum):
    SINGLE_TAG = auto()   # tag1 present
    CONJUNCTIVE = auto()  # tag1 AND tag2
    DISJUNCTIVE = auto()  # tag1 OR tag2


class TagCriteria:
    """Predicate over a photo's tags: one tag, or two tags joined by AND/OR.

    TagCriteria("location", "paris") matches photos tagged location=paris.
    TagCriteria("person", "ann", "person", "bob", conjunctive=True) requires
    both tags; with conjunctive=False either one is enough.
    """

    def __init__(
        self,
        name: str | None,
        value: str | None,
        name2: str | None = None,
        value2: str | None = None,
        conjunctive: bool = False,
    ):
        self._tag1 = Tag(name, value)
        if name2 is None and value2 is None:
            self._tag2: Tag | None = None
            self._search_type = SearchType.SINGLE_TAG
        else:
            self._tag2 = Tag(name2, value2)
            self._search_type = (
                SearchType.CONJUNCTIVE if conjunctive else SearchType.DISJUNCTIVE
            )

    @classmethod
    def from_tags(
        cls, tag1: Tag, tag2: Tag | None = None, conjunctive: bool = False
    ) -> TagCriteria:
        """Build criteria from existing Tag objects."""
        if tag2 is None:
            return cls(tag1.name, tag1.value)
        return cls(tag1.name, tag1.value, tag2.name, tag2.value, conjunctive)

    @property
    def search_type(self) -> SearchType:
        return self._search_type

    @property
    def tag1(self) -> Tag:
        return self._tag1

    @property
    def tag2(self) -> Tag | None:
        return self._tag2

    def matches(self, photo: Photo) -> bool:
        """Return True if the photo's tags satisfy this criteria."""
        photo_tags = photo.tags
        if self._search_type is SearchType.SINGLE_TAG:
            return self._tag1 in photo_tags
        if self._search_type is SearchType.CONJUNCTIVE:
            return self._tag1 in photo_tags and self._tag2 in photo_tags
        return self._tag1 in photo_tags or self._tag2 in photo_tags

    def __repr__(self) -> str:
        if self._tag2 is None:
            return f"TagCriteria({self._tag1})"
        joiner = "AND" if self._search_type is SearchType.CONJUNCTIVE else "OR"
        return f"TagCriteria({self._tag1} {joiner} {self._tag2})"
