"""Tests for Tag and TagCriteria."""

from datetime import datetime

from photo_albums.model.photo import Photo
from photo_albums.model.tag import SearchType, Tag, TagCriteria


def _photo(tmp_path, name, *tags):
    photo = Photo(tmp_path / name, datetime(2021, 1, 1))
    for tag_name, value in tags:
        photo.add_tag(tag_name, value)
    return photo


class TestTag:
    def test_name_is_lowercased(self):
        tag = Tag("Location", "Paris")
        assert tag.name == "location"
        assert tag.value == "Paris"

    def test_equality_ignores_case(self):
        assert Tag("Person", "ANN") == Tag("person", "ann")
        assert hash(Tag("Person", "ANN")) == hash(Tag("person", "ann"))

    def test_different_values_not_equal(self):
        assert Tag("person", "ann") != Tag("person", "bob")
        assert Tag("person", "ann") != Tag("location", "ann")

    def test_none_becomes_empty(self):
        tag = Tag(None, None)
        assert tag.name == ""
        assert tag.value == ""

    def test_value_setter(self):
        tag = Tag("event", "party")
        tag.value = "Wedding"
        assert tag.value == "Wedding"
        tag.value = None
        assert tag.value == ""

    def test_matches(self):
        tag = Tag("location", "Paris")
        assert tag.matches("LOCATION", "paris")
        assert not tag.matches("location", "rome")

    def test_not_equal_to_other_types(self):
        assert Tag("a", "b") != ("a", "b")

    def test_str(self):
        assert str(Tag("Location", "Paris")) == "location: Paris"

    def test_usable_in_sets(self):
        tags = {Tag("person", "Ann"), Tag("PERSON", "ann"), Tag("person", "bob")}
        assert len(tags) == 2


class TestTagCriteria:
    def test_single_tag(self, tmp_path):
        criteria = TagCriteria("location", "paris")
        assert criteria.search_type is SearchType.SINGLE_TAG
        assert criteria.tag2 is None
        assert criteria.matches(_photo(tmp_path, "a.jpg", ("location", "Paris")))
        assert not criteria.matches(_photo(tmp_path, "b.jpg", ("location", "rome")))

    def test_conjunctive(self, tmp_path):
        criteria = TagCriteria("person", "ann", "person", "bob", conjunctive=True)
        assert criteria.search_type is SearchType.CONJUNCTIVE
        both = _photo(tmp_path, "a.jpg", ("person", "ann"), ("person", "bob"))
        one = _photo(tmp_path, "b.jpg", ("person", "ann"))
        assert criteria.matches(both)
        assert not criteria.matches(one)

    def test_disjunctive(self, tmp_path):
        criteria = TagCriteria("person", "ann", "location", "paris")
        assert criteria.search_type is SearchType.DISJUNCTIVE
        assert criteria.matches(_photo(tmp_path, "a.jpg", ("person", "ann")))
        assert criteria.matches(_photo(tmp_path, "b.jpg", ("location", "PARIS")))
        assert not criteria.matches(_photo(tmp_path, "c.jpg", ("person", "bob")))

    def test_untagged_photo_never_matches(self, tmp_path):
        photo = _photo(tmp_path, "a.jpg")
        assert not TagCriteria("person", "ann").matches(photo)
        assert not TagCriteria("person", "ann", "person", "bob").matches(photo)

    def test_from_tags(self):
        single = TagCriteria.from_tags(Tag("event", "party"))
        assert single.search_type is SearchType.SINGLE_TAG
        assert single.tag1 == Tag("event", "party")

        pair = TagCriteria.from_tags(
            Tag("event", "party"), Tag("person", "ann"), conjunctive=True
        )
        assert pair.search_type is SearchType.CONJUNCTIVE
        assert pair.tag2 == Tag("person", "ann")

    def test_repr(self):
        assert "AND" in repr(TagCriteria("a", "1", "b", "2", conjunctive=True))
        assert "OR" in repr(TagCriteria("a", "1", "b", "2"))
