"""Tests for Photo, Album, PhotoRegistry and the renderer hook."""

from datetime import datetime

import pytest

from photo_albums.model.album import Album
from photo_albums.model.photo import Photo, file_modified_time
from photo_albums.model.registry import PhotoRegistry
from photo_albums.model.tag import Tag
from photo_albums.render import THUMBNAIL_SIZE, ImageRenderer, PathRenderer


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render_thumbnail(self, file_path, width, height):
        self.calls.append(("thumb", file_path, width, height))
        return f"thumb:{file_path}"

    def render_full(self, file_path):
        self.calls.append(("full", file_path))
        return f"full:{file_path}"


class TestPhoto:
    def test_from_file_uses_mtime(self, make_photo_file):
        path = make_photo_file("beach.jpg", taken=datetime(2019, 7, 4, 15, 30, 24))
        photo = Photo.from_file(path)
        assert photo.file_path == str(path.resolve())
        assert photo.file_name == "beach.jpg"
        assert photo.date_taken == datetime(2019, 7, 4, 15, 30, 24)
        assert photo.caption == ""
        assert photo.tags == []

    def test_from_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Photo.from_file(tmp_path / "nope.jpg")

    def test_date_has_no_microseconds(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1, 10, 0, 0, 123456))
        assert photo.date_taken == datetime(2020, 1, 1, 10, 0, 0)

    def test_file_modified_time_whole_seconds(self, make_photo_file):
        path = make_photo_file("a.jpg", taken=datetime(2018, 3, 2, 8, 9, 10))
        assert file_modified_time(path) == datetime(2018, 3, 2, 8, 9, 10)

    def test_caption(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1), caption=None)
        assert photo.caption == ""
        photo.caption = "Sunset"
        assert photo.caption == "Sunset"
        assert str(photo) == "a.jpg - Sunset"
        photo.caption = None
        assert str(photo) == "a.jpg"

    def test_add_and_remove_tag(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        assert photo.add_tag("Person", "Ann")
        assert not photo.add_tag("person", "ann")
        assert photo.has_tag("PERSON", "ANN")
        assert photo.remove_tag("person", "ANN")
        assert not photo.remove_tag("person", "ann")
        assert photo.tags == []

    def test_get_tags_by_name(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        photo.add_tag("person", "ann")
        photo.add_tag("person", "bob")
        photo.add_tag("location", "paris")
        assert photo.get_tags_by_name("Person") == [
            Tag("person", "ann"), Tag("person", "bob"),
        ]

    def test_tags_returns_copy(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        photo.tags.append(Tag("x", "y"))
        assert photo.tags == []

    def test_constructor_dedupes_tags(self, tmp_path):
        photo = Photo(
            tmp_path / "a.jpg", datetime(2020, 1, 1),
            tags=[Tag("a", "1"), Tag("A", "1"), Tag("b", "2")],
        )
        assert len(photo.tags) == 2

    def test_equality_by_path(self, tmp_path):
        a = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1), caption="one")
        b = Photo(str(tmp_path / "sub" / ".." / "a.jpg"), datetime(2021, 1, 1))
        assert a == b
        assert hash(a) == hash(b)
        assert a != Photo(tmp_path / "b.jpg", datetime(2020, 1, 1))

    def test_thumbnail_and_full_image(self, tmp_path):
        renderer = RecordingRenderer()
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        assert photo.thumbnail(renderer) == f"thumb:{photo.file_path}"
        assert photo.thumbnail(renderer, (64, 48)) == f"thumb:{photo.file_path}"
        assert photo.full_image(renderer) == f"full:{photo.file_path}"
        assert renderer.calls == [
            ("thumb", photo.file_path, *THUMBNAIL_SIZE),
            ("thumb", photo.file_path, 64, 48),
            ("full", photo.file_path),
        ]


class TestRenderer:
    def test_protocol_check(self):
        assert isinstance(RecordingRenderer(), ImageRenderer)
        assert isinstance(PathRenderer(), ImageRenderer)
        assert not isinstance(object(), ImageRenderer)

    def test_path_renderer(self, tmp_path):
        photo = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        renderer = PathRenderer()
        assert photo.thumbnail(renderer) == photo.file_path
        assert photo.full_image(renderer) == photo.file_path


class TestPhotoRegistry:
    def test_get_or_create_reuses_instance(self, make_photo_file):
        path = make_photo_file("a.jpg")
        registry = PhotoRegistry()
        first = registry.get_or_create(path)
        assert registry.get_or_create(str(path)) is first
        assert len(registry) == 1
        assert first in registry
        assert first.file_path in registry

    def test_get_or_create_missing_file(self, tmp_path):
        registry = PhotoRegistry()
        with pytest.raises(FileNotFoundError):
            registry.get_or_create(tmp_path / "missing.jpg")
        assert len(registry) == 0

    def test_intern_keeps_first(self, tmp_path):
        registry = PhotoRegistry()
        a = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        a2 = Photo(tmp_path / "a.jpg", datetime(2020, 1, 1))
        assert registry.intern(a) is a
        assert registry.intern(a2) is a

    def test_lookup_unknown_raises(self):
        with pytest.raises(KeyError):
            PhotoRegistry().lookup("/nowhere.jpg")

    def test_retain_and_discard(self, tmp_path):
        registry = PhotoRegistry()
        photos = [Photo(tmp_path / f"{n}.jpg", datetime(2020, 1, 1)) for n in "abc"]
        for p in photos:
            registry.intern(p)
        registry.retain([photos[0].file_path, photos[2].file_path])
        assert list(registry) == [photos[0], photos[2]]
        registry.discard(photos[0].file_path)
        registry.discard(photos[0].file_path)
        assert list(registry) == [photos[2]]
        registry.clear()
        assert len(registry) == 0


class TestAlbum:
    def _photo(self, tmp_path, name, day):
        return Photo(tmp_path / name, datetime(2020, 1, day, 9, 0, 0))

    def test_empty_album(self):
        album = Album("Trip")
        assert album.name == "Trip"
        assert album.photos == []
        assert album.photo_count == 0
        assert album.start_date is None
        assert album.end_date is None
        assert album.date_range_string() == "No photos"

    def test_add_photo_updates_range(self, tmp_path):
        album = Album("Trip")
        assert album.add_photo(self._photo(tmp_path, "b.jpg", 5))
        assert album.add_photo(self._photo(tmp_path, "a.jpg", 2))
        assert album.add_photo(self._photo(tmp_path, "c.jpg", 9))
        assert album.start_date == datetime(2020, 1, 2, 9, 0, 0)
        assert album.end_date == datetime(2020, 1, 9, 9, 0, 0)
        assert [p.file_name for p in album.photos] == ["b.jpg", "a.jpg", "c.jpg"]

    def test_add_duplicate_photo(self, tmp_path):
        album = Album("Trip")
        assert album.add_photo(self._photo(tmp_path, "a.jpg", 1))
        assert not album.add_photo(self._photo(tmp_path, "a.jpg", 25))
        assert album.photo_count == 1
        assert album.start_date == datetime(2020, 1, 1, 9, 0, 0)
        assert album.end_date == datetime(2020, 1, 1, 9, 0, 0)

    def test_remove_photo_updates_range(self, tmp_path):
        album = Album("Trip")
        early = self._photo(tmp_path, "a.jpg", 1)
        late = self._photo(tmp_path, "b.jpg", 20)
        album.add_photo(early)
        album.add_photo(late)
        assert album.remove_photo(late)
        assert not album.remove_photo(late)
        assert album.end_date == early.date_taken
        assert album.remove_photo(early)
        assert album.start_date is None
        assert album.end_date is None

    def test_get_photo_and_contains(self, tmp_path):
        album = Album("Trip")
        photo = self._photo(tmp_path, "a.jpg", 1)
        album.add_photo(photo)
        assert album.get_photo(0) is photo
        assert album.get_photo(1) is None
        assert album.get_photo(-1) is None
        assert album.contains_photo(photo)
        assert not album.contains_photo(self._photo(tmp_path, "b.jpg", 1))

    def test_date_range_string(self, tmp_path):
        album = Album("Trip")
        album.add_photo(self._photo(tmp_path, "a.jpg", 1))
        assert album.date_range_string() == "2020-01-01 09:00:00"
        album.add_photo(self._photo(tmp_path, "b.jpg", 3))
        assert album.date_range_string() == "2020-01-01 09:00:00 to 2020-01-03 09:00:00"

    def test_shared_registry(self, tmp_path):
        registry = PhotoRegistry()
        first = Album("One", registry)
        second = Album("Two", registry)
        photo = self._photo(tmp_path, "a.jpg", 1)
        first.add_photo(photo)
        second.add_photo(Photo(photo.file_path, photo.date_taken))
        assert second.get_photo(0) is photo

    def test_prune_missing(self, tmp_path):
        registry = PhotoRegistry()
        album = Album("Trip", registry)
        keep = self._photo(tmp_path, "a.jpg", 1)
        lost = self._photo(tmp_path, "b.jpg", 8)
        album.add_photo(keep)
        album.add_photo(lost)
        registry.discard(lost.file_path)
        assert album.prune_missing() == [lost.file_path]
        assert album.photo_keys == [keep.file_path]
        assert album.end_date == keep.date_taken

    def test_equality_ignores_case(self):
        assert Album("Trip") == Album("TRIP")
        assert hash(Album("Trip")) == hash(Album("trip"))
        assert Album("Trip") != Album("Home")

    def test_rename_and_str(self, tmp_path):
        album = Album("Trip")
        album.add_photo(self._photo(tmp_path, "a.jpg", 1))
        album.rename("Holiday")
        assert album.name == "Holiday"
        assert str(album) == "Holiday (1 photos)"
