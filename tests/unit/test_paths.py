"""Unit tests for key parsing."""

import pytest

from dotstore.core.exceptions import InvalidPathError
from dotstore.core.models import KeyPath
from dotstore.core.paths import parse, parse_index, split


class TestParse:
    """Tests for parse()."""

    def test_single_segment(self) -> None:
        """Test that a key without separators is a one-segment path."""
        path = parse("foo")
        assert path.segments == ("foo",)
        assert path.root == "foo"
        assert path.sub_path == ()

    def test_multiple_segments(self) -> None:
        """Test that segments are split on the separator in order."""
        path = parse("one.two.three.four")
        assert path.segments == ("one", "two", "three", "four")
        assert str(path) == "one.two.three.four"
        assert len(path) == 4

    def test_segments_keep_other_characters(self) -> None:
        """Test that spaces, dashes and digits are ordinary segment characters."""
        path = parse("my list.item-1.0")
        assert path.segments == ("my list", "item-1", "0")

    @pytest.mark.parametrize("key", ["", ".", "a.", ".a", "a..b", "a.b..", "..."])
    def test_malformed_keys_rejected(self, key: str) -> None:
        """Test that empty keys and empty segments raise InvalidPathError."""
        with pytest.raises(InvalidPathError):
            parse(key)

    def test_error_names_the_key(self) -> None:
        """Test that the error message includes the offending key."""
        with pytest.raises(InvalidPathError) as exc_info:
            parse("users..name")

        assert "users..name" in str(exc_info.value)


class TestSplit:
    """Tests for split()."""

    def test_split_root_and_sub_path(self) -> None:
        """Test that split separates the first segment from the rest."""
        assert split(parse("articles.local.cat")) == ("articles", ("local", "cat"))

    def test_split_single_segment(self) -> None:
        """Test that a single segment has an empty sub-path."""
        assert split(KeyPath(("foo",))) == ("foo", ())


class TestParseIndex:
    """Tests for parse_index()."""

    @pytest.mark.parametrize(("segment", "expected"), [("0", 0), ("1", 1), ("42", 42)])
    def test_canonical_indices(self, segment: str, expected: int) -> None:
        """Test that canonical decimal segments are indices."""
        assert parse_index(segment) == expected

    @pytest.mark.parametrize("segment", ["-1", "+1", "01", "1.5", "one", " 1", "١"])
    def test_non_indices(self, segment: str) -> None:
        """Test that anything else is not an index."""
        assert parse_index(segment) is None
