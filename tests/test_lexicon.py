"""
Tests for lexicon.py - the surface form index.
"""

import pytest

from ipadic_neologd_builder.errors import IndexBuildError
from ipadic_neologd_builder.lexicon import (
    build_index,
    common_prefixes,
    load_index,
    longest_match,
    lookup,
    unpack_value,
)

KEYSET = [
    ("す", (0 << 5) | 1),
    ("すも", (1 << 5) | 2),
    ("すもも", (3 << 5) | 1),
    ("もも", (4 << 5) | 31),
]


@pytest.fixture
def index():
    return load_index(build_index(KEYSET))


class TestBuildIndex:
    """Tests for build_index."""

    def test_returns_bytes(self):
        data = build_index(KEYSET)
        assert isinstance(data, bytes)
        assert len(data) > 0

    def test_duplicate_key(self):
        with pytest.raises(IndexBuildError, match="duplicate"):
            build_index([("a", 1), ("a", 2)])

    def test_unsorted_keys(self):
        with pytest.raises(IndexBuildError, match="out of order"):
            build_index([("b", 1), ("a", 2)])

    def test_value_must_fit_u32(self):
        with pytest.raises(IndexBuildError, match="u32"):
            build_index([("a", 1 << 32)])

    def test_key_must_be_str(self):
        with pytest.raises(IndexBuildError):
            build_index([(b"a", 1)])


class TestLookup:
    """Tests for reading the index back."""

    def test_every_key_round_trips(self, index):
        for key, value in KEYSET:
            assert lookup(index, key) == value

    def test_missing_key(self, index):
        assert lookup(index, "すもももも") is None
        assert lookup(index, "か") is None

    def test_prefix_of_key_is_not_a_match(self, index):
        assert lookup(index, "も") is None

    def test_size(self, index):
        assert len(index) == len(KEYSET)

    def test_unpack(self, index):
        assert unpack_value(lookup(index, "もも")) == (4, 31)


class TestPrefixSearch:
    """Tests for common_prefixes and longest_match."""

    def test_common_prefixes_shortest_first(self, index):
        found = list(common_prefixes(index, "すもももももも"))
        assert [prefix for prefix, _ in found] == ["す", "すも", "すもも"]

    def test_longest_match(self, index):
        assert longest_match(index, "すもものうち") == ("すもも", (3 << 5) | 1)

    def test_prefixes_of_long_text(self, index):
        text = "すもも" + "も" * 5000
        found = list(common_prefixes(index, text))
        assert [prefix for prefix, _ in found] == ["す", "すも", "すもも"]
        assert found[-1][1] == (3 << 5) | 1

    def test_empty_key_comes_first(self):
        index = load_index(build_index([("", 7), ("す", 1 << 5 | 1)]))
        assert list(common_prefixes(index, "すもも")) == [("", 7), ("す", (1 << 5) | 1)]

    def test_no_match(self, index):
        assert list(common_prefixes(index, "うち")) == []
        assert longest_match(index, "うち") is None
