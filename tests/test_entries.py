"""
Tests for entries.py - grouping rows into packed entries.
"""

import pytest

from conftest import CSV_A, SKIPPED_ROW, SOURCE_ROW_COUNT
from ipadic_neologd_builder import settings
from ipadic_neologd_builder.entries import (
    VALUE_SIZE,
    WordEntry,
    WordId,
    aggregate,
    load_rows,
    pack_keyset,
    to_i16,
    to_u16,
    unpack_value,
)
from ipadic_neologd_builder.errors import DictionaryIOError, ParseError
from ipadic_neologd_builder.records import CsvRow


def make_rows(surfaces):
    return [
        CsvRow.from_line(f"{s},{i},{i},{i * 10},名詞,一般,*,*,*,*,{s},*,*")
        for i, s in enumerate(surfaces)
    ]


class TestNarrowing:
    """Tests for the 16-bit casts."""

    def test_i16_in_range(self):
        assert to_i16(300) == 300
        assert to_i16(-6000) == -6000

    def test_i16_wraps(self):
        assert to_i16(32768) == -32768
        assert to_i16(65535) == -1

    def test_u16_wraps(self):
        assert to_u16(1285) == 1285
        assert to_u16(65536 + 7) == 7


class TestWordEntry:
    """Tests for the 8-byte value record."""

    def test_from_row(self):
        row = CsvRow.from_line("すもも,100,200,300,名詞,一般,*,*,*,*,すもも,スモモ,スモモ")
        entry = WordEntry.from_row(5, row)
        assert entry.word_id == WordId(5, True)
        assert entry.cost_id == 100
        assert entry.word_cost == 300

    def test_serialize_layout(self):
        entry = WordEntry(WordId(0x01020304, True), -2, 0xABCD)
        data = entry.serialize()
        assert len(data) == VALUE_SIZE == 8
        assert data == bytes([0x04, 0x03, 0x02, 0x01, 0xFE, 0xFF, 0xCD, 0xAB])

    def test_deserialize(self):
        entry = WordEntry(WordId(42, True), -300, 1285)
        assert WordEntry.deserialize(entry.serialize()) == entry


class TestAggregate:
    """Tests for aggregate."""

    def test_keys_sorted(self):
        groups = aggregate(make_rows(["も", "すもも", "うち", "もも"]))
        assert list(groups) == ["うち", "すもも", "も", "もも"]

    def test_row_index_is_word_id(self):
        groups = aggregate(make_rows(["b", "a", "b"]))
        assert [e.word_id.id for e in groups["a"]] == [1]
        assert [e.word_id.id for e in groups["b"]] == [0, 2]

    def test_entries_are_system(self):
        groups = aggregate(make_rows(["a"]))
        assert groups["a"][0].word_id.is_system

    def test_skip_list(self):
        rows = make_rows(["a", "カブシキガイシャ", "b", "タカラヅカカゲキダンキセイ"])
        groups = aggregate(rows)
        assert list(groups) == ["a", "b"]
        # skipped rows still consume a row index
        assert groups["b"][0].word_id.id == 2

    def test_custom_skip_list(self):
        groups = aggregate(make_rows(["a", "b"]), skip_words=["a"])
        assert list(groups) == ["b"]

    def test_sort_is_by_code_point(self):
        # UTF-8 byte order and code point order agree
        surfaces = ["波", "A", "a", "ア", "あ", "é"]
        groups = aggregate(make_rows(surfaces))
        assert list(groups) == sorted(surfaces, key=lambda s: s.encode("utf-8"))


class TestPackKeyset:
    """Tests for pack_keyset."""

    def test_running_base_ids(self):
        groups = aggregate(make_rows(["b", "a", "b", "c", "b"]))
        keyset = pack_keyset(groups)
        assert keyset == [
            ("a", (0 << 5) | 1),
            ("b", (1 << 5) | 3),
            ("c", (4 << 5) | 1),
        ]

    def test_unpack(self):
        assert unpack_value((4 << 5) | 3) == (4, 3)

    def test_31_entries_allowed(self):
        groups = aggregate(make_rows(["x"] * settings.MAX_ENTRIES_PER_KEY))
        [(key, value)] = pack_keyset(groups)
        assert unpack_value(value) == (0, 31)

    def test_32_entries_fatal(self):
        groups = aggregate(make_rows(["x"] * 32))
        with pytest.raises(AssertionError, match="Too long"):
            pack_keyset(groups)


class TestLoadRows:
    """Tests for load_rows."""

    def test_concatenates_files_and_normalizes(self, source_dir):
        rows = load_rows([source_dir / "a.csv", source_dir / "b.csv"])
        assert len(rows) == SOURCE_ROW_COUNT
        assert rows[0].surface_form == "すもも"
        assert rows[3].surface_form == "の"
        assert rows[SKIPPED_ROW].surface_form == "カブシキガイシャ"
        assert rows[7].surface_form == "\u6ce2\u301c"
        assert rows[7].base_form == "\u6ce2\u301c"

    def test_no_normalization(self, source_dir):
        rows = load_rows([source_dir / "b.csv"], replacements={})
        assert rows[-1].surface_form == "\u6ce2\uff5e"

    def test_parse_failure_aborts(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text(CSV_A + "壊れた,1,2\n", encoding="utf-8")
        with pytest.raises(ParseError, match="bad.csv:4"):
            load_rows([path])

    def test_missing_file(self, tmp_path):
        with pytest.raises(DictionaryIOError):
            load_rows([tmp_path / "missing.csv"])

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes("café,1,1,1,*,*,*,*,*,*,*,*,*\n".encode("latin-1"))
        with pytest.raises(DictionaryIOError, match="UTF-8"):
            load_rows([path])
