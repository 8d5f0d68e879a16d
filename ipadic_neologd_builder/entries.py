"""
Grouping of parsed rows into dictionary entries.

Entries are keyed by surface form in code-point order, which is the same
as UTF-8 byte order. That order drives the packed index values, so the
grouping returned here must not be re-sorted downstream.

Binary record (dict.vals), little-endian:
    - word_id: uint32 (4 bytes) - row index of the source CSV line
    - word_cost: int16 (2 bytes)
    - cost_id: uint16 (2 bytes) - left context id
"""

import logging
import struct
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.files import read_utf8_file
from ipadic_neologd_builder.records import CsvRow, normalize_text, parse_rows

logger = logging.getLogger(__name__)

VALUE_FORMAT = "<IhH"
VALUE_SIZE = struct.calcsize(VALUE_FORMAT)  # 8


def to_i16(n: int) -> int:
    """Narrow to a signed 16-bit value, wrapping like a two's-complement cast."""
    return ((n + 0x8000) & 0xFFFF) - 0x8000


def to_u16(n: int) -> int:
    return n & 0xFFFF


@dataclass(frozen=True, slots=True)
class WordId:
    """Entry identifier. is_system is False only for user-supplied entries."""
    id: int
    is_system: bool = True


@dataclass(slots=True)
class WordEntry:
    """A compiled dictionary entry."""
    word_id: WordId
    word_cost: int
    cost_id: int

    @classmethod
    def from_row(cls, row_id: int, row: CsvRow) -> "WordEntry":
        return cls(
            word_id=WordId(row_id, True),
            word_cost=to_i16(row.word_cost),
            cost_id=to_u16(row.left_id),
        )

    def serialize(self) -> bytes:
        return struct.pack(VALUE_FORMAT, self.word_id.id, self.word_cost, self.cost_id)

    @classmethod
    def deserialize(cls, data: bytes, offset: int = 0) -> "WordEntry":
        word_id, word_cost, cost_id = struct.unpack_from(VALUE_FORMAT, data, offset)
        return cls(WordId(word_id, True), word_cost, cost_id)


EntryGroups = Dict[str, List[WordEntry]]


def load_rows(
    paths: Iterable[Path],
    replacements: Optional[Dict[str, str]] = None,
) -> List[CsvRow]:
    """Read, normalize and parse CSV files, concatenating rows in file order."""
    rows: List[CsvRow] = []
    for path in paths:
        logger.debug(f"reading {path}")
        text = normalize_text(read_utf8_file(path), replacements)
        rows.extend(parse_rows(text, source=str(path)))
    return rows


def aggregate(
    rows: Sequence[CsvRow],
    skip_words: Iterable[str] = settings.SKIP_WORDS,
) -> EntryGroups:
    """
    Group rows by surface form.

    Each entry's word id is its row index in `rows`. Groups keep row order
    and the returned mapping iterates in surface-form order.
    """
    skip = set(skip_words)
    groups: Dict[str, List[WordEntry]] = defaultdict(list)
    skipped = 0
    for row_id, row in enumerate(rows):
        if row.surface_form in skip:
            skipped += 1
            continue
        groups[row.surface_form].append(WordEntry.from_row(row_id, row))
    if skipped:
        logger.info(f"Skipped {skipped} rows from the skip list")
    return {key: groups[key] for key in sorted(groups)}


def pack_value(base_id: int, count: int) -> int:
    return (base_id << settings.COUNT_BITS) | count


def unpack_value(value: int) -> Tuple[int, int]:
    """Split a packed index value into (base entry id, entry count)."""
    return value >> settings.COUNT_BITS, value & settings.MAX_ENTRIES_PER_KEY


def pack_keyset(groups: EntryGroups) -> List[Tuple[str, int]]:
    """
    Compute the packed index value of every surface form.

    base id is the number of entries of all earlier keys, so it is also the
    position of the group's first record in dict.vals.
    """
    keyset = []
    base_id = 0
    for key, word_entries in groups.items():
        count = len(word_entries)
        if count > settings.MAX_ENTRIES_PER_KEY:
            raise AssertionError(
                f"{key} is {count} length. Too long. [{1 << settings.COUNT_BITS}]"
            )
        keyset.append((key, pack_value(base_id, count)))
        base_id += count
    logger.info(f"Last len is {base_id}")
    return keyset
