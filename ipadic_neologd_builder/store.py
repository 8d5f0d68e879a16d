"""
Writers for the entry and detail stores.

    dict.vals      one 8-byte record per entry, keys in index order
    dict.words     encoded detail records, one per CSV row
    dict.wordsidx  uint32 offset into dict.words per CSV row
"""

import logging
import struct
from pathlib import Path
from typing import List, Sequence, Tuple

from ipadic_neologd_builder.codec import U32_MAX, encode_strings
from ipadic_neologd_builder.entries import EntryGroups
from ipadic_neologd_builder.errors import SerializeError
from ipadic_neologd_builder.files import open_output
from ipadic_neologd_builder.records import CsvRow

logger = logging.getLogger(__name__)

OFFSET_FORMAT = "<I"
OFFSET_SIZE = struct.calcsize(OFFSET_FORMAT)


def write_values(path: Path, groups: EntryGroups) -> int:
    """Write every entry of every group in order. Returns the entry count."""
    count = 0
    with open_output(path) as f:
        for word_entries in groups.values():
            for word_entry in word_entries:
                try:
                    f.write(word_entry.serialize())
                except struct.error as err:
                    raise SerializeError(f"can't pack {word_entry!r}: {err}") from err
                count += 1
    return count


def encode_words(rows: Sequence[CsvRow]) -> Tuple[bytes, List[int]]:
    """Encode the detail record of each row. Returns (blob, start offsets)."""
    buffer = bytearray()
    offsets = []
    for row in rows:
        offset = len(buffer)
        if offset > U32_MAX:
            raise SerializeError(f"dict.words offset {offset} does not fit u32")
        offsets.append(offset)
        buffer += encode_strings(row.details())
    return bytes(buffer), offsets


def write_words(words_path: Path, index_path: Path, rows: Sequence[CsvRow]) -> int:
    """Write dict.words and dict.wordsidx. Returns the size of dict.words."""
    words, offsets = encode_words(rows)
    with open_output(index_path) as f:
        f.write(struct.pack(f"<{len(offsets)}I", *offsets))
    with open_output(words_path) as f:
        f.write(words)
    logger.debug(f"wrote {len(offsets)} detail records ({len(words)} bytes)")
    return len(words)
