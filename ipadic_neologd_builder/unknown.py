"""
Unknown-word dictionary (unk.def -> unk.bin).

Each unk.def line reuses the CSV layout with a character category name
in place of the surface form:

    KANJI,1285,1285,11426,名詞,一般,*,*,*,*,*
"""

import logging
import struct
from dataclasses import dataclass
from typing import List, Sequence

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.codec import decode_len, decode_u32_seqs, encode_len, encode_u32_seqs
from ipadic_neologd_builder.entries import WordEntry, WordId, to_i16, to_u16
from ipadic_neologd_builder.errors import ContentError, ParseError
from ipadic_neologd_builder.records import I32_RANGE, U32_RANGE, iter_lines, parse_int

logger = logging.getLogger(__name__)

# word id, system flag, word cost, cost id
ENTRY_FORMAT = "<IBhH"
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)

MIN_FIELDS = 4


@dataclass
class UnknownDictionary:
    """category_references[c] lists the indices into costs of category c."""
    category_references: List[List[int]]
    costs: List[WordEntry]

    def entries_for(self, category_id: int) -> List[WordEntry]:
        return [self.costs[i] for i in self.category_references[category_id]]

    def to_bytes(self) -> bytes:
        parts = [encode_u32_seqs(self.category_references), encode_len(len(self.costs))]
        for entry in self.costs:
            parts.append(struct.pack(
                ENTRY_FORMAT,
                entry.word_id.id,
                entry.word_id.is_system,
                entry.word_cost,
                entry.cost_id,
            ))
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "UnknownDictionary":
        category_references, offset = decode_u32_seqs(data, 0)
        count, offset = decode_len(data, offset)
        costs = []
        for _ in range(count):
            word_id, is_system, word_cost, cost_id = struct.unpack_from(ENTRY_FORMAT, data, offset)
            costs.append(WordEntry(WordId(word_id, bool(is_system)), word_cost, cost_id))
            offset += ENTRY_SIZE
        return cls(category_references, costs)


def parse_unk(categories: Sequence[str], text: str) -> UnknownDictionary:
    """Parse unk.def against the category names of the character definitions."""
    category_references: List[List[int]] = [[] for _ in categories]
    costs: List[WordEntry] = []
    for line_num, line in enumerate(iter_lines(text), 1):
        if not line.strip():
            continue
        fields = line.split(",")
        if len(fields) < MIN_FIELDS:
            raise ParseError(
                f"unk.def:{line_num}: expected at least {MIN_FIELDS} fields, got {len(fields)}"
            )
        name = fields[0]
        try:
            left_id = parse_int(fields[1], "left_id", U32_RANGE, unsigned=True)
            parse_int(fields[2], "right_id", U32_RANGE, unsigned=True)
            word_cost = parse_int(fields[3], "word_cost", I32_RANGE)
        except ParseError as err:
            raise ParseError(f"unk.def:{line_num}: {err}") from err
        try:
            category_id = list(categories).index(name)
        except ValueError as err:
            raise ContentError(f"unk.def:{line_num}: unknown category {name!r}") from err
        category_references[category_id].append(len(costs))
        costs.append(WordEntry(
            word_id=WordId(settings.UNKNOWN_WORD_ID, True),
            word_cost=to_i16(word_cost),
            cost_id=to_u16(left_id),
        ))
    logger.debug(f"{len(costs)} unknown-word entries")
    return UnknownDictionary(category_references, costs)
