"""
Character definitions (char.def -> char_def.bin).

char.def has two kinds of lines:

    KANJI 0 0 2                    category: name invoke group length
    0x4E00..0x9FFF KANJI KANJINUMERIC   code point range -> categories

'#' starts a comment. A code point matching no range belongs to DEFAULT.
"""

import bisect
import logging
import re
import struct
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ipadic_neologd_builder.codec import (
    decode_len,
    decode_strings,
    decode_u32_seqs,
    decode_u32s,
    encode_len,
    encode_str,
    encode_u32_seqs,
    encode_u32s,
)
from ipadic_neologd_builder.errors import ContentError, ParseError
from ipadic_neologd_builder.records import U32_RANGE, iter_lines, parse_int

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "DEFAULT"
MAX_CODE_POINT = 0x10FFFF

_CODE_POINT_RE = re.compile(r"0[xX][0-9A-Fa-f]+\Z")

CATEGORY_FORMAT = "<BBI"
CATEGORY_SIZE = struct.calcsize(CATEGORY_FORMAT)


@dataclass(slots=True)
class CategoryData:
    invoke: bool
    group: bool
    length: int


@dataclass
class CharacterDefinitions:
    """
    Category table plus a code point lookup table.

    boundaries[i] is the first code point of interval i; values[i] are the
    category ids of every code point in [boundaries[i], boundaries[i + 1]).
    """
    category_names: List[str]
    category_definitions: List[CategoryData]
    boundaries: List[int]
    values: List[List[int]]

    def categories(self) -> List[str]:
        return list(self.category_names)

    def category_id(self, name: str) -> int:
        return self.category_names.index(name)

    def lookup_categories(self, ch: str) -> List[int]:
        pos = bisect.bisect_right(self.boundaries, ord(ch)) - 1
        return self.values[pos] if pos >= 0 else []

    def lookup_definition(self, category_id: int) -> CategoryData:
        return self.category_definitions[category_id]

    def to_bytes(self) -> bytes:
        parts = [encode_len(len(self.category_definitions))]
        for data in self.category_definitions:
            parts.append(struct.pack(CATEGORY_FORMAT, data.invoke, data.group, data.length))
        parts.append(encode_len(len(self.category_names)))
        parts.extend(encode_str(name) for name in self.category_names)
        parts.append(encode_u32s(self.boundaries))
        parts.append(encode_u32_seqs(self.values))
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "CharacterDefinitions":
        count, offset = decode_len(data, 0)
        definitions = []
        for _ in range(count):
            invoke, group, length = struct.unpack_from(CATEGORY_FORMAT, data, offset)
            definitions.append(CategoryData(bool(invoke), bool(group), length))
            offset += CATEGORY_SIZE
        names, offset = decode_strings(data, offset)
        boundaries, offset = decode_u32s(data, offset)
        values, _ = decode_u32_seqs(data, offset)
        return cls(names, definitions, boundaries, values)


def _parse_flag(value: str, name: str, line_num: int) -> bool:
    if value not in ("0", "1"):
        raise ParseError(f"char.def:{line_num}: {name} must be 0 or 1, got {value!r}")
    return value == "1"


def _parse_code_point(value: str, line_num: int) -> int:
    if not _CODE_POINT_RE.match(value):
        raise ParseError(f"char.def:{line_num}: invalid code point {value!r}")
    code_point = int(value, 16)
    if not 0 <= code_point <= MAX_CODE_POINT:
        raise ParseError(f"char.def:{line_num}: code point {value} out of range")
    return code_point


@dataclass
class CharacterDefinitionsBuilder:
    category_index: Dict[str, int] = field(default_factory=dict)
    category_definitions: List[CategoryData] = field(default_factory=list)
    char_ranges: List[Tuple[int, int, List[int]]] = field(default_factory=list)

    def parse(self, text: str) -> "CharacterDefinitionsBuilder":
        for line_num, raw_line in enumerate(iter_lines(text), 1):
            line = raw_line.split("#", 1)[0].strip()
            if not line:
                continue
            fields = line.split()
            if fields[0].lower().startswith("0x"):
                self._parse_range(fields, line_num)
            else:
                self._parse_category(fields, line_num)
        return self

    def _parse_category(self, fields: List[str], line_num: int) -> None:
        if len(fields) != 4:
            raise ParseError(
                f"char.def:{line_num}: category line needs 4 fields, got {len(fields)}"
            )
        name, invoke, group, length = fields
        try:
            length_value = parse_int(length, "length", U32_RANGE, unsigned=True)
        except ParseError as err:
            raise ParseError(f"char.def:{line_num}: {err}") from err
        data = CategoryData(
            invoke=_parse_flag(invoke, "invoke", line_num),
            group=_parse_flag(group, "group", line_num),
            length=length_value,
        )
        if name in self.category_index:
            self.category_definitions[self.category_index[name]] = data
        else:
            self.category_index[name] = len(self.category_definitions)
            self.category_definitions.append(data)

    def _parse_range(self, fields: List[str], line_num: int) -> None:
        if len(fields) < 2:
            raise ParseError(f"char.def:{line_num}: range line has no category")
        low_text, _, high_text = fields[0].partition("..")
        low = _parse_code_point(low_text, line_num)
        high = _parse_code_point(high_text, line_num) if high_text else low
        if high < low:
            raise ParseError(f"char.def:{line_num}: empty range {fields[0]}")
        category_ids = []
        for name in fields[1:]:
            if name not in self.category_index:
                raise ContentError(f"char.def:{line_num}: undefined category {name!r}")
            category_ids.append(self.category_index[name])
        self.char_ranges.append((low, high, category_ids))

    def _lookup_categories(self, code_point: int) -> List[int]:
        category_ids: List[int] = []
        for low, high, ids in self.char_ranges:
            if low <= code_point <= high:
                for category_id in ids:
                    if category_id not in category_ids:
                        category_ids.append(category_id)
        if not category_ids and DEFAULT_CATEGORY in self.category_index:
            category_ids.append(self.category_index[DEFAULT_CATEGORY])
        return category_ids

    def build(self) -> CharacterDefinitions:
        boundary_set = {0}
        for low, high, _ in self.char_ranges:
            boundary_set.add(low)
            if high < MAX_CODE_POINT:
                boundary_set.add(high + 1)
        boundaries = sorted(boundary_set)
        values = [self._lookup_categories(boundary) for boundary in boundaries]
        names = [""] * len(self.category_index)
        for name, category_id in self.category_index.items():
            names[category_id] = name
        logger.debug(
            f"{len(names)} character categories, {len(boundaries)} lookup intervals"
        )
        return CharacterDefinitions(
            category_names=names,
            category_definitions=list(self.category_definitions),
            boundaries=boundaries,
            values=values,
        )
