"""
Parsing of dictionary CSV rows.

Each line of an IPADIC-style CSV file holds 13 comma-separated fields:

    surface,left_id,right_id,word_cost,pos1,pos2,pos3,pos4,
    conjugation_type,conjugate_form,base_form,reading,pronunciation
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.errors import ParseError

FIELD_COUNT = 13

_INT_RE = re.compile(r"[+-]?[0-9]+\Z")
_UINT_RE = re.compile(r"\+?[0-9]+\Z")

U32_RANGE = (0, 0xFFFFFFFF)
I32_RANGE = (-(1 << 31), (1 << 31) - 1)


def normalize_text(text: str, replacements: Optional[Dict[str, str]] = None) -> str:
    """Rewrite ambiguous code points to their canonical alternates."""
    if replacements is None:
        replacements = settings.CHAR_REPLACEMENTS
    if not replacements:
        return text
    return text.translate(str.maketrans(replacements))


def iter_lines(text: str) -> Iterator[str]:
    """
    Split text into lines on '\\n'.

    One trailing '\\r' per line is dropped and a final newline does not
    produce an extra empty line.
    """
    if not text:
        return
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def parse_int(value: str, name: str, bounds: Tuple[int, int], unsigned: bool = False) -> int:
    """Parse a decimal integer field, raising ParseError naming the field."""
    pattern = _UINT_RE if unsigned else _INT_RE
    if not pattern.match(value):
        raise ParseError(f"failed to parse {name}: {value!r}")
    number = int(value)
    low, high = bounds
    if not low <= number <= high:
        raise ParseError(f"failed to parse {name}: {value!r} is out of range")
    return number


@dataclass(slots=True)
class CsvRow:
    """One parsed dictionary row."""
    surface_form: str
    left_id: int
    right_id: int
    word_cost: int

    pos_level1: str
    pos_level2: str
    pos_level3: str
    pos_level4: str

    conjugation_type: str
    conjugate_form: str

    base_form: str
    reading: str
    pronunciation: str

    @classmethod
    def from_line(cls, line: str) -> "CsvRow":
        fields = line.split(",")
        if len(fields) != FIELD_COUNT:
            raise ParseError(
                f"expected {FIELD_COUNT} fields, got {len(fields)}: {line!r}"
            )
        return cls(
            surface_form=fields[0],
            left_id=parse_int(fields[1], "left_id", U32_RANGE, unsigned=True),
            right_id=parse_int(fields[2], "right_id", U32_RANGE, unsigned=True),
            word_cost=parse_int(fields[3], "word_cost", I32_RANGE),
            pos_level1=fields[4],
            pos_level2=fields[5],
            pos_level3=fields[6],
            pos_level4=fields[7],
            conjugation_type=fields[8],
            conjugate_form=fields[9],
            base_form=fields[10],
            reading=fields[11],
            pronunciation=fields[12],
        )

    def details(self) -> List[str]:
        """The 9 linguistic fields stored in dict.words."""
        return [
            self.pos_level1,
            self.pos_level2,
            self.pos_level3,
            self.pos_level4,
            self.conjugation_type,
            self.conjugate_form,
            self.base_form,
            self.reading,
            self.pronunciation,
        ]


def parse_rows(text: str, source: str = "<text>") -> List[CsvRow]:
    """Parse every line of an already-normalized CSV blob."""
    rows = []
    for line_num, line in enumerate(iter_lines(text), 1):
        try:
            rows.append(CsvRow.from_line(line))
        except ParseError as err:
            raise ParseError(f"{source}:{line_num}: {err}") from err
    return rows
