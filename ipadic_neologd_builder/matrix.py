"""
Connection cost matrix compiler (matrix.def -> matrix.mtx).

matrix.def is whitespace separated. The first line holds the dimensions,
every following line one cost:

    forward_size backward_size
    forward_id backward_id cost
    ...

matrix.mtx is a flat little-endian int16 array:

    [forward_size, backward_size, cost(0, 0), cost(0, 1), ...]

with cost(f, b) at index 2 + b + f * backward_size. Pairs missing from
matrix.def hold COST_SENTINEL.
"""

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.entries import to_i16
from ipadic_neologd_builder.errors import ContentError, ParseError, SerializeError
from ipadic_neologd_builder.files import write_bytes
from ipadic_neologd_builder.records import I32_RANGE, iter_lines, parse_int

logger = logging.getLogger(__name__)

HEADER_LEN = 2
I16_MAX = 32767


@dataclass
class CostMatrix:
    forward_size: int
    backward_size: int
    values: List[int]

    @classmethod
    def empty(cls, forward_size: int, backward_size: int) -> "CostMatrix":
        values = [settings.COST_SENTINEL] * (HEADER_LEN + forward_size * backward_size)
        values[0] = forward_size
        values[1] = backward_size
        return cls(forward_size, backward_size, values)

    def index(self, forward_id: int, backward_id: int) -> int:
        return HEADER_LEN + backward_id + forward_id * self.backward_size

    def cost(self, forward_id: int, backward_id: int) -> int:
        return self.values[self.index(forward_id, backward_id)]

    def set_cost(self, forward_id: int, backward_id: int, cost: int) -> None:
        if not 0 <= forward_id < self.forward_size:
            raise ContentError(
                f"forward_id {forward_id} out of range [0, {self.forward_size})"
            )
        if not 0 <= backward_id < self.backward_size:
            raise ContentError(
                f"backward_id {backward_id} out of range [0, {self.backward_size})"
            )
        self.values[self.index(forward_id, backward_id)] = to_i16(cost)

    def to_bytes(self) -> bytes:
        try:
            return struct.pack(f"<{len(self.values)}h", *self.values)
        except struct.error as err:
            raise SerializeError(f"can't pack cost matrix: {err}") from err

    @classmethod
    def from_bytes(cls, data: bytes) -> "CostMatrix":
        if len(data) % 2 or len(data) < HEADER_LEN * 2:
            raise ContentError(f"matrix data has invalid size {len(data)}")
        values = list(struct.unpack(f"<{len(data) // 2}h", data))
        forward_size, backward_size = values[0], values[1]
        if len(values) != HEADER_LEN + forward_size * backward_size:
            raise ContentError(
                f"matrix data holds {len(values) - HEADER_LEN} costs, "
                f"header says {forward_size}x{backward_size}"
            )
        return cls(forward_size, backward_size, values)


def _parse_fields(line: str, line_num: int, expected: int) -> List[int]:
    fields = line.split()
    if len(fields) != expected:
        raise ParseError(
            f"matrix.def:{line_num}: expected {expected} fields, got {len(fields)}: {line!r}"
        )
    return [
        parse_int(field, f"matrix.def:{line_num} field {i + 1}", I32_RANGE)
        for i, field in enumerate(fields)
    ]


def parse_matrix(text: str) -> CostMatrix:
    """Parse matrix.def text into a dense cost matrix."""
    matrix = None
    for line_num, line in enumerate(iter_lines(text), 1):
        if not line.strip():
            continue
        if matrix is None:
            forward_size, backward_size = _parse_fields(line, line_num, 2)
            for name, size in (("forward_size", forward_size), ("backward_size", backward_size)):
                if not 0 <= size <= I16_MAX:
                    raise ContentError(f"matrix.def: {name} {size} does not fit i16")
            matrix = CostMatrix.empty(forward_size, backward_size)
            continue
        forward_id, backward_id, cost = _parse_fields(line, line_num, 3)
        matrix.set_cost(forward_id, backward_id, cost)
    if matrix is None:
        raise ContentError("matrix.def has no header line")
    return matrix


def write_matrix(path: Path, matrix: CostMatrix) -> None:
    write_bytes(path, matrix.to_bytes())
    logger.debug(f"wrote {matrix.forward_size}x{matrix.backward_size} matrix to {path}")
