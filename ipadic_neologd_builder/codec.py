"""
Binary encoding shared by the serialized artifacts.

Layout (all little-endian):
    sequence: u64 item count, then the items
    string:   u64 byte length, then the UTF-8 bytes
    u32/i16/u16: fixed width

This is the length-prefixed layout the runtime decodes detail records
and the opaque character/unknown-word objects with.
"""

import struct
from typing import Iterable, List, Sequence, Tuple

from ipadic_neologd_builder.errors import SerializeError

LEN_FORMAT = "<Q"
LEN_SIZE = struct.calcsize(LEN_FORMAT)

U32_MAX = 0xFFFFFFFF


def encode_len(n: int) -> bytes:
    return struct.pack(LEN_FORMAT, n)


def encode_str(text: str) -> bytes:
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as err:
        raise SerializeError(f"can't encode {text!r}: {err}") from err
    return encode_len(len(data)) + data


def encode_strings(items: Sequence[str]) -> bytes:
    """Encode a list of strings as a length-prefixed sequence."""
    parts = [encode_len(len(items))]
    parts.extend(encode_str(item) for item in items)
    return b"".join(parts)


def encode_u32s(seq: Sequence[int]) -> bytes:
    try:
        return encode_len(len(seq)) + struct.pack(f"<{len(seq)}I", *seq)
    except struct.error as err:
        raise SerializeError(f"value out of u32 range in {list(seq)!r}") from err


def encode_u32_seqs(seqs: Iterable[Sequence[int]]) -> bytes:
    """Encode a list of u32 lists as a length-prefixed sequence of sequences."""
    seqs = list(seqs)
    return encode_len(len(seqs)) + b"".join(encode_u32s(seq) for seq in seqs)


def decode_len(data: bytes, offset: int) -> Tuple[int, int]:
    try:
        (n,) = struct.unpack_from(LEN_FORMAT, data, offset)
    except struct.error as err:
        raise SerializeError(f"truncated length prefix at offset {offset}") from err
    return n, offset + LEN_SIZE


def decode_str(data: bytes, offset: int) -> Tuple[str, int]:
    n, offset = decode_len(data, offset)
    end = offset + n
    if end > len(data):
        raise SerializeError(f"truncated string at offset {offset}")
    return data[offset:end].decode("utf-8"), end


def decode_strings(data: bytes, offset: int = 0) -> Tuple[List[str], int]:
    """Decode a string sequence starting at offset. Returns (items, next offset)."""
    count, offset = decode_len(data, offset)
    items = []
    for _ in range(count):
        item, offset = decode_str(data, offset)
        items.append(item)
    return items, offset


def decode_u32s(data: bytes, offset: int = 0) -> Tuple[List[int], int]:
    n, offset = decode_len(data, offset)
    try:
        values = list(struct.unpack_from(f"<{n}I", data, offset))
    except struct.error as err:
        raise SerializeError(f"truncated u32 sequence at offset {offset}") from err
    return values, offset + 4 * n


def decode_u32_seqs(data: bytes, offset: int = 0) -> Tuple[List[List[int]], int]:
    count, offset = decode_len(data, offset)
    seqs = []
    for _ in range(count):
        seq, offset = decode_u32s(data, offset)
        seqs.append(seq)
    return seqs, offset
