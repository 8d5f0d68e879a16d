"""
Surface-form index (dict.da).

Maps every unique surface form to its packed value
(base_entry_id << 5) | entry_count, stored in a marisa_trie.RecordTrie
with a single little-endian uint32 per key.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

import marisa_trie

from ipadic_neologd_builder.codec import U32_MAX
from ipadic_neologd_builder.entries import unpack_value
from ipadic_neologd_builder.errors import IndexBuildError

logger = logging.getLogger(__name__)

INDEX_FORMAT = "<I"

__all__ = [
    "INDEX_FORMAT",
    "build_index",
    "load_index",
    "lookup",
    "common_prefixes",
    "longest_match",
    "unpack_value",
]


def _validate_keyset(keyset: Sequence[Tuple[str, int]]) -> None:
    previous: Optional[str] = None
    for key, value in keyset:
        if not isinstance(key, str):
            raise IndexBuildError(f"index key must be str, got {type(key).__name__}")
        if previous is not None and key <= previous:
            if key == previous:
                raise IndexBuildError(f"duplicate index key: {key!r}")
            raise IndexBuildError(f"index keys out of order: {previous!r} > {key!r}")
        if not 0 <= value <= U32_MAX:
            raise IndexBuildError(f"packed value for {key!r} does not fit u32: {value}")
        previous = key


def build_index(keyset: Sequence[Tuple[str, int]]) -> bytes:
    """
    Build the index from (surface form, packed value) pairs.

    Keys must be strictly ascending. Returns the serialized trie.
    """
    _validate_keyset(keyset)
    logger.info(f"Building index over {len(keyset)} surface forms...")
    try:
        trie = marisa_trie.RecordTrie(INDEX_FORMAT, ((key, (value,)) for key, value in keyset))
        data = trie.tobytes()
    except (RuntimeError, ValueError, MemoryError) as err:
        raise IndexBuildError(f"index build error: {err}") from err
    if len(trie) != len(keyset):
        raise IndexBuildError(
            f"index holds {len(trie)} keys, expected {len(keyset)}"
        )
    return data


def load_index(data: bytes) -> marisa_trie.RecordTrie:
    """Load an index from the bytes returned by build_index."""
    trie = marisa_trie.RecordTrie(INDEX_FORMAT)
    trie.frombytes(data)
    return trie


def lookup(index: marisa_trie.RecordTrie, key: str) -> Optional[int]:
    """Exact-match lookup. Returns the packed value or None."""
    records = index.get(key)
    if not records:
        return None
    return records[0][0]


def common_prefixes(index: marisa_trie.RecordTrie, text: str) -> Iterator[Tuple[str, int]]:
    """
    Yield (prefix, packed value) for every prefix of text in the index.

    Shortest prefix first, so the last item is the longest match.
    """
    # RecordTrie.prefixes never reports the empty key
    value = lookup(index, "")
    if value is not None:
        yield "", value
    for prefix in index.prefixes(text):
        yield prefix, lookup(index, prefix)


def longest_match(index: marisa_trie.RecordTrie, text: str) -> Optional[Tuple[str, int]]:
    found: List[Tuple[str, int]] = list(common_prefixes(index, text))
    return found[-1] if found else None
