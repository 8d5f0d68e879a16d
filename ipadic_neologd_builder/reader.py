"""
Read access to a compiled dictionary directory.

Mirrors what the runtime tokenizer does with the build output: the
surface index is memory-mapped, the other files are loaded whole.
"""

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import marisa_trie

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.codec import decode_strings
from ipadic_neologd_builder.entries import VALUE_SIZE, WordEntry, unpack_value
from ipadic_neologd_builder.errors import ContentError, DictionaryIOError
from ipadic_neologd_builder.files import read_binary_file
from ipadic_neologd_builder.lexicon import INDEX_FORMAT, common_prefixes, lookup
from ipadic_neologd_builder.matrix import CostMatrix
from ipadic_neologd_builder.store import OFFSET_FORMAT, OFFSET_SIZE


@dataclass
class CompiledDictionary:
    index: marisa_trie.RecordTrie
    vals: bytes
    words: bytes
    words_idx: bytes
    matrix: CostMatrix

    @classmethod
    def load(cls, path: Path) -> "CompiledDictionary":
        """
        Load a dictionary built by IpadicNeologdBuilder.

        Raises:
            DictionaryIOError: If a file is missing or unreadable
            ContentError: If a file is corrupt or truncated
        """
        path = Path(path)
        da_path = path / settings.DICT_DA
        if not da_path.exists():
            raise DictionaryIOError(f"dictionary not found at {path}")
        index = marisa_trie.RecordTrie(INDEX_FORMAT)
        try:
            index.mmap(str(da_path))
        except (RuntimeError, ValueError) as err:
            raise ContentError(f"corrupt index {da_path}: {err}") from err
        vals = read_binary_file(path / settings.DICT_VALS)
        words_idx = read_binary_file(path / settings.DICT_WORDS_IDX)
        if len(vals) % VALUE_SIZE or len(words_idx) % OFFSET_SIZE:
            raise ContentError(f"truncated dictionary files in {path}")
        return cls(
            index=index,
            vals=vals,
            words=read_binary_file(path / settings.DICT_WORDS),
            words_idx=words_idx,
            matrix=CostMatrix.from_bytes(read_binary_file(path / settings.MATRIX_MTX)),
        )

    def __len__(self) -> int:
        return len(self.index)

    @property
    def entry_count(self) -> int:
        return len(self.vals) // VALUE_SIZE

    @property
    def row_count(self) -> int:
        return len(self.words_idx) // OFFSET_SIZE

    def __contains__(self, surface: str) -> bool:
        return surface in self.index

    def entry(self, position: int) -> WordEntry:
        """The record at a position of dict.vals."""
        return WordEntry.deserialize(self.vals, position * VALUE_SIZE)

    def _entries(self, value: int) -> List[WordEntry]:
        base_id, count = unpack_value(value)
        return [self.entry(base_id + i) for i in range(count)]

    def lookup(self, surface: str) -> List[WordEntry]:
        """All entries of a surface form, in source row order."""
        value = lookup(self.index, surface)
        if value is None:
            return []
        return self._entries(value)

    def common_prefix_search(self, text: str) -> List[Tuple[str, List[WordEntry]]]:
        """Entries of every prefix of text, shortest prefix first."""
        return [(prefix, self._entries(value)) for prefix, value in common_prefixes(self.index, text)]

    def word_details(self, word_id: int) -> List[str]:
        """The 9 detail fields of a source row."""
        if not 0 <= word_id < self.row_count:
            raise KeyError(word_id)
        (offset,) = struct.unpack_from(OFFSET_FORMAT, self.words_idx, word_id * OFFSET_SIZE)
        details, _ = decode_strings(self.words, offset)
        return details

    def connection_cost(self, forward_id: int, backward_id: int) -> int:
        return self.matrix.cost(forward_id, backward_id)
