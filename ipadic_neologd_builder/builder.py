"""
Dictionary builder.

Compiles an IPADIC / mecab-ipadic-NEologd source directory into the binary
files read by the tokenizer:

    char_def.bin   character definitions
    unk.bin        unknown-word dictionary
    dict.da        surface form index
    dict.vals      entry records
    dict.words     detail records
    dict.wordsidx  detail record offsets
    matrix.mtx     connection cost matrix

Stages run one after another and any error aborts the build. Files
written before the failure are left in place, so the output directory
must be rebuilt from scratch.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.chardef import CharacterDefinitions, CharacterDefinitionsBuilder
from ipadic_neologd_builder.entries import aggregate, load_rows, pack_keyset
from ipadic_neologd_builder.files import collect_csv_files, ensure_dir, read_utf8_file, write_bytes
from ipadic_neologd_builder.lexicon import build_index
from ipadic_neologd_builder.matrix import CostMatrix, parse_matrix, write_matrix
from ipadic_neologd_builder.store import write_values, write_words
from ipadic_neologd_builder.unknown import UnknownDictionary, parse_unk

logger = logging.getLogger(__name__)


@dataclass
class DictStats:
    """Counts from one build_dict run."""
    rows: int = 0
    entries: int = 0
    surface_forms: int = 0
    words_bytes: int = 0


class IpadicNeologdBuilder:
    """Builds the system dictionary from a source directory."""

    def __init__(
        self,
        skip_words: Iterable[str] = settings.SKIP_WORDS,
        char_replacements: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            skip_words: Surface forms to leave out of the dictionary.
            char_replacements: Code point rewrites applied to the CSV input.
                Defaults to settings.CHAR_REPLACEMENTS.
        """
        self.skip_words = tuple(skip_words)
        if char_replacements is None:
            char_replacements = settings.CHAR_REPLACEMENTS
        self.char_replacements = dict(char_replacements)

    def build_dictionary(self, input_dir: Path, output_dir: Path) -> DictStats:
        input_dir = Path(input_dir)
        output_dir = ensure_dir(output_dir)
        start_time = time.time()

        chardef = self.build_chardef(input_dir, output_dir)
        self.build_unk(input_dir, chardef, output_dir)
        stats = self.build_dict(input_dir, output_dir)
        self.build_cost_matrix(input_dir, output_dir)

        elapsed = time.time() - start_time
        logger.info(f"Build completed in {elapsed:.1f} seconds")
        return stats

    def build_chardef(self, input_dir: Path, output_dir: Path) -> CharacterDefinitions:
        logger.info("Building character definitions...")
        text = read_utf8_file(Path(input_dir) / settings.CHAR_DEF_FILE)
        chardef = CharacterDefinitionsBuilder().parse(text).build()
        write_bytes(Path(output_dir) / settings.CHAR_DEF_BIN, chardef.to_bytes())
        return chardef

    def build_unk(
        self,
        input_dir: Path,
        chardef: CharacterDefinitions,
        output_dir: Path,
    ) -> UnknownDictionary:
        logger.info("Building unknown-word dictionary...")
        text = read_utf8_file(Path(input_dir) / settings.UNK_DEF_FILE)
        unknown_dictionary = parse_unk(chardef.categories(), text)
        write_bytes(Path(output_dir) / settings.UNK_BIN, unknown_dictionary.to_bytes())
        return unknown_dictionary

    def build_dict(self, input_dir: Path, output_dir: Path) -> DictStats:
        logger.info("Building dictionary...")
        output_dir = Path(output_dir)

        paths = collect_csv_files(input_dir)
        logger.info(f"  Reading {len(paths)} CSV files")
        rows = load_rows(paths, self.char_replacements)
        logger.info(f"  Parsed {len(rows):,} rows")

        groups = aggregate(rows, self.skip_words)
        logger.info(f"  Unique surface forms: {len(groups):,}")

        words_bytes = write_words(
            output_dir / settings.DICT_WORDS,
            output_dir / settings.DICT_WORDS_IDX,
            rows,
        )

        keyset = pack_keyset(groups)
        write_bytes(output_dir / settings.DICT_DA, build_index(keyset))

        logger.info("  Writing entry values...")
        entries = write_values(output_dir / settings.DICT_VALS, groups)

        return DictStats(
            rows=len(rows),
            entries=entries,
            surface_forms=len(groups),
            words_bytes=words_bytes,
        )

    def build_cost_matrix(self, input_dir: Path, output_dir: Path) -> CostMatrix:
        logger.info("Building cost matrix...")
        text = read_utf8_file(Path(input_dir) / settings.MATRIX_DEF_FILE)
        matrix = parse_matrix(text)
        write_matrix(Path(output_dir) / settings.MATRIX_MTX, matrix)
        return matrix

    def build_user_dict(self, input_file: Path):
        raise NotImplementedError("user dictionary building is not implemented")


def build_dictionary(input_dir: Path, output_dir: Path) -> DictStats:
    """Build a dictionary with the default settings."""
    return IpadicNeologdBuilder().build_dictionary(input_dir, output_dir)
