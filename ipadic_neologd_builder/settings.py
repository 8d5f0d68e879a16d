"""
Settings and constants for the dictionary compiler.

File names and bit widths are part of the on-disk contract with the
runtime tokenizer and must not change independently of it.
"""

import os
from pathlib import Path

# Input file names
CHAR_DEF_FILE = "char.def"
UNK_DEF_FILE = "unk.def"
MATRIX_DEF_FILE = "matrix.def"
CSV_PATTERN = "*.csv"

# Output file names
CHAR_DEF_BIN = "char_def.bin"
UNK_BIN = "unk.bin"
DICT_DA = "dict.da"
DICT_VALS = "dict.vals"
DICT_WORDS = "dict.words"
DICT_WORDS_IDX = "dict.wordsidx"
MATRIX_MTX = "matrix.mtx"

# Packed index value: (base_entry_id << COUNT_BITS) | entry_count
COUNT_BITS = 5
MAX_ENTRIES_PER_KEY = (1 << COUNT_BITS) - 1

# Cost matrix slot value for pairs absent from matrix.def
COST_SENTINEL = 32767

# Word id carried by every unknown-word entry
UNKNOWN_WORD_ID = 0xFFFFFFFF

# Surface forms dropped from the dictionary (known collisions in the source data)
SKIP_WORDS = ("カブシキガイシャ", "タカラヅカカゲキダンキセイ")

# Ambiguous code points rewritten before parsing:
#   U+2015 HORIZONTAL BAR -> U+2014 EM DASH
#   U+FF5E FULLWIDTH TILDE -> U+301C WAVE DASH
CHAR_REPLACEMENTS = {
    "\u2015": "\u2014",
    "\uff5e": "\u301c",
}

# Defaults for the command line
INPUT_DIR = Path(os.environ.get("NEOLOGD_INPUT_DIR", "."))
OUTPUT_DIR = Path(os.environ.get("NEOLOGD_OUTPUT_DIR", "lindera-ipadic-neologd"))

# Debug logging
DEBUG = os.environ.get("NEOLOGD_DEBUG", "").lower() in ("1", "true", "yes")
