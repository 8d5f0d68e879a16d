"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ipadic_neologd_builder.builder import IpadicNeologdBuilder


CHAR_DEF = """\
# category  invoke group length
DEFAULT     0 1 0
SPACE       0 1 0
HIRAGANA    1 1 0
KATAKANA    1 1 0
KANJI       0 0 2

0x0020 SPACE
0x3041..0x309F HIRAGANA
0x30A1..0x30FF KATAKANA
0x30FC HIRAGANA KATAKANA  # prolonged sound mark
0x4E00..0x9FFF KANJI
"""

UNK_DEF = """\
DEFAULT,5,5,4769,記号,一般,*,*,*,*,*
SPACE,9,9,8903,記号,空白,*,*,*,*,*
HIRAGANA,1283,1283,4500,名詞,一般,*,*,*,*,*
KATAKANA,1285,1285,4500,名詞,一般,*,*,*,*,*
KANJI,1285,1285,11426,名詞,一般,*,*,*,*,*
KANJI,1283,1283,17290,名詞,サ変接続,*,*,*,*,*
"""

MATRIX_DEF = "3 3\n0 0 100\n1 2 -50\n"

# Rows 0-2
CSV_A = """\
すもも,100,200,300,名詞,一般,*,*,*,*,すもも,スモモ,スモモ
もも,1285,1285,7219,名詞,一般,*,*,*,*,もも,モモ,モモ
も,262,262,4669,助詞,係助詞,*,*,*,*,も,モ,モ
"""

# Rows 3-7; row 6 is on the skip list, row 7 contains U+FF5E
CSV_B = (
    "の,368,368,4816,助詞,格助詞,一般,*,*,*,の,ノ,ノ\r\n"
    "うち,1313,1313,5905,名詞,非自立,副詞可能,*,*,*,うち,ウチ,ウチ\r\n"
    "も,438,438,-6000,助詞,副助詞,*,*,*,*,も,モ,モ\r\n"
    "カブシキガイシャ,1285,1285,3000,名詞,固有名詞,組織,*,*,*,"
    "カブシキガイシャ,カブシキガイシャ,カブシキガイシャ\r\n"
    "波\uff5e,5,5,100,記号,一般,*,*,*,*,波\uff5e,ナミ,ナミ\r\n"
)

SOURCE_ROW_COUNT = 8
SKIPPED_ROW = 6


def write_source_dir(path: Path, csv_files=None) -> Path:
    """Write a complete dictionary source directory."""
    if csv_files is None:
        csv_files = {"a.csv": CSV_A, "b.csv": CSV_B}
    path.mkdir(parents=True, exist_ok=True)
    (path / "char.def").write_text(CHAR_DEF, encoding="utf-8")
    (path / "unk.def").write_text(UNK_DEF, encoding="utf-8")
    (path / "matrix.def").write_text(MATRIX_DEF, encoding="utf-8")
    for name, content in csv_files.items():
        (path / name).write_bytes(content.encode("utf-8"))
    return path


@pytest.fixture
def source_dir(tmp_path):
    """Source directory with two CSV files."""
    return write_source_dir(tmp_path / "src")


@pytest.fixture
def built_dir(source_dir, tmp_path):
    """Output directory of a successful build of source_dir."""
    output_dir = tmp_path / "out"
    IpadicNeologdBuilder().build_dictionary(source_dir, output_dir)
    return output_dir
