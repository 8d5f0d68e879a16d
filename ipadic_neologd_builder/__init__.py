"""
ipadic-neologd-builder: IPADIC / mecab-ipadic-NEologd dictionary compiler

Compiles the CSV dictionary, character definitions, unknown-word
definitions and connection cost matrix into the binary files used by the
tokenizer's lookup path.

Basic Usage:
    from ipadic_neologd_builder import IpadicNeologdBuilder

    stats = IpadicNeologdBuilder().build_dictionary("mecab-ipadic-neologd", "out")
    print(f"{stats.entries} entries")

    from ipadic_neologd_builder import CompiledDictionary

    dictionary = CompiledDictionary.load("out")
    for entry in dictionary.lookup("すもも"):
        print(entry.word_cost, dictionary.word_details(entry.word_id.id))
"""

__version__ = "0.1.0"

from ipadic_neologd_builder.builder import DictStats, IpadicNeologdBuilder, build_dictionary
from ipadic_neologd_builder.errors import (
    ContentError,
    DictionaryBuildError,
    DictionaryIOError,
    IndexBuildError,
    ParseError,
    SerializeError,
)
from ipadic_neologd_builder.reader import CompiledDictionary

__all__ = [
    # Builder
    "IpadicNeologdBuilder",
    "DictStats",
    "build_dictionary",
    # Reader
    "CompiledDictionary",
    # Exceptions
    "DictionaryBuildError",
    "DictionaryIOError",
    "ParseError",
    "ContentError",
    "SerializeError",
    "IndexBuildError",
    # Version
    "__version__",
]
