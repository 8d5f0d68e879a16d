"""
CLI interface for ipadic-neologd-builder.

Usage:
    ipadic-neologd-builder build INPUT_DIR OUTPUT_DIR
    ipadic-neologd-builder lookup DICT_DIR すもも
    ipadic-neologd-builder lookup --prefix --json DICT_DIR すもももももも
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ipadic_neologd_builder import __version__, settings
from ipadic_neologd_builder.builder import IpadicNeologdBuilder
from ipadic_neologd_builder.entries import WordEntry
from ipadic_neologd_builder.errors import DictionaryBuildError
from ipadic_neologd_builder.reader import CompiledDictionary

logger = logging.getLogger(__name__)

DETAIL_FIELDS = (
    "pos_level1",
    "pos_level2",
    "pos_level3",
    "pos_level4",
    "conjugation_type",
    "conjugate_form",
    "base_form",
    "reading",
    "pronunciation",
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose or settings.DEBUG else logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')


# ============================================================================
# Output Formatting
# ============================================================================

def format_default(dictionary: CompiledDictionary, matches: List[Tuple[str, List[WordEntry]]]) -> str:
    """One line per entry: surface, ids, cost, then the detail fields."""
    lines = []
    for surface, entries in matches:
        for entry in entries:
            details = dictionary.word_details(entry.word_id.id)
            lines.append(
                f"{surface}\t{entry.word_id.id}\t{entry.cost_id}\t{entry.word_cost}\t"
                + ",".join(details)
            )
    return "\n".join(lines)


def format_json(dictionary: CompiledDictionary, matches: List[Tuple[str, List[WordEntry]]]) -> str:
    output = []
    for surface, entries in matches:
        for entry in entries:
            details = dictionary.word_details(entry.word_id.id)
            output.append({
                "surface": surface,
                "word_id": entry.word_id.id,
                "cost_id": entry.cost_id,
                "word_cost": entry.word_cost,
                **dict(zip(DETAIL_FIELDS, details)),
            })
    return json.dumps(output, ensure_ascii=False, indent=2)


# ============================================================================
# Commands
# ============================================================================

def cmd_build(args) -> int:
    builder = IpadicNeologdBuilder()
    if args.user_dict is not None:
        builder.build_user_dict(args.user_dict)
        return 0
    stats = builder.build_dictionary(args.input_dir, args.output_dir)
    logger.info(
        f"Wrote {stats.entries:,} entries for {stats.surface_forms:,} surface forms "
        f"to {args.output_dir}"
    )
    return 0


def cmd_lookup(args) -> int:
    dictionary = CompiledDictionary.load(args.dict_dir)
    if args.prefix:
        matches = dictionary.common_prefix_search(args.text)
    else:
        entries = dictionary.lookup(args.text)
        matches = [(args.text, entries)] if entries else []

    if not matches:
        print(f"No entries for {args.text!r}", file=sys.stderr)
        return 1

    if args.json:
        print(format_json(dictionary, matches))
    else:
        print(format_default(dictionary, matches))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipadic-neologd-builder",
        description="Compile an IPADIC / NEologd dictionary into binary tokenizer files",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"ipadic-neologd-builder {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Compile a source directory")
    build.add_argument(
        "input_dir",
        type=Path,
        nargs="?",
        default=settings.INPUT_DIR,
        help=f"Directory with char.def, unk.def, matrix.def and *.csv (default: {settings.INPUT_DIR})",
    )
    build.add_argument(
        "output_dir",
        type=Path,
        nargs="?",
        default=settings.OUTPUT_DIR,
        help=f"Directory for the binary files (default: {settings.OUTPUT_DIR})",
    )
    build.add_argument(
        "--user-dict", "-u",
        type=Path,
        help="Build a user dictionary from this CSV file instead",
    )
    build.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    build.set_defaults(func=cmd_build)

    lookup = subparsers.add_parser("lookup", help="Look up a surface form in a compiled dictionary")
    lookup.add_argument("dict_dir", type=Path, help="Compiled dictionary directory")
    lookup.add_argument("text", help="Surface form (or text, with --prefix)")
    lookup.add_argument(
        "--prefix", "-p",
        action="store_true",
        help="Show entries for every prefix of the text",
    )
    lookup.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output as JSON",
    )
    lookup.set_defaults(func=cmd_lookup)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    setup_logging(getattr(args, "verbose", False))

    try:
        return args.func(args)
    except NotImplementedError as e:
        print(f"Not implemented: {e}", file=sys.stderr)
        return 2
    except DictionaryBuildError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except AssertionError as e:
        print(f"Fatal: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
