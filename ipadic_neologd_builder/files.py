"""
File helpers shared by the build stages.

All OS-level failures are re-raised as DictionaryIOError so callers
only have to deal with one exception family.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List

from ipadic_neologd_builder import settings
from ipadic_neologd_builder.errors import DictionaryIOError

logger = logging.getLogger(__name__)


def read_binary_file(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as err:
        raise DictionaryIOError(f"failed to read {path}: {err}") from err


def read_utf8_file(path: Path) -> str:
    """Read a whole input file as UTF-8 text."""
    data = read_binary_file(path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise DictionaryIOError(f"{path} is not valid UTF-8: {err}") from err


def collect_csv_files(input_dir: Path) -> List[Path]:
    """List the dictionary CSV files of an input directory, sorted by name."""
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise DictionaryIOError(f"input directory not found: {input_dir}")
    return sorted(input_dir.glob(settings.CSV_PATTERN))


def ensure_dir(path: Path) -> Path:
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise DictionaryIOError(f"failed to create {path}: {err}") from err
    return path


@contextmanager
def open_output(path: Path) -> Iterator[BinaryIO]:
    """
    Open an output file for binary writing.

    The file is flushed and closed when the block exits. Write errors
    raised inside the block are converted as well.
    """
    logger.debug(f"creating {path}")
    try:
        f = open(path, "wb")
    except OSError as err:
        raise DictionaryIOError(f"failed to create {path}: {err}") from err
    try:
        with f:
            yield f
    except OSError as err:
        raise DictionaryIOError(f"failed to write {path}: {err}") from err


def write_bytes(path: Path, data: bytes) -> None:
    with open_output(path) as f:
        f.write(data)
