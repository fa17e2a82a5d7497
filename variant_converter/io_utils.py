"""I/O utilities for transparent gzip handling.

Table inputs may be plain text, gzip/BGZF compressed, or standard input
('-'). Compression is detected from magic bytes rather than the name.

Example:
    for line_num, line in iter_lines(Path("calls.tsv.gz")):
        process(line)
"""

import gzip
import io
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

# Gzip magic bytes (first two bytes of gzip file)
GZIP_MAGIC = b"\x1f\x8b"

STDIO_NAME = "-"


def is_stdio(filepath: Path | str) -> bool:
    """True when the path names standard input/output."""
    return str(filepath) == STDIO_NAME


def is_gzipped(filepath: Path) -> bool:
    """Detect if a file is gzip-compressed.

    Checks magic bytes first, falls back to the extension if the file
    is too small or unreadable.

    Args:
        filepath: Path to file to check

    Returns:
        True if file is gzip-compressed
    """
    try:
        with open(filepath, "rb") as f:
            magic = f.read(2)
            if len(magic) >= 2:
                return magic == GZIP_MAGIC
    except OSError:
        pass

    return str(filepath).endswith(".gz")


def has_gz_suffix(name: str) -> bool:
    """Case-insensitive check for a trailing '.gz'."""
    return len(name) >= 3 and name[-3:].lower() == ".gz"


@contextmanager
def smart_open(filepath: Path | str) -> Iterator[IO[str]]:
    """Open a text input with automatic gzip detection.

    Args:
        filepath: Path to file (may be gzipped), or '-' for standard input

    Yields:
        Text file handle
    """
    if is_stdio(filepath):
        buffer = sys.stdin.buffer
        head = buffer.peek(2)[:2] if hasattr(buffer, "peek") else b""
        if head == GZIP_MAGIC:
            f: IO[str] = io.TextIOWrapper(gzip.GzipFile(fileobj=buffer), encoding="utf-8")
        else:
            f = io.TextIOWrapper(buffer, encoding="utf-8")
        try:
            yield f
        finally:
            f.detach()
        return

    filepath = Path(filepath)
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding="utf-8")
    else:
        f = open(filepath, "rt", encoding="utf-8")

    try:
        yield f
    finally:
        f.close()


def iter_lines(filepath: Path | str) -> Iterator[tuple[int, str]]:
    """Iterate over numbered lines with gzip auto-detection.

    Lines are stripped of trailing newlines (and carriage returns).

    Args:
        filepath: Path to file (may be gzipped), or '-'

    Yields:
        (line_num, line) tuples, numbering from 1
    """
    with smart_open(filepath) as f:
        for line_num, line in enumerate(f, 1):
            yield line_num, line.rstrip("\r\n")


def read_list(value: str, is_file: bool) -> list[str]:
    """Read a comma-separated list, or one item per line from a file.

    Empty entries and blank lines are dropped.

    Args:
        value: Comma-separated items, or a file path when is_file is set
        is_file: Interpret value as a file name

    Returns:
        List of items in the given order
    """
    if is_file:
        return [line.strip() for _, line in iter_lines(value) if line.strip()]
    return [item for item in value.split(",") if item]
