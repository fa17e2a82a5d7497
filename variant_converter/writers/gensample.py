"""Oxford gen/sample file writers.

Output files:
- .samples manifest: two header lines, then '<name> <name> 0' per sample
- .gen matrix: one line per site, gzip-compressed unless the name lacks '.gz'

Sample manifest format:
    ID_1 ID_2 missing
    0 0 0
    NA00001 NA00001 0
"""

import gzip
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from variant_converter.exceptions import OutputWriteError

MANIFEST_HEADER = "ID_1 ID_2 missing\n0 0 0\n"


def write_sample_manifest(path: Path, samples: list[str]) -> Path:
    """Write the .samples manifest.

    Args:
        path: Output path
        samples: Sample names, in reader order

    Returns:
        Path to the written file

    Raises:
        OutputWriteError: If the file cannot be written
    """
    try:
        with open(path, "w") as f:
            f.write(MANIFEST_HEADER)
            for name in samples:
                f.write(f"{name} {name} 0\n")
    except OSError as e:
        raise OutputWriteError(f"Failed to write {path}: {e.strerror or e}") from e
    return path


class GenFileWriter:
    """Byte sink for gen lines, optionally gzip-compressed.

    Usage:
        with GenFileWriter(Path("out.gen.gz"), compressed=True) as writer:
            writer.write(line)
    """

    def __init__(self, path: Path, compressed: bool = True) -> None:
        """Open the output.

        Args:
            path: Output path
            compressed: Gzip the stream

        Raises:
            OutputWriteError: If the file cannot be opened
        """
        self.path = path
        self.compressed = compressed
        self.lines_written = 0
        try:
            self._handle: BinaryIO = (
                gzip.open(path, "wb") if compressed else open(path, "wb")  # type: ignore[assignment]
            )
        except OSError as e:
            raise OutputWriteError(f"Failed to write {path}: {e.strerror or e}") from e
        self._closed = False

    def write(self, line: str) -> None:
        """Write one rendered line verbatim (nothing for an empty line).

        Raises:
            OutputWriteError: On a failed or short write
        """
        if not line:
            return
        data = line.encode()
        try:
            written = self._handle.write(data)
        except OSError as e:
            raise OutputWriteError(f"Error writing {self.path}: {e.strerror or e}") from e
        if written != len(data):
            raise OutputWriteError(
                f"Error writing {self.path}: wrote {written} of {len(data)} bytes"
            )
        self.lines_written += 1

    def close(self) -> None:
        """Flush and close the stream.

        Raises:
            OutputWriteError: If buffered data cannot be flushed
        """
        if self._closed:
            return
        self._closed = True
        try:
            self._handle.close()
        except OSError as e:
            raise OutputWriteError(f"Error closing {self.path}: {e.strerror or e}") from e

    def __enter__(self) -> "GenFileWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
