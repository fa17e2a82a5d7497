"""FASTA reference backed by pysam.

The .fai index is created by htslib on first open when it is missing.
"""

from pathlib import Path

import pysam

from variant_converter.exceptions import ReferenceFetchError
from variant_converter.reference.base import ReferenceIndex


class FastaReference(ReferenceIndex):
    """faidx-indexed FASTA reference (plain or bgzip-compressed)."""

    def __init__(self, filepath: Path) -> None:
        """Open the reference and its index.

        Args:
            filepath: Path to FASTA file

        Raises:
            ReferenceFetchError: If the reference or its index cannot be loaded
        """
        self.filepath = Path(filepath)
        try:
            self._fasta = pysam.FastaFile(str(self.filepath))
        except (OSError, ValueError) as e:
            raise ReferenceFetchError(
                f"Could not load the reference {self.filepath}: {e}"
            ) from e
        self._contigs = list(zip(self._fasta.references, self._fasta.lengths))
        self._names = {name for name, _ in self._contigs}

    def contigs(self) -> list[tuple[str, int]]:
        return list(self._contigs)

    def fetch_base(self, chrom: str, pos: int) -> str:
        if chrom not in self._names:
            raise ReferenceFetchError(f"Failed to fetch {chrom}:{pos}: unknown sequence")
        try:
            seq = self._fasta.fetch(chrom, pos - 1, pos)
        except (KeyError, ValueError, IndexError) as e:
            raise ReferenceFetchError(f"Failed to fetch {chrom}:{pos}: {e}") from e
        if not seq:
            raise ReferenceFetchError(f"Failed to fetch {chrom}:{pos}: outside the sequence")
        return seq[0]

    def __contains__(self, chrom: str) -> bool:
        return chrom in self._names

    def close(self) -> None:
        self._fasta.close()
