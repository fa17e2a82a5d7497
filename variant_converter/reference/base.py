"""Abstract base class for reference sequence indexes.

Defines the two queries the converter needs: the contig dictionary (for
the output header) and single-base lookup (for the reference allele of
each table row).
"""

from abc import ABC, abstractmethod
from types import TracebackType


class ReferenceIndex(ABC):
    """Random access to a reference genome.

    Subclasses wrap a concrete index (e.g. a faidx-indexed FASTA).
    Implements the context manager protocol so the index is released
    exactly once.
    """

    @abstractmethod
    def contigs(self) -> list[tuple[str, int]]:
        """Return (name, length) for every sequence in native index order."""

    @abstractmethod
    def fetch_base(self, chrom: str, pos: int) -> str:
        """Return the base at a 1-based position.

        Args:
            chrom: Contig name
            pos: 1-based position

        Returns:
            Single base character, case as stored

        Raises:
            ReferenceFetchError: If the coordinate cannot be served
        """

    def close(self) -> None:
        """Release the underlying index."""

    def __contains__(self, chrom: str) -> bool:
        return any(name == chrom for name, _ in self.contigs())

    def __enter__(self) -> "ReferenceIndex":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
