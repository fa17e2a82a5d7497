"""Data models for the variant converter.

Row-level structures produced by the table parser and the genotype
synthesizer, plus the run-wide genotype tally reported at the end of a
table conversion.
"""

from dataclasses import dataclass, field
from enum import IntEnum


class Base(IntEnum):
    """Five-symbol nucleotide alphabet used for allele slots."""

    A = 0
    C = 1
    G = 2
    T = 3
    N = 4

    @property
    def symbol(self) -> str:
        """Single-letter representation of the base."""
        return self.name


@dataclass(slots=True)
class GenotypeCall:
    """Genotype code pair for one sample.

    Attributes:
        first: Allele index of the first base
        second: Allele index of the second base, or None for a haploid call
    """

    first: int
    second: int | None = None

    @property
    def is_haploid(self) -> bool:
        """True when the call carries a single allele."""
        return self.second is None

    def as_tuple(self) -> tuple[int, ...]:
        """Return allele indices as written to the GT field."""
        if self.second is None:
            return (self.first,)
        return (self.first, self.second)


@dataclass(slots=True)
class SiteRow:
    """One parsed row of the ancestral-allele table.

    Attributes:
        chrom: Contig name (present in the reference)
        pos: 1-based position
        id: Variant identifier, or None when missing
        calls: Raw base call per sample, in declared sample order
        line_num: Input line number, for diagnostics
    """

    chrom: str
    pos: int
    id: str | None
    calls: list[str]
    line_num: int = 0


@dataclass
class SynthesizedSite:
    """Alleles and genotypes ready to commit into a variant record.

    Attributes:
        alleles: Reference allele followed by alternates in allele-index order
        genotypes: One GenotypeCall per sample
    """

    alleles: list[str]
    genotypes: list[GenotypeCall] = field(default_factory=list)

    @property
    def ref(self) -> str:
        return self.alleles[0]

    @property
    def alts(self) -> list[str]:
        return self.alleles[1:]


@dataclass
class GenotypeTally:
    """Run-wide counters for a table conversion.

    total and skipped count rows; the four genotype classes count
    sample calls, classified against the reference base.
    """

    total: int = 0
    skipped: int = 0
    hom_rr: int = 0
    het_ra: int = 0
    hom_aa: int = 0
    het_aa: int = 0

    @property
    def written(self) -> int:
        """Rows that produced a record."""
        return self.total - self.skipped

    @property
    def genotypes(self) -> int:
        """Total sample calls classified."""
        return self.hom_rr + self.het_ra + self.hom_aa + self.het_aa

    def as_rows(self) -> list[tuple[str, int]]:
        """Summary lines in reporting order."""
        return [
            ("Rows total:", self.total),
            ("Rows skipped:", self.skipped),
            ("Hom RR:", self.hom_rr),
            ("Het RA:", self.het_ra),
            ("Hom AA:", self.hom_aa),
            ("Het AA:", self.het_aa),
        ]


@dataclass(slots=True)
class Region:
    """Genomic interval, 1-based and inclusive.

    end is None for an open-ended interval.
    """

    chrom: str
    start: int = 1
    end: int | None = None

    def overlaps(self, chrom: str, start: int, stop: int) -> bool:
        """Check overlap with a 1-based inclusive span."""
        if chrom != self.chrom or stop < self.start:
            return False
        return self.end is None or start <= self.end

    def fetch_args(self) -> tuple[str, int, int | None]:
        """Return (contig, 0-based start, end) for an indexed fetch."""
        return self.chrom, self.start - 1, self.end


@dataclass
class StreamStats:
    """Counters for a gen/sample conversion."""

    records_read: int = 0
    monomorphic: int = 0
    filtered: int = 0
    written: int = 0
