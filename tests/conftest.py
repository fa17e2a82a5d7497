"""Pytest fixtures for variant_converter tests."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pysam
import pytest

from variant_converter.exceptions import ReferenceFetchError
from variant_converter.reference.base import ReferenceIndex


class DictReference(ReferenceIndex):
    """In-memory reference: contig name -> sequence."""

    def __init__(self, sequences: dict[str, str]) -> None:
        self.sequences = sequences
        self.closed = False

    def contigs(self) -> list[tuple[str, int]]:
        return [(name, len(seq)) for name, seq in self.sequences.items()]

    def fetch_base(self, chrom: str, pos: int) -> str:
        seq = self.sequences.get(chrom)
        if seq is None or not 1 <= pos <= len(seq):
            raise ReferenceFetchError(f"Failed to fetch {chrom}:{pos}")
        return seq[pos - 1]

    def close(self) -> None:
        self.closed = True


@dataclass
class FakeRecord:
    """Duck-typed stand-in for pysam.VariantRecord."""

    chrom: str = "chr1"
    pos: int = 100
    id: str | None = None
    ref: str = "A"
    alts: tuple[str, ...] | None = ("G",)
    qual: float | None = None
    filter: list[str] = field(default_factory=list)
    info: dict[str, Any] = field(default_factory=dict)
    samples: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def alleles(self) -> tuple[str, ...]:
        return (self.ref,) + tuple(self.alts or ())

    @property
    def start(self) -> int:
        return self.pos - 1

    @property
    def stop(self) -> int:
        return self.start + len(self.ref)


VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID=chr1,length=1000>\n"
    "##contig=<ID=chr2,length=1000>\n"
    '##FILTER=<ID=PASS,Description="All filters passed">\n'
    '##FILTER=<ID=LowQual,Description="Low quality">\n'
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Depth">\n'
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">\n'
    '##FORMAT=<ID=PL,Number=G,Type=Integer,Description="Phred-scaled likelihoods">\n'
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\tS2\tS3\n"
)

VCF_BODY = (
    "chr1\t100\trs1\tA\tG\t50\tPASS\tDP=20\tGT:PL\t0/0:0,10,100\t0/1:20,0,20\t1/1:100,10,0\n"
    "chr1\t200\t.\tC\t.\t40\tPASS\tDP=15\tGT:PL\t0/0:.\t0/0:.\t0/0:.\n"
    "chr1\t300\trs3\tG\tT\t10\tLowQual\tDP=3\tGT:PL\t./.:.\t0/1:20,0,20\t0/0:0,10,100\n"
    "chr2\t50\t.\tT\tC,A\t60\tPASS\tDP=30\tGT:PL\t1/2:.\t0/0:.\t0/1:.\n"
)


@pytest.fixture
def dict_reference() -> DictReference:
    """Two short contigs: chr1 = ACGTNACGTN, chr2 = ggggcccc (lowercase)."""
    return DictReference({"chr1": "ACGTNACGTN", "chr2": "ggggcccc"})


@pytest.fixture
def fasta_file(tmp_path: Path) -> Path:
    """Indexed FASTA with the same contigs as dict_reference."""
    fasta = tmp_path / "ref.fa"
    fasta.write_text(">chr1\nACGTNACGTN\n>chr2\nggggcccc\n")
    pysam.faidx(str(fasta))
    return fasta


@pytest.fixture
def vcf_file(tmp_path: Path) -> Path:
    """Plain-text VCF with three samples and four records."""
    vcf = tmp_path / "input.vcf"
    vcf.write_text(VCF_HEADER + VCF_BODY)
    return vcf


@pytest.fixture
def indexed_vcf(vcf_file: Path) -> Path:
    """bgzip-compressed, tabix-indexed copy of vcf_file."""
    return Path(pysam.tabix_index(str(vcf_file), preset="vcf", force=True))


@pytest.fixture
def make_record() -> type[FakeRecord]:
    """Factory for duck-typed variant records."""
    return FakeRecord
