"""VCF/BCF output for synthesized sites.

The header carries, in order: one contig line per reference sequence,
the GT FORMAT declaration, then the sample columns.
"""

from pathlib import Path
from types import TracebackType

import pysam

from variant_converter.config import OutputType
from variant_converter.exceptions import OutputWriteError
from variant_converter.models import SiteRow, SynthesizedSite
from variant_converter.reference.base import ReferenceIndex

# ALT placeholder for sites where every sample carries the reference base.
# pysam needs at least two alleles per record. In VCF text the placeholder is
# the missing ALT value and reads back with no alternate. BCF stores
# it as a literal second allele, so a BCF reader sees (REF, ".").
NO_ALT = "."


def build_header(reference: ReferenceIndex, samples: list[str]) -> pysam.VariantHeader:
    """Create an output header from the reference contigs and sample names.

    Contigs are declared first, in the reference index's own order.

    Args:
        reference: Reference index providing the contig dictionary
        samples: Sample names in AA column order

    Returns:
        Populated VariantHeader
    """
    header = pysam.VariantHeader()
    for name, length in reference.contigs():
        header.contigs.add(name, length=length)
    header.formats.add("GT", 1, "String", "Genotype")
    for sample in samples:
        header.add_sample(sample)
    return header


class VcfSiteWriter:
    """Commits synthesized sites as variant records.

    Usage:
        with VcfSiteWriter("-", OutputType.vcf, header) as writer:
            writer.write(row, site)
    """

    def __init__(
        self,
        output: Path | str,
        output_type: OutputType,
        header: pysam.VariantHeader,
    ) -> None:
        """Open the output and write the header.

        Args:
            output: Output path, or '-' for standard output
            output_type: VCF/BCF, compressed or not
            header: Header from build_header()

        Raises:
            OutputWriteError: If the output cannot be opened
        """
        self.output = str(output)
        self.samples = list(header.samples)
        self.records_written = 0
        try:
            self._vcf = pysam.VariantFile(self.output, output_type.write_mode, header=header)
        except (OSError, ValueError) as e:
            raise OutputWriteError(f"Failed to open {self.output} for writing: {e}") from e

    def write(self, row: SiteRow, site: SynthesizedSite) -> None:
        """Build and write one record.

        QUAL is left missing; only position, ID, alleles and GT are set.

        Args:
            row: Parsed table row (coordinates and ID)
            site: Synthesized alleles and genotypes
        """
        alleles = site.alleles if len(site.alleles) > 1 else [site.ref, NO_ALT]
        record = self._vcf.new_record(
            contig=row.chrom,
            start=row.pos - 1,
            stop=row.pos,
            alleles=tuple(alleles),
            id=row.id,
        )
        for sample, call in zip(self.samples, site.genotypes):
            record.samples[sample]["GT"] = call.as_tuple()

        try:
            self._vcf.write(record)
        except OSError as e:
            raise OutputWriteError(f"Error writing {self.output}: {e}") from e
        self.records_written += 1

    def close(self) -> None:
        try:
            self._vcf.close()
        except OSError as e:
            raise OutputWriteError(f"Error closing {self.output}: {e}") from e

    def __enter__(self) -> "VcfSiteWriter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
