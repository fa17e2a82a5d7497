"""Variant record source.

Wraps a pysam reader with the two restriction modes:
- regions: index jumps, one fetch per merged interval (needs an index)
- targets: streamed, every record is read and tested for overlap
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pysam

from variant_converter.exceptions import ConfigurationError, ConversionError
from variant_converter.parsers.regions import RegionSet

logger = logging.getLogger(__name__)


def open_variant_file(path: Path | str) -> pysam.VariantFile:
    """Open a VCF/BCF file (or '-') for reading.

    Raises:
        ConversionError: If the file cannot be opened or parsed
    """
    try:
        return pysam.VariantFile(str(path))
    except (OSError, ValueError) as e:
        raise ConversionError(f"Failed to open {path}: {e}") from e


def _fetch_regions(
    variant_file: pysam.VariantFile,
    regions: RegionSet,
) -> Iterator[pysam.VariantRecord]:
    if regions.negated:
        raise ConfigurationError("Negated regions are not supported, use targets (-t/-T)")
    if variant_file.index is None:
        raise ConfigurationError(
            f"Failed to open or the file not indexed: {variant_file.filename.decode()}"
        )

    known = set(variant_file.header.contigs)
    prev_chrom: str | None = None
    prev_end: int | None = None

    for region in regions.regions:
        if region.chrom not in known:
            logger.debug("Region contig %s not in the header, skipping", region.chrom)
            continue
        contig, start, end = region.fetch_args()
        for record in variant_file.fetch(contig, start, end):
            # A record spanning two intervals was already emitted by the first
            if contig == prev_chrom and prev_end is not None and record.start < prev_end:
                continue
            yield record
        prev_chrom, prev_end = contig, region.end


def iter_records(
    variant_file: pysam.VariantFile,
    regions: RegionSet | None = None,
    targets: RegionSet | None = None,
) -> Iterator[pysam.VariantRecord]:
    """Stream records, honouring regions and targets.

    Args:
        variant_file: Open reader
        regions: Index-jump restriction
        targets: Streamed restriction (may be negated)

    Yields:
        Records in file order (region order when regions are given)
    """
    records: Iterator[pysam.VariantRecord]
    if regions is not None:
        records = _fetch_regions(variant_file, regions)
    else:
        records = iter(variant_file)

    for record in records:
        if targets is not None and not targets.accepts(record.chrom, record.start + 1, record.stop):
            continue
        yield record
