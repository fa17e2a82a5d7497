"""Main orchestration for the variant converter.

Two modes, one per run:
- run_gensample(): VCF/BCF -> .gen matrix + .samples manifest
- run_tsv2vcf(): ancestral-allele table + reference FASTA -> VCF/BCF

Each mode has a streaming core (convert_records / convert_table) that
works on already-opened collaborators and is exercised directly by tests.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from variant_converter.builder import build_site
from variant_converter.config import GenSampleConfig, TsvConfig
from variant_converter.exceptions import ConfigurationError, InvalidFieldError
from variant_converter.filters import SiteFilter
from variant_converter.formatters import LineFormatter, gen_template
from variant_converter.io_utils import read_list
from variant_converter.logging_config import console
from variant_converter.models import GenotypeTally, StreamStats
from variant_converter.parsers.regions import parse_region_list
from variant_converter.parsers.tsv import TableParser, iter_table_lines
from variant_converter.reference.base import ReferenceIndex
from variant_converter.reference.fasta import FastaReference
from variant_converter.samples import apply_sample_selection
from variant_converter.source import iter_records, open_variant_file
from variant_converter.writers.gensample import GenFileWriter, write_sample_manifest
from variant_converter.writers.log import print_gensample_summary, print_summary
from variant_converter.writers.vcf import VcfSiteWriter, build_header

logger = logging.getLogger(__name__)


def _progress() -> Progress:
    """Spinner with a running count; silent when stderr is not a terminal."""
    out = console()
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TextColumn("{task.completed:,}"),
        TimeElapsedColumn(),
        console=out,
        transient=True,
        disable=not out.is_terminal,
    )


def convert_records(
    records: Iterable[Any],
    formatter: LineFormatter,
    writer: GenFileWriter,
    stats: StreamStats,
    site_filter: SiteFilter | None = None,
    on_record: Callable[[], None] | None = None,
) -> StreamStats:
    """Stream records through filter and formatter into the gen sink.

    Records without an alternate allele are skipped before the filter is
    consulted; filtered records leave no trace beyond the counters.

    Args:
        records: Variant records in source order
        formatter: Compiled gen-line formatter
        writer: Open gen sink
        stats: Counters (updated in place)
        site_filter: Include/exclude filter, or None to keep every site
        on_record: Called once per record read (progress reporting)

    Returns:
        The updated stats
    """
    for record in records:
        stats.records_read += 1
        if on_record is not None:
            on_record()

        if len(record.alleles) == 1:
            stats.monomorphic += 1
            continue

        if site_filter is not None and not site_filter.passes(record):
            stats.filtered += 1
            continue

        line = formatter.format(record)
        if line:
            writer.write(line)
            stats.written += 1

    return stats


def run_gensample(config: GenSampleConfig) -> StreamStats:
    """Convert a VCF/BCF into gen/sample files.

    Order of work: compile the filter and region lists, open the reader
    and restrict samples, write the manifest, then stream the matrix.

    Args:
        config: Gen/sample configuration

    Returns:
        Conversion counters

    Raises:
        ConversionError: On any fatal configuration or I/O problem
    """
    template = gen_template(config.tag)
    site_filter = (
        SiteFilter(config.filter_expr, config.filter_logic) if config.filter_expr else None
    )
    regions = parse_region_list(config.regions, config.regions_is_file)
    targets = parse_region_list(config.targets, config.targets_is_file)
    outputs = config.outputs

    stats = StreamStats()
    variant_file = open_variant_file(config.input_file)
    try:
        layout = apply_sample_selection(variant_file, config.samples)
        formatter = LineFormatter(template, layout.output_samples)

        write_sample_manifest(outputs.sample_file, layout.store_samples)
        logger.debug("Wrote %d sample(s) to %s", len(layout.store_samples), outputs.sample_file)

        with GenFileWriter(outputs.gen_file, outputs.compressed) as writer, _progress() as progress:
            task = progress.add_task("Converting records...", total=None)
            convert_records(
                iter_records(variant_file, regions, targets),
                formatter,
                writer,
                stats,
                site_filter=site_filter,
                on_record=lambda: progress.advance(task),
            )
    finally:
        variant_file.close()

    logger.debug(
        "Skipped %d monomorphic and %d filtered record(s)", stats.monomorphic, stats.filtered
    )
    print_gensample_summary(stats.written, stats.records_read, outputs, console())
    return stats


def convert_table(
    lines: Iterable[tuple[int, str]],
    parser: TableParser,
    reference: ReferenceIndex,
    writer: VcfSiteWriter,
    tally: GenotypeTally,
    on_row: Callable[[], None] | None = None,
) -> GenotypeTally:
    """Synthesize and write one record per accepted table row.

    Rows with an unusable field or a non-SNP call are counted as skipped.

    Args:
        lines: (line_num, line) pairs, comments already removed
        parser: Column parser for the table layout
        reference: Reference index for REF bases
        writer: Open record writer
        tally: Run-wide counters (updated in place)
        on_row: Called once per row (progress reporting)

    Returns:
        The updated tally

    Raises:
        MalformedRowError: If a row lacks sample columns or has an over-long call
        ReferenceFetchError: If a row's coordinate is outside the reference
    """
    for line_num, line in lines:
        tally.total += 1
        if on_row is not None:
            on_row()

        try:
            row = parser.parse(line, line_num)
        except InvalidFieldError as e:
            logger.debug("Skipping line %d: %s", line_num, e)
            tally.skipped += 1
            continue

        site = build_site(row, reference, tally)
        if site is None:
            tally.skipped += 1
            continue

        writer.write(row, site)

    return tally


def _read_tsv_samples(config: TsvConfig) -> list[str]:
    assert config.samples is not None  # Checked by TsvConfig.validate()
    try:
        samples = read_list(config.samples.value, config.samples.is_file)
    except OSError as e:
        raise ConfigurationError(f"Could not parse {config.samples.value}: {e}") from e
    if not samples:
        raise ConfigurationError(f"No sample names in {config.samples.value}")
    duplicates = sorted({s for s in samples if samples.count(s) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate sample name(s): {', '.join(duplicates)}")
    return samples


def run_tsv2vcf(config: TsvConfig) -> GenotypeTally:
    """Convert an ancestral-allele table into VCF/BCF.

    Args:
        config: Table conversion configuration

    Returns:
        Run-wide genotype tally (also printed to stderr)

    Raises:
        ConversionError: On any fatal configuration, input or I/O problem
    """
    assert config.ref_file is not None  # Checked by TsvConfig.validate()
    samples = _read_tsv_samples(config)
    tally = GenotypeTally()

    with FastaReference(config.ref_file) as reference:
        contigs = [name for name, _ in reference.contigs()]
        logger.debug("Loaded %d contig(s) from %s", len(contigs), config.ref_file)

        parser = TableParser(config.columns, len(samples), contigs)
        header = build_header(reference, samples)

        with VcfSiteWriter(config.output, config.output_type, header) as writer, _progress() as progress:
            task = progress.add_task("Synthesizing records...", total=None)
            convert_table(
                iter_table_lines(config.input_file),
                parser,
                reference,
                writer,
                tally,
                on_row=lambda: progress.advance(task),
            )
        logger.debug("Wrote %d record(s) to %s", writer.records_written, config.output)

    print_summary(tally, console())
    return tally
