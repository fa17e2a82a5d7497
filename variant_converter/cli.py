"""Typer CLI for the variant converter.

Usage:
    # VCF/BCF -> gen/sample (out.gen.gz + out.samples)
    variant-converter -g out input.vcf.gz

    # Explicit file pair, PL-derived probabilities, PASS sites only
    variant-converter -g out.gen,out.samples --tag PL -i 'FILTER="PASS"' input.bcf

    # Ancestral-allele table -> compressed VCF
    variant-converter --tsv2vcf calls.tsv -f ref.fa -s NA1,NA2 -o out.vcf.gz -O z
"""

import sys
import traceback
from contextlib import redirect_stdout
from typing import Annotated

import typer
from rich.markup import escape

from variant_converter import __version__
from variant_converter.config import (
    FilterLogic,
    GenSampleConfig,
    OutputType,
    SampleSelection,
    Tag,
    TsvConfig,
)
from variant_converter.exceptions import ConversionError
from variant_converter.logging_config import console, setup_logging
from variant_converter.parsers.tsv import DEFAULT_COLUMNS

app = typer.Typer(
    name="variant-converter",
    help="Convert VCF/BCF to gen/sample files and ancestral-allele tables to VCF/BCF",
    add_completion=False,
)

FILTER_KEY = "site_filter"


def _filter_option(logic: FilterLogic):
    """Build a callback recording the last -i/-e given on the command line."""

    def callback(ctx: typer.Context, value: str | None) -> str | None:
        if value is not None:
            ctx.meta[FILTER_KEY] = (logic, value)
        return value

    return callback


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"variant-converter {__version__}")
        raise typer.Exit()


def _usage(ctx: typer.Context, message: str | None = None) -> None:
    """Print usage to stderr and exit 1."""
    if message:
        typer.echo(f"Error: {message}", err=True)
    # Rich help is printed to stdout rather than returned
    with redirect_stdout(sys.stderr):
        help_text = ctx.get_help()
    if help_text:
        typer.echo(help_text, err=True)
    raise typer.Exit(code=1)


def _help_callback(ctx: typer.Context, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        _usage(ctx)


def _fail(error: BaseException, verbose: bool) -> None:
    out = console()
    out.print(f"[red]ERROR:[/red] {escape(str(error))}")
    if verbose:
        out.print(escape(traceback.format_exc()))
    raise typer.Exit(code=1)


def _sample_selection(samples: str | None, samples_file: str | None) -> SampleSelection | None:
    if samples_file is not None:
        return SampleSelection(samples_file, is_file=True)
    if samples is not None:
        return SampleSelection(samples)
    return None


@app.command(context_settings={"help_option_names": []})
def convert(
    ctx: typer.Context,
    input_file: Annotated[
        str | None,
        typer.Argument(help="Input VCF/BCF for --gensample ('-' for stdin)", show_default=False),
    ] = None,
    gensample: Annotated[
        str | None,
        typer.Option(
            "--gensample", "-g",
            help="<prefix> or <gen-file>,<sample-file>",
            rich_help_panel="gen/sample options",
        ),
    ] = None,
    tag: Annotated[
        str | None,
        typer.Option(
            "--tag",
            help="Tag to take values for the .gen file: GT or PL [GT]",
            rich_help_panel="gen/sample options",
        ),
    ] = None,
    tsv2vcf: Annotated[
        str | None,
        typer.Option(
            "--tsv2vcf",
            help="Ancestral-allele table to convert ('-' for stdin)",
            rich_help_panel="tsv options",
        ),
    ] = None,
    columns: Annotated[
        str,
        typer.Option(
            "--columns", "-c",
            help="Columns of the input tsv file",
            rich_help_panel="tsv options",
        ),
    ] = DEFAULT_COLUMNS,
    fasta_ref: Annotated[
        str | None,
        typer.Option(
            "--fasta-ref", "--ref", "-f",
            help="Reference sequence in fasta format",
            rich_help_panel="tsv options",
        ),
    ] = None,
    include: Annotated[
        str | None,
        typer.Option(
            "--include", "-i",
            help="Select sites for which the expression is true",
            callback=_filter_option(FilterLogic.INCLUDE),
            rich_help_panel="VCF input options",
        ),
    ] = None,
    exclude: Annotated[
        str | None,
        typer.Option(
            "--exclude", "-e",
            help="Exclude sites for which the expression is true",
            callback=_filter_option(FilterLogic.EXCLUDE),
            rich_help_panel="VCF input options",
        ),
    ] = None,
    regions: Annotated[
        str | None,
        typer.Option(
            "--regions", "-r",
            help="Restrict to comma-separated list of regions",
            rich_help_panel="VCF input options",
        ),
    ] = None,
    regions_file: Annotated[
        str | None,
        typer.Option(
            "--regions-file", "-R",
            help="Restrict to regions listed in a file",
            rich_help_panel="VCF input options",
        ),
    ] = None,
    targets: Annotated[
        str | None,
        typer.Option(
            "--targets", "-t",
            help="Similar to -r but streams rather than index-jumps",
            rich_help_panel="VCF input options",
        ),
    ] = None,
    targets_file: Annotated[
        str | None,
        typer.Option(
            "--targets-file", "-T",
            help="Similar to -R but streams rather than index-jumps",
            rich_help_panel="VCF input options",
        ),
    ] = None,
    samples: Annotated[
        str | None,
        typer.Option(
            "--samples", "-s",
            help="List of samples to include (or sample names for --tsv2vcf)",
        ),
    ] = None,
    samples_file: Annotated[
        str | None,
        typer.Option(
            "--samples-file", "-S",
            help="File of samples to include (or sample names for --tsv2vcf)",
        ),
    ] = None,
    output: Annotated[
        str,
        typer.Option(
            "--output", "-o",
            help="Write VCF/BCF output to a file",
            rich_help_panel="VCF output options",
        ),
    ] = "-",
    output_type: Annotated[
        str,
        typer.Option(
            "--output-type", "-O",
            help="b: compressed BCF, u: uncompressed BCF, z: compressed VCF, v: uncompressed VCF",
            rich_help_panel="VCF output options",
        ),
    ] = "v",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show the version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
    show_help: Annotated[
        bool,
        typer.Option(
            "--help", "-h",
            help="Show this message and exit",
            callback=_help_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Convert between VCF/BCF and related formats.

    Exactly one of --gensample or --tsv2vcf selects the conversion.
    """
    from variant_converter.main import run_gensample, run_tsv2vcf

    setup_logging(verbose)

    if gensample is not None and tsv2vcf is not None:
        _usage(ctx, "--gensample and --tsv2vcf cannot be combined")
    if gensample is None and tsv2vcf is None:
        _usage(ctx)

    filter_logic, filter_expr = ctx.meta.get(FILTER_KEY, (FilterLogic.INCLUDE, None))
    selection = _sample_selection(samples, samples_file)
    out = console()

    try:
        if gensample is not None:
            if input_file is None and not sys.stdin.isatty():
                input_file = "-"
            if input_file is None:
                _usage(ctx, "Missing the input file")

            config = GenSampleConfig(
                input_file=input_file,  # type: ignore[arg-type]
                output=gensample,
                tag=Tag.parse(tag),
                filter_expr=filter_expr,
                filter_logic=filter_logic,
                regions=regions_file if regions_file is not None else regions,
                regions_is_file=regions_file is not None,
                targets=targets_file if targets_file is not None else targets,
                targets_is_file=targets_file is not None,
                samples=selection,
                verbose=verbose,
            )
            errors = config.validate()
            if errors:
                for error in errors:
                    out.print(f"[red]ERROR:[/red] {escape(error)}")
                raise typer.Exit(code=1)
            run_gensample(config)
        else:
            config_tsv = TsvConfig(
                input_file=tsv2vcf,  # type: ignore[arg-type]
                ref_file=fasta_ref,  # type: ignore[arg-type]
                samples=selection,
                columns=columns,
                output=output,
                output_type=OutputType.parse(output_type),
                verbose=verbose,
            )
            errors = config_tsv.validate()
            if errors:
                for error in errors:
                    out.print(f"[red]ERROR:[/red] {escape(error)}")
                raise typer.Exit(code=1)
            run_tsv2vcf(config_tsv)
    except (ConversionError, OSError, ValueError) as e:
        _fail(e, verbose)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
