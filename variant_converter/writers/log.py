"""Run summaries printed at the end of a conversion."""

from rich.console import Console

from variant_converter.config import GenSampleOutputs
from variant_converter.models import GenotypeTally


def print_summary(tally: GenotypeTally, console: Console) -> None:
    """Print the six table-conversion counters, one per line.

    Args:
        tally: Counters collected during the run
        console: Console bound to standard error
    """
    for label, value in tally.as_rows():
        console.print(f"{label} \t{value}", highlight=False, markup=False)


def print_gensample_summary(
    sites_written: int,
    records_seen: int,
    outputs: GenSampleOutputs,
    console: Console,
) -> None:
    """Print the gen/sample output locations and site count."""
    console.print(f"Records read:   {records_seen:,}", highlight=False)
    console.print(f"Sites written:  {sites_written:,}", highlight=False)
    console.print(f"  Gen file:     {outputs.gen_file}", highlight=False)
    console.print(f"  Sample file:  {outputs.sample_file}", highlight=False)
