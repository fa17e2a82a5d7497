"""Ancestral-allele table parser.

Rows are whitespace-separated. The column layout is given as a
comma-separated list of names (default ``ID,CHROM,POS,AA``); each known
name has a setter that turns the tokens at the cursor into row fields.
Unknown names (e.g. ``-``) are skipped. The AA column consumes one token
per sample.

Example row for two samples with the default layout:
    rs1  chr1  100  AA  AC
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from variant_converter.exceptions import (
    ConfigurationError,
    InvalidFieldError,
    MalformedRowError,
)
from variant_converter.io_utils import iter_lines
from variant_converter.models import SiteRow

DEFAULT_COLUMNS = "ID,CHROM,POS,AA"
REQUIRED_COLUMNS = ("CHROM", "POS", "ID", "AA")


@dataclass
class RowContext:
    """Tokens of one row plus the column cursor.

    Setters read from ``tokens[cursor]`` and return the fields they set;
    the parser advances the cursor by ``consumed``.
    """

    tokens: list[str]
    cursor: int
    n_samples: int
    contigs: frozenset[str]
    line_num: int = 0

    @property
    def current(self) -> str:
        if self.cursor >= len(self.tokens):
            raise InvalidFieldError(f"missing column {self.cursor + 1}")
        return self.tokens[self.cursor]


@dataclass
class FieldSet:
    """Fields produced by a single column setter."""

    values: dict[str, object] = field(default_factory=dict)
    consumed: int = 1


Setter = Callable[[RowContext], FieldSet]


def set_chrom(ctx: RowContext) -> FieldSet:
    chrom = ctx.current
    if chrom not in ctx.contigs:
        raise InvalidFieldError(f"sequence '{chrom}' not in the reference")
    return FieldSet({"chrom": chrom})


def set_pos(ctx: RowContext) -> FieldSet:
    token = ctx.current
    try:
        pos = int(token)
    except ValueError as e:
        raise InvalidFieldError(f"could not parse position '{token}'") from e
    return FieldSet({"pos": pos})


def set_id(ctx: RowContext) -> FieldSet:
    token = ctx.current
    return FieldSet({"id": None if token == "." else token})


def set_aa(ctx: RowContext) -> FieldSet:
    """Collect one base call per sample starting at the cursor."""
    calls = ctx.tokens[ctx.cursor : ctx.cursor + ctx.n_samples]
    if len(calls) < ctx.n_samples:
        raise MalformedRowError(
            f"Too few columns for {ctx.n_samples} samples at line {ctx.line_num}"
        )
    return FieldSet({"calls": list(calls)}, consumed=ctx.n_samples)


COLUMN_SETTERS: dict[str, Setter] = {
    "CHROM": set_chrom,
    "POS": set_pos,
    "ID": set_id,
    "AA": set_aa,
}


class TableParser:
    """Parse ancestral-allele table rows into SiteRow objects.

    Usage:
        parser = TableParser("ID,CHROM,POS,AA", n_samples=2, contigs={"chr1"})
        row = parser.parse("rs1 chr1 100 AA AC")
    """

    def __init__(
        self,
        columns: str | None,
        n_samples: int,
        contigs: Iterable[str],
    ) -> None:
        """Compile the column layout.

        Args:
            columns: Comma-separated column names (None for the default)
            n_samples: Number of sample calls in the AA column
            contigs: Known contig names

        Raises:
            ConfigurationError: If a required column is missing
        """
        self.columns = [name.strip() for name in (columns or DEFAULT_COLUMNS).split(",")]
        for name in REQUIRED_COLUMNS:
            if name not in self.columns:
                raise ConfigurationError(f"Expected {name} column")
        self.n_samples = n_samples
        self.contigs = frozenset(contigs)

    def parse(self, line: str, line_num: int = 0) -> SiteRow:
        """Parse one data line.

        Args:
            line: Raw line (no trailing newline)
            line_num: Line number for diagnostics

        Returns:
            SiteRow with all fields set

        Raises:
            InvalidFieldError: If a field is unusable (row is skipped)
            MalformedRowError: If the row lacks sample columns (fatal)
        """
        ctx = RowContext(
            tokens=line.split(),
            cursor=0,
            n_samples=self.n_samples,
            contigs=self.contigs,
            line_num=line_num,
        )
        values: dict[str, object] = {}
        for name in self.columns:
            setter = COLUMN_SETTERS.get(name)
            if setter is None:
                ctx.cursor += 1
                continue
            result = setter(ctx)
            values.update(result.values)
            ctx.cursor += result.consumed

        return SiteRow(
            chrom=values["chrom"],  # type: ignore[arg-type]
            pos=values["pos"],  # type: ignore[arg-type]
            id=values["id"],  # type: ignore[arg-type]
            calls=values["calls"],  # type: ignore[arg-type]
            line_num=line_num,
        )


def iter_table_lines(filepath: Path | str) -> Iterator[tuple[int, str]]:
    """Yield (line_num, line) for data lines, skipping comments and blanks."""
    for line_num, line in iter_lines(filepath):
        if not line.strip() or line.startswith("#"):
            continue
        yield line_num, line
