"""Configuration dataclasses for the variant converter.

One dataclass per conversion mode. Validation collects every problem
up front so that a bad invocation fails before any output is written.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from variant_converter.exceptions import ConfigurationError
from variant_converter.io_utils import has_gz_suffix, is_stdio
from variant_converter.parsers.tsv import DEFAULT_COLUMNS

GEN_SUFFIX = ".gen.gz"
SAMPLE_SUFFIX = ".samples"


class Tag(str, Enum):
    """FORMAT field feeding the gen probability triples."""

    GT = "GT"
    PL = "PL"

    @classmethod
    def parse(cls, value: str | None) -> "Tag":
        """Resolve a --tag value, defaulting to GT.

        Raises:
            ConfigurationError: If the tag is not supported
        """
        if value is None:
            return cls.GT
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported --tag {value}; expected one of: "
                f"{', '.join(t.value for t in cls)}"
            ) from None


class OutputType(str, Enum):
    """Variant output type selected by -O."""

    bcf = "b"
    ubcf = "u"
    vcf_gz = "z"
    vcf = "v"

    @property
    def write_mode(self) -> str:
        """pysam.VariantFile mode string."""
        modes = {
            "b": "wb",
            "u": "wbu",
            "z": "wz",
            "v": "w",
        }
        return modes[self.value]

    @classmethod
    def parse(cls, value: str | None) -> "OutputType":
        if value is None:
            return cls.vcf
        try:
            return cls(value[:1])
        except ValueError:
            raise ConfigurationError(
                f'The output type "{value}" not recognised'
            ) from None


class FilterLogic(str, Enum):
    """Whether records matching the filter expression are kept or dropped."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


@dataclass(slots=True)
class SampleSelection:
    """Requested sample subset.

    Attributes:
        value: Comma-separated names, a file name, or '-' for all samples.
            A leading '^' negates the list.
        is_file: value names a file with one sample per line
    """

    value: str
    is_file: bool = False

    @property
    def negated(self) -> bool:
        return self.value.startswith("^")

    @property
    def selects_all(self) -> bool:
        return self.value == "-"

    @property
    def body(self) -> str:
        """The list or file name without the negation prefix."""
        return self.value[1:] if self.negated else self.value


@dataclass(slots=True)
class GenSampleOutputs:
    """Output file pair for gen/sample conversion."""

    gen_file: Path
    sample_file: Path
    compressed: bool = True


def resolve_gensample_outputs(value: str) -> GenSampleOutputs:
    """Derive gen/sample file names from a -g argument.

    Args:
        value: Either '<gen-file>,<sample-file>' or a common prefix

    Returns:
        GenSampleOutputs; an explicit gen file is compressed only when its
        name ends in '.gz'

    Example:
        >>> resolve_gensample_outputs("out")
        GenSampleOutputs(gen_file=PosixPath('out.gen.gz'), sample_file=PosixPath('out.samples'), compressed=True)
        >>> resolve_gensample_outputs("a.gen,a.samples").compressed
        False
    """
    gen_name, sep, sample_name = value.partition(",")
    if sep:
        return GenSampleOutputs(
            gen_file=Path(gen_name),
            sample_file=Path(sample_name),
            compressed=has_gz_suffix(gen_name),
        )
    return GenSampleOutputs(
        gen_file=Path(f"{value}{GEN_SUFFIX}"),
        sample_file=Path(f"{value}{SAMPLE_SUFFIX}"),
        compressed=True,
    )


@dataclass
class GenSampleConfig:
    """Configuration for VCF/BCF -> gen/sample conversion.

    Attributes:
        input_file: Variant file path or '-'
        output: -g argument (prefix or gen,sample pair)
        tag: FORMAT field feeding the probability triples
        filter_expr: Site filter expression (None to keep all sites)
        filter_logic: Include or exclude sites matching filter_expr
        regions: -r/-R argument (index jumps)
        regions_is_file: regions names a file
        targets: -t/-T argument (streamed)
        targets_is_file: targets names a file
        samples: Requested sample subset (None for all)
        verbose: Enable debug logging
    """

    input_file: str
    output: str
    tag: Tag = Tag.GT
    filter_expr: str | None = None
    filter_logic: FilterLogic = FilterLogic.INCLUDE
    regions: str | None = None
    regions_is_file: bool = False
    targets: str | None = None
    targets_is_file: bool = False
    samples: SampleSelection | None = None
    verbose: bool = False

    @property
    def outputs(self) -> GenSampleOutputs:
        return resolve_gensample_outputs(self.output)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors: list[str] = []

        if not is_stdio(self.input_file) and not Path(self.input_file).exists():
            errors.append(f"Input file not found: {self.input_file}")

        if not self.output:
            errors.append("Missing the output prefix for --gensample")
        else:
            outputs = self.outputs
            if not outputs.gen_file.name or not outputs.sample_file.name:
                errors.append(f"Could not derive output names from '{self.output}'")

        if self.regions is not None and is_stdio(self.input_file):
            errors.append("Regions require an indexed file, not standard input")

        if self.filter_expr is not None and not self.filter_expr.strip():
            errors.append("Empty filter expression")

        return errors


@dataclass
class TsvConfig:
    """Configuration for ancestral-allele table -> VCF/BCF conversion.

    Attributes:
        input_file: Table path or '-'
        ref_file: Reference FASTA (faidx-indexed or indexable)
        samples: Sample names, in AA column order
        columns: Column layout of the table
        output: Output path or '-'
        output_type: Variant output type
        verbose: Enable debug logging
    """

    input_file: str
    ref_file: Path | None = None
    samples: SampleSelection | None = None
    columns: str = DEFAULT_COLUMNS
    output: str = "-"
    output_type: OutputType = OutputType.vcf
    verbose: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.ref_file, str):
            self.ref_file = Path(self.ref_file)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors: list[str] = []

        if self.ref_file is None:
            errors.append("Missing the --fasta-ref option")
        elif not self.ref_file.exists():
            errors.append(f"Reference file not found: {self.ref_file}")

        if self.samples is None:
            errors.append("Missing the --samples option")
        elif self.samples.negated or self.samples.selects_all:
            errors.append("Sample names must be listed explicitly for --tsv2vcf")

        if not is_stdio(self.input_file) and not Path(self.input_file).exists():
            errors.append(f"Input file not found: {self.input_file}")

        return errors
