"""Template-driven line formatting for variant records.

A template mixes literal text with ``%DIRECTIVE`` fields; a backslash
escapes the next character (needed to put '_' right after a field name).
The template is compiled once; rendering a record is a join over the
compiled pieces.

Gen lines use:

    %CHROM:%POS\\_%REF\\_%FIRST_ALT %_CHROM_POS_ID %POS %REF %FIRST_ALT%_GT_TO_PROB3
"""

from collections.abc import Callable
from typing import Any

import numpy as np

from variant_converter.config import Tag
from variant_converter.exceptions import ConfigurationError, FormatterError

Renderer = Callable[[Any], str]

MISSING_TRIPLE = " 0.33 0.33 0.33"

GEN_TEMPLATE = "%CHROM:%POS\\_%REF\\_%FIRST_ALT %_CHROM_POS_ID %POS %REF %FIRST_ALT"

_TAG_DIRECTIVES = {
    Tag.GT: "%_GT_TO_PROB3",
    Tag.PL: "%_PL_TO_PROB3",
}


def gen_template(tag: Tag) -> str:
    """Full gen-line template for a probability source tag."""
    return f"{GEN_TEMPLATE}{_TAG_DIRECTIVES[tag]}\n"


def _first_alt(record: Any) -> str:
    return record.alts[0] if record.alts else "."


def _chrom_pos_id(record: Any) -> str:
    """Record ID, or CHROM:POS when the ID is missing."""
    if record.id:
        return record.id
    return f"{record.chrom}:{record.pos}"


_SITE_FIELDS: dict[str, Renderer] = {
    "CHROM": lambda r: r.chrom,
    "POS": lambda r: str(r.pos),
    "ID": lambda r: r.id or ".",
    "REF": lambda r: r.ref,
    "FIRST_ALT": _first_alt,
    "_CHROM_POS_ID": _chrom_pos_id,
}


def gt_to_prob3(gt: tuple[int | None, ...] | None) -> str:
    """Encode a genotype as a hom-ref/het/hom-alt probability triple.

    Args:
        gt: Allele indices from the GT field (None entries are missing)

    Returns:
        Triple with a leading space, e.g. " 0 1 0"

    Raises:
        FormatterError: If the ploidy is above two
    """
    if not gt or any(a is None for a in gt):
        return MISSING_TRIPLE
    if len(gt) == 1:
        return " 1 0 0" if gt[0] == 0 else " 0 0 1"
    if len(gt) == 2:
        if gt[0] != gt[1]:
            return " 0 1 0"
        return " 1 0 0" if gt[0] == 0 else " 0 0 1"
    raise FormatterError(f"Only haploid and diploid genotypes are supported, got {gt}")


def pl_to_prob3(pl: tuple[int | None, ...] | None) -> str:
    """Convert phred-scaled likelihoods into normalized probabilities.

    Only biallelic diploid likelihoods (three values) map onto the triple.
    Likelihoods so large that every term underflows to zero carry no
    information and are written as missing.

    Example:
        >>> pl_to_prob3((0, 10, 100))
        ' 0.909091 0.090909 0.000000'

    Raises:
        FormatterError: If the sample does not carry exactly three values
    """
    if not pl or any(v is None for v in pl):
        return MISSING_TRIPLE
    if len(pl) != 3:
        raise FormatterError(f"Only three PL values per sample are supported, got {pl}")
    probs = np.power(10.0, -0.1 * np.asarray(pl, dtype=float))
    total = probs.sum()
    if not np.isfinite(total) or total <= 0:
        return MISSING_TRIPLE
    probs /= total
    return "".join(f" {p:f}" for p in probs)


def _sample_value(record: Any, sample: str, key: str) -> Any:
    try:
        return record.samples[sample].get(key)
    except KeyError:
        return None


class LineFormatter:
    """Compiled line template bound to an output sample order.

    Usage:
        formatter = LineFormatter(gen_template(Tag.GT), ["s1", "s2"])
        line = formatter.format(record)
    """

    def __init__(self, template: str, samples: list[str]) -> None:
        """Compile the template.

        Args:
            template: Format string with %DIRECTIVE fields
            samples: Sample names in output order

        Raises:
            ConfigurationError: If the template uses an unknown directive
        """
        self.template = template
        self.samples = list(samples)
        self._renderers = self._compile(template)

    def _compile(self, template: str) -> list[Renderer]:
        renderers: list[Renderer] = []
        literal: list[str] = []

        def flush() -> None:
            if literal:
                text = "".join(literal)
                renderers.append(lambda r: text)
                literal.clear()

        i = 0
        while i < len(template):
            char = template[i]
            if char == "\\" and i + 1 < len(template):
                literal.append(template[i + 1])
                i += 2
                continue
            if char != "%":
                literal.append(char)
                i += 1
                continue

            j = i + 1
            while j < len(template) and (template[j].isalnum() or template[j] in "_/"):
                j += 1
            name = template[i + 1 : j]
            flush()
            renderers.append(self._directive(name))
            i = j

        flush()
        return renderers

    def _directive(self, name: str) -> Renderer:
        if name in _SITE_FIELDS:
            return _SITE_FIELDS[name]
        if name == "_GT_TO_PROB3":
            return self._render_gt
        if name == "_PL_TO_PROB3":
            return self._render_pl
        if name.startswith("INFO/") and len(name) > 5:
            tag = name[5:]
            return lambda r: _format_info(r.info.get(tag))
        raise ConfigurationError(f"Unknown format directive: %{name}")

    def _render_gt(self, record: Any) -> str:
        return "".join(gt_to_prob3(_sample_value(record, s, "GT")) for s in self.samples)

    def _render_pl(self, record: Any) -> str:
        return "".join(pl_to_prob3(_sample_value(record, s, "PL")) for s in self.samples)

    def format(self, record: Any) -> str:
        """Render one record."""
        return "".join(render(record) for render in self._renderers)


def _format_info(value: Any) -> str:
    if value is None:
        return "."
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (tuple, list)):
        return ",".join("." if v is None else str(v) for v in value)
    return str(value)
