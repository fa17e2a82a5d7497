"""Region and target list parsing.

Regions come either as a comma-separated list of ``CHROM[:BEG[-END]]``
strings or as a file with ``CHROM BEG [END]`` per line (1-based,
inclusive, whitespace-separated, '#' comments). A leading '^' on a target
list means "everything except these".
"""

from dataclasses import dataclass, field

from variant_converter.exceptions import ConfigurationError
from variant_converter.io_utils import iter_lines
from variant_converter.models import Region


@dataclass
class RegionSet:
    """Parsed region list.

    Attributes:
        regions: Intervals, merged per contig and kept in first-seen contig order
        negated: True for an exclusion list ('^' prefix)
    """

    regions: list[Region] = field(default_factory=list)
    negated: bool = False

    def overlaps(self, chrom: str, start: int, stop: int) -> bool:
        """Check a 1-based inclusive span against the set (ignoring negation)."""
        return any(r.overlaps(chrom, start, stop) for r in self.regions)

    def accepts(self, chrom: str, start: int, stop: int) -> bool:
        """Apply the set as a target filter, honouring negation."""
        return self.overlaps(chrom, start, stop) != self.negated


def _parse_int(value: str, source: str) -> int:
    try:
        return int(value.replace(",", ""))
    except ValueError as e:
        raise ConfigurationError(f"Could not parse the region(s): {source}") from e


def parse_region(text: str) -> Region:
    """Parse a single ``CHROM[:BEG[-END]]`` string.

    Example:
        >>> parse_region("chr1:100-200")
        Region(chrom='chr1', start=100, end=200)
        >>> parse_region("chr2")
        Region(chrom='chr2', start=1, end=None)
    """
    chrom, sep, span = text.rpartition(":")
    if not sep or not span:
        return Region(chrom=text)
    if "-" in span:
        beg, _, end = span.partition("-")
        start = _parse_int(beg, text)
        stop = _parse_int(end, text) if end else None
    else:
        start = _parse_int(span, text)
        stop = None
    if stop is not None and stop < start:
        raise ConfigurationError(f"Could not parse the region(s): {text}")
    return Region(chrom=chrom, start=start, end=stop)


def read_regions_file(path: str) -> list[Region]:
    """Read regions from a CHROM/BEG/END file."""
    regions: list[Region] = []
    for line_num, line in iter_lines(path):
        if not line.strip() or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) < 2:
            raise ConfigurationError(
                f"Could not parse line {line_num} of {path}: expected CHROM and BEG"
            )
        start = _parse_int(parts[1], path)
        end = _parse_int(parts[2], path) if len(parts) > 2 else start
        regions.append(Region(chrom=parts[0], start=start, end=end))
    return regions


def merge_regions(regions: list[Region]) -> list[Region]:
    """Merge overlapping or adjacent intervals on the same contig.

    Contig order follows first appearance; intervals within a contig
    are sorted by start.
    """
    by_chrom: dict[str, list[Region]] = {}
    for region in regions:
        by_chrom.setdefault(region.chrom, []).append(region)

    merged: list[Region] = []
    for chrom, items in by_chrom.items():
        items.sort(key=lambda r: r.start)
        current = Region(chrom, items[0].start, items[0].end)
        for region in items[1:]:
            if current.end is None:
                break
            if region.start <= current.end + 1:
                if region.end is None or region.end > current.end:
                    current.end = region.end
            else:
                merged.append(current)
                current = Region(chrom, region.start, region.end)
        merged.append(current)
    return merged


def parse_region_list(value: str | None, is_file: bool = False) -> RegionSet | None:
    """Parse a -r/-R/-t/-T argument.

    Args:
        value: Region list or file name (None when the option is absent)
        is_file: Interpret value as a regions file

    Returns:
        RegionSet, or None when value is None
    """
    if value is None:
        return None

    negated = value.startswith("^")
    if negated:
        value = value[1:]

    if is_file:
        regions = read_regions_file(value)
    else:
        regions = [parse_region(item) for item in value.split(",") if item]

    if not regions:
        raise ConfigurationError(f"Failed to read the regions: {value}")
    return RegionSet(regions=merge_regions(regions), negated=negated)
