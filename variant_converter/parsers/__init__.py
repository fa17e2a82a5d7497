"""Input parsers for ancestral-allele tables and region lists."""

from variant_converter.parsers.regions import (
    RegionSet,
    merge_regions,
    parse_region,
    parse_region_list,
    read_regions_file,
)
from variant_converter.parsers.tsv import (
    COLUMN_SETTERS,
    DEFAULT_COLUMNS,
    TableParser,
    iter_table_lines,
)

__all__ = [
    # Table input
    "COLUMN_SETTERS",
    "DEFAULT_COLUMNS",
    "TableParser",
    "iter_table_lines",
    # Regions and targets
    "RegionSet",
    "merge_regions",
    "parse_region",
    "parse_region_list",
    "read_regions_file",
]
