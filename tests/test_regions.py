"""Tests for region and target list parsing."""

from pathlib import Path

import pytest

from variant_converter.exceptions import ConfigurationError
from variant_converter.models import Region
from variant_converter.parsers.regions import (
    merge_regions,
    parse_region,
    parse_region_list,
    read_regions_file,
)


class TestParseRegion:
    """Tests for single region strings."""

    def test_full_region(self) -> None:
        assert parse_region("chr1:100-200") == Region("chr1", 100, 200)

    def test_contig_only(self) -> None:
        assert parse_region("chrX") == Region("chrX", 1, None)

    def test_open_end(self) -> None:
        assert parse_region("chr1:500-") == Region("chr1", 500, None)
        assert parse_region("chr1:500") == Region("chr1", 500, None)

    def test_thousands_separators(self) -> None:
        assert parse_region("chr1:1,000-2,000") == Region("chr1", 1000, 2000)

    def test_inverted_interval(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_region("chr1:200-100")

    def test_bad_number(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_region("chr1:abc-200")


class TestRegionsFile:
    """Tests for CHROM BEG [END] files."""

    def test_read_file(self, tmp_path: Path) -> None:
        """END defaults to BEG; comments are skipped."""
        regions = tmp_path / "regions.txt"
        regions.write_text("# comment\nchr1\t10\t20\nchr2 5\n")

        assert read_regions_file(str(regions)) == [
            Region("chr1", 10, 20),
            Region("chr2", 5, 5),
        ]

    def test_short_line(self, tmp_path: Path) -> None:
        regions = tmp_path / "regions.txt"
        regions.write_text("chr1\n")
        with pytest.raises(ConfigurationError, match="line 1"):
            read_regions_file(str(regions))


class TestMergeRegions:
    """Tests for interval merging."""

    def test_overlapping_and_adjacent(self) -> None:
        merged = merge_regions(
            [Region("chr1", 50, 60), Region("chr1", 1, 10), Region("chr1", 11, 20)]
        )
        assert merged == [Region("chr1", 1, 20), Region("chr1", 50, 60)]

    def test_contig_order_preserved(self) -> None:
        merged = merge_regions([Region("chr2", 1, 5), Region("chr1", 1, 5)])
        assert [r.chrom for r in merged] == ["chr2", "chr1"]

    def test_open_ended_swallows_rest(self) -> None:
        merged = merge_regions([Region("chr1", 10, None), Region("chr1", 100, 200)])
        assert merged == [Region("chr1", 10, None)]


class TestRegionSet:
    """Tests for parse_region_list and target matching."""

    def test_absent(self) -> None:
        assert parse_region_list(None) is None

    def test_accepts(self) -> None:
        targets = parse_region_list("chr1:100-200")
        assert targets is not None
        assert targets.accepts("chr1", 150, 150)
        assert targets.accepts("chr1", 90, 100)
        assert not targets.accepts("chr1", 201, 201)
        assert not targets.accepts("chr2", 150, 150)

    def test_negated(self) -> None:
        targets = parse_region_list("^chr1")
        assert targets is not None
        assert targets.negated
        assert not targets.accepts("chr1", 5, 5)
        assert targets.accepts("chr2", 5, 5)

    def test_from_file(self, tmp_path: Path) -> None:
        regions = tmp_path / "targets.txt"
        regions.write_text("chr1 1 10\n")
        targets = parse_region_list(str(regions), is_file=True)
        assert targets is not None
        assert targets.regions == [Region("chr1", 1, 10)]

    def test_empty_list(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_region_list(",")
