"""Tests for gen/sample writers and the record streaming loop."""

import gzip
from pathlib import Path

import pytest

from variant_converter.config import FilterLogic, Tag
from variant_converter.exceptions import OutputWriteError
from variant_converter.filters import SiteFilter
from variant_converter.formatters import LineFormatter, gen_template
from variant_converter.main import convert_records
from variant_converter.models import StreamStats
from variant_converter.writers.gensample import (
    MANIFEST_HEADER,
    GenFileWriter,
    write_sample_manifest,
)


class TestSampleManifest:
    """Tests for the .samples file."""

    def test_manifest(self, tmp_path: Path) -> None:
        path = write_sample_manifest(tmp_path / "out.samples", ["NA1", "NA2"])

        assert path.read_text() == (
            "ID_1 ID_2 missing\n"
            "0 0 0\n"
            "NA1 NA1 0\n"
            "NA2 NA2 0\n"
        )

    def test_no_samples(self, tmp_path: Path) -> None:
        path = write_sample_manifest(tmp_path / "out.samples", [])
        assert path.read_text() == MANIFEST_HEADER

    def test_unwritable(self, tmp_path: Path) -> None:
        with pytest.raises(OutputWriteError):
            write_sample_manifest(tmp_path / "missing" / "out.samples", ["NA1"])


class TestGenFileWriter:
    """Tests for the .gen sink."""

    def test_compressed(self, tmp_path: Path) -> None:
        path = tmp_path / "out.gen.gz"
        with GenFileWriter(path, compressed=True) as writer:
            writer.write("line1\n")
            writer.write("")
            writer.write("line2\n")

        assert writer.lines_written == 2
        with gzip.open(path, "rt") as f:
            assert f.read() == "line1\nline2\n"

    def test_plain(self, tmp_path: Path) -> None:
        path = tmp_path / "out.gen"
        with GenFileWriter(path, compressed=False) as writer:
            writer.write("line1\n")

        assert path.read_text() == "line1\n"

    def test_close_twice(self, tmp_path: Path) -> None:
        writer = GenFileWriter(tmp_path / "out.gen", compressed=False)
        writer.close()
        writer.close()

    def test_unwritable(self, tmp_path: Path) -> None:
        with pytest.raises(OutputWriteError):
            GenFileWriter(tmp_path / "missing" / "out.gen", compressed=False)


class TestConvertRecords:
    """Tests for the record streaming loop."""

    def _records(self, make_record) -> list:
        return [
            make_record(pos=1, id="rs1", qual=50.0, samples={"S1": {"GT": (0, 1)}}),
            make_record(pos=2, alts=None, qual=50.0, samples={"S1": {"GT": (0, 0)}}),
            make_record(pos=3, id="rs3", qual=5.0, samples={"S1": {"GT": (1, 1)}}),
        ]

    def test_monomorphic_skipped(self, tmp_path: Path, make_record) -> None:
        formatter = LineFormatter(gen_template(Tag.GT), ["S1"])
        path = tmp_path / "out.gen"
        stats = StreamStats()

        with GenFileWriter(path, compressed=False) as writer:
            convert_records(self._records(make_record), formatter, writer, stats)

        assert stats.records_read == 3
        assert stats.monomorphic == 1
        assert stats.written == 2
        assert path.read_text() == (
            "chr1:1_A_G rs1 1 A G 0 1 0\n"
            "chr1:3_A_G rs3 3 A G 0 0 1\n"
        )

    @pytest.mark.parametrize(
        "logic,expected",
        [(FilterLogic.INCLUDE, ["rs1"]), (FilterLogic.EXCLUDE, ["rs3"])],
    )
    def test_filter(self, tmp_path: Path, make_record, logic, expected) -> None:
        """The filter sees only records with an alternate allele."""
        formatter = LineFormatter("%ID\n", ["S1"])
        path = tmp_path / "out.gen"
        stats = StreamStats()

        with GenFileWriter(path, compressed=False) as writer:
            convert_records(
                self._records(make_record),
                formatter,
                writer,
                stats,
                site_filter=SiteFilter("QUAL>30", logic),
            )

        assert path.read_text().split() == expected
        assert stats.filtered == 1
        assert stats.monomorphic == 1
