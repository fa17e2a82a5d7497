"""Tests for sample subset resolution."""

from pathlib import Path

import pytest

from variant_converter.config import SampleSelection
from variant_converter.exceptions import ConfigurationError
from variant_converter.samples import resolve_samples

HEADER = ["S1", "S2", "S3", "S4"]


class TestResolveSamples:
    """Tests for resolve_samples."""

    def test_all_samples(self) -> None:
        layout = resolve_samples(HEADER, None)
        assert layout.store_samples == HEADER
        assert layout.output_samples == HEADER
        assert not layout.reordered

    def test_dash_selects_all(self) -> None:
        layout = resolve_samples(HEADER, SampleSelection("-"))
        assert layout.output_samples == HEADER

    def test_subset_keeps_requested_order(self) -> None:
        """Output follows the request; the reader keeps file order."""
        layout = resolve_samples(HEADER, SampleSelection("S3,S1"))

        assert layout.store_samples == ["S1", "S3"]
        assert layout.output_samples == ["S3", "S1"]
        assert layout.reordered
        assert len(layout) == 2

    def test_negated(self) -> None:
        layout = resolve_samples(HEADER, SampleSelection("^S2,S4"))
        assert layout.store_samples == ["S1", "S3"]
        assert layout.output_samples == ["S1", "S3"]

    def test_from_file(self, tmp_path: Path) -> None:
        names = tmp_path / "samples.txt"
        names.write_text("S4\nS2\n\n")

        layout = resolve_samples(HEADER, SampleSelection(str(names), is_file=True))

        assert layout.output_samples == ["S4", "S2"]

    def test_unknown_sample(self) -> None:
        with pytest.raises(ConfigurationError, match="sample #2 not found"):
            resolve_samples(HEADER, SampleSelection("S1,S9"))

    def test_duplicate_sample(self) -> None:
        with pytest.raises(ConfigurationError, match="number of samples does not match"):
            resolve_samples(HEADER, SampleSelection("S1,S1"))

    def test_missing_file(self, tmp_path: Path) -> None:
        selection = SampleSelection(str(tmp_path / "absent.txt"), is_file=True)
        with pytest.raises(ConfigurationError, match="Could not parse"):
            resolve_samples(HEADER, selection)
