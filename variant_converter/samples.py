"""Sample subset and ordering.

A sample list restricts which samples the variant reader materializes.
A plain list also fixes the output column order; a negated list ('^')
keeps the remaining samples in file order.
"""

import logging
from dataclasses import dataclass

import pysam

from variant_converter.config import SampleSelection
from variant_converter.exceptions import ConfigurationError
from variant_converter.io_utils import read_list

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SampleLayout:
    """Resolved samples for one conversion.

    Attributes:
        store_samples: Samples kept by the reader, in file order
        output_samples: Samples in output column order
    """

    store_samples: list[str]
    output_samples: list[str]

    @property
    def reordered(self) -> bool:
        return self.store_samples != self.output_samples

    def __len__(self) -> int:
        return len(self.output_samples)


def resolve_samples(
    header_samples: list[str],
    selection: SampleSelection | None,
) -> SampleLayout:
    """Resolve a sample selection against the samples of a file.

    Args:
        header_samples: Samples declared in the variant file, in order
        selection: Requested subset (None or '-' for all samples)

    Returns:
        SampleLayout with the kept samples and their output order

    Raises:
        ConfigurationError: If a named sample is absent, or a plain list
            names a different number of samples than are kept (duplicates)
    """
    if selection is None or selection.selects_all:
        return SampleLayout(list(header_samples), list(header_samples))

    try:
        names = read_list(selection.body, selection.is_file)
    except OSError as e:
        raise ConfigurationError(f"Could not parse {selection.body}: {e}") from e

    known = set(header_samples)
    requested = set(names)

    if selection.negated:
        store = [s for s in header_samples if s not in requested]
        return SampleLayout(store, list(store))

    for i, name in enumerate(names, 1):
        if name not in known:
            raise ConfigurationError(
                f"Sample name mismatch: sample #{i} not found in the header"
            )

    store = [s for s in header_samples if s in requested]
    if len(names) != len(store):
        raise ConfigurationError(
            "The number of samples does not match, perhaps some are present multiple times?"
        )
    return SampleLayout(store, list(names))


def apply_sample_selection(
    variant_file: pysam.VariantFile,
    selection: SampleSelection | None,
) -> SampleLayout:
    """Restrict a reader to the selected samples.

    Args:
        variant_file: Open reader (no records fetched yet)
        selection: Requested subset

    Returns:
        SampleLayout for the restricted reader
    """
    layout = resolve_samples(list(variant_file.header.samples), selection)
    if selection is not None and not selection.selects_all:
        variant_file.subset_samples(layout.store_samples)
    logger.debug(
        "Selected %d sample(s)%s",
        len(layout),
        " (reordered)" if layout.reordered else "",
    )
    return layout
