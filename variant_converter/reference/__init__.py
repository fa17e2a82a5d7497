"""Reference sequence access."""

from variant_converter.reference.base import ReferenceIndex
from variant_converter.reference.fasta import FastaReference

__all__ = ["ReferenceIndex", "FastaReference"]
