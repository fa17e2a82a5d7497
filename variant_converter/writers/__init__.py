"""Output writers for gen/sample files, VCF/BCF records and run summaries."""

from variant_converter.writers.gensample import GenFileWriter, write_sample_manifest
from variant_converter.writers.log import print_gensample_summary, print_summary
from variant_converter.writers.vcf import VcfSiteWriter, build_header

__all__ = [
    "GenFileWriter",
    "VcfSiteWriter",
    "build_header",
    "print_gensample_summary",
    "print_summary",
    "write_sample_manifest",
]
