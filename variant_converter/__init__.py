"""
VCF/BCF conversion tool.

Converts variant calls to Oxford gen/sample genotype-probability files and
synthesizes VCF records from tab-separated ancestral-allele tables anchored
to a reference FASTA.
"""

__version__ = "1.0.0"
__author__ = "Data Tecnica International"
