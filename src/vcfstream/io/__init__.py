"""
I/O module for vcfstream.

Provides the streaming VCF handle and its read operations.
"""

from .reader import HandleState, VcfHandle, get_header, open_vcf, read_many, read_one

__all__ = [
    "HandleState",
    "VcfHandle",
    "get_header",
    "open_vcf",
    "read_many",
    "read_one",
]
