"""
vcfstream - Streaming reader for the Variant Call Format.

Parses the VCF header into a typed model and pulls records one at a time or
in bounded batches, without loading the whole file into memory.

Example usage:
    from vcfstream import open_vcf

    with open_vcf("calls.vcf") as handle:
        for record in handle:
            print(record.chromosome, record.position)

    $ vcfstream head calls.vcf -n 5
"""

__version__ = "0.3.0"

from .errors import DecodeError, EndOfStream, HeaderParseError, IOErrorKind, VcfError, VcfIOError
from .io.reader import HandleState, VcfHandle, get_header, open_vcf, read_many, read_one
from .models.core import Filters, FilterStatus, Header, ReaderConfig, Record

__all__ = [
    "__version__",
    "DecodeError",
    "EndOfStream",
    "Filters",
    "FilterStatus",
    "HandleState",
    "Header",
    "HeaderParseError",
    "IOErrorKind",
    "ReaderConfig",
    "Record",
    "VcfError",
    "VcfHandle",
    "VcfIOError",
    "get_header",
    "open_vcf",
    "read_many",
    "read_one",
]
