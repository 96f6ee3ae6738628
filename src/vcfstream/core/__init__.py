"""
Core module for vcfstream.

Provides the header parser and the per-line record decoder.
"""

from .header import HeaderParser
from .record import RecordDecoder

__all__ = ["HeaderParser", "RecordDecoder"]
