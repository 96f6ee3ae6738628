"""
Data models for vcfstream.

Provides Pydantic models for the VCF header, decoded records and reader configuration.
"""

from .core import (
    BatchErrorPolicy,
    FileFormat,
    FilterDef,
    Filters,
    FilterStatus,
    Header,
    InfoDef,
    Number,
    NumberKind,
    ReaderConfig,
    Record,
    ValueType,
)

__all__ = [
    "BatchErrorPolicy",
    "FileFormat",
    "FilterDef",
    "Filters",
    "FilterStatus",
    "Header",
    "InfoDef",
    "Number",
    "NumberKind",
    "ReaderConfig",
    "Record",
    "ValueType",
]
