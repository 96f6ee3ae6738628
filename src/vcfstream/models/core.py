"""
Core data models for vcfstream.

Header metadata, decoded records and reader configuration. All models are
frozen: a Header is parsed once per handle and then shared read-only.
"""

import codecs
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NumberKind(str, Enum):
    """Cardinality contract of an INFO field (the header ``Number=`` value)."""
    COUNT = "COUNT"
    A = "A"  # one value per alternate allele
    R = "R"  # one value per allele, reference included
    G = "G"  # one value per possible genotype
    UNKNOWN = "."


class ValueType(str, Enum):
    """Declared type of an INFO field value."""
    INTEGER = "Integer"
    FLOAT = "Float"
    FLAG = "Flag"
    CHARACTER = "Character"
    STRING = "String"


class FilterStatus(str, Enum):
    """Outcome of the FILTER column."""
    NOT_TESTED = "."
    PASS = "PASS"
    FAIL = "FAIL"


class BatchErrorPolicy(str, Enum):
    """What ``read_many`` does when a line in the batch fails to decode."""
    FAIL = "fail"
    PARTIAL = "partial"


class FileFormat(BaseModel):
    """VCF version from ``##fileformat=VCFvMAJOR.MINOR``."""
    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)

    def __str__(self) -> str:
        return f"VCFv{self.major}.{self.minor}"


class Number(BaseModel):
    """
    INFO cardinality.

    ``count`` carries the fixed value count and is only set for
    ``NumberKind.COUNT``.
    """
    model_config = ConfigDict(frozen=True)

    kind: NumberKind
    count: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_count(self) -> "Number":
        if self.kind == NumberKind.COUNT and self.count is None:
            raise ValueError("Number of kind COUNT requires a count")
        if self.kind != NumberKind.COUNT and self.count is not None:
            raise ValueError(f"Number of kind {self.kind.name} cannot carry a count")
        return self

    @classmethod
    def fixed(cls, count: int) -> "Number":
        return cls(kind=NumberKind.COUNT, count=count)

    def __str__(self) -> str:
        if self.kind == NumberKind.COUNT:
            return str(self.count)
        return self.kind.value


class InfoDef(BaseModel):
    """An ``##INFO=<...>`` header definition."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    number: Number
    type: ValueType
    description: str


class FilterDef(BaseModel):
    """An ``##FILTER=<...>`` header definition."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    description: str


class Header(BaseModel):
    """
    Parsed VCF meta-information.

    ``infos`` and ``filters`` are keyed by ID and keep the order in which
    the definitions appear in the file.
    """
    model_config = ConfigDict(frozen=True)

    file_format: FileFormat
    infos: dict[str, InfoDef] = Field(default_factory=dict)
    filters: dict[str, FilterDef] = Field(default_factory=dict)
    samples: list[str] = Field(default_factory=list)


class Filters(BaseModel):
    """FILTER column: not tested, passed, or the list of failed filters."""
    model_config = ConfigDict(frozen=True)

    status: FilterStatus
    failed: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_failed(self) -> "Filters":
        if self.status == FilterStatus.FAIL and not self.failed:
            raise ValueError("FAIL filter status requires at least one filter ID")
        if self.status != FilterStatus.FAIL and self.failed:
            raise ValueError(f"Filter status {self.status.name} cannot list failed filters")
        return self

    @classmethod
    def not_tested(cls) -> "Filters":
        return cls(status=FilterStatus.NOT_TESTED)

    @classmethod
    def passed(cls) -> "Filters":
        return cls(status=FilterStatus.PASS)

    @classmethod
    def fail(cls, failed: list[str]) -> "Filters":
        return cls(status=FilterStatus.FAIL, failed=failed)


class Record(BaseModel):
    """
    One decoded VCF data line.

    INFO values are kept as raw strings; flag entries map to "".
    ``samples`` holds one FORMAT-keyed mapping per sample column.
    ``genotypes`` is the flattened view over ``samples`` where the first
    sample (in column order) wins for every key.
    """
    model_config = ConfigDict(frozen=True)

    chromosome: str
    position: int = Field(ge=1, description="1-based position of the variant")
    ids: list[str] = Field(default_factory=list)
    reference_bases: str
    alternate_bases: str
    quality_score: float | None = None
    filters: Filters
    info: dict[str, str] = Field(default_factory=dict)
    format: list[str] = Field(default_factory=list)
    genotypes: dict[str, str] = Field(default_factory=dict)
    samples: list[dict[str, str]] = Field(default_factory=list)


class ReaderConfig(BaseModel):
    """
    Options for opening a VCF stream.
    """
    path: Path
    encoding: str = "utf-8"

    # Batch reads
    batch_errors: BatchErrorPolicy = BatchErrorPolicy.FAIL

    # Decoding
    strict_columns: bool = True

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            # Lines are split on the raw b"\n" byte before decoding.
            newline = "\t\n".encode(codecs.lookup(v).name)
        except LookupError:
            raise ValueError(f"Unknown text encoding: {v}") from None
        if newline != b"\t\n":
            raise ValueError(f"Encoding must be ASCII-compatible: {v}")
        return v
