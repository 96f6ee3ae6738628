"""
Record Decoder: turns one tab-delimited data line into a Record.

Column layout (1-based):
    1 CHROM  2 POS  3 ID  4 REF  5 ALT  6 QUAL  7 FILTER  8 INFO
    9 FORMAT  10.. one column per sample

INFO values are kept as raw strings. Typed interpretation against the header
definitions is left to ``vcfstream.convert.typed_info``.
"""

import re

from ..errors import DecodeError
from ..models.core import Filters, Header, Record

MISSING = "."

_FLOAT_PATTERN = re.compile(
    r"^[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)$", re.IGNORECASE
)


class RecordDecoder:
    """
    Decodes data lines using a Header as interpretation context.

    Args:
        header: Parsed header; its sample list fixes the expected column count.
        strict_columns: If True, the number of columns must match the header
            exactly. Otherwise any line with at least the eight fixed columns
            is accepted and however many sample columns are present are decoded.
    """

    def __init__(self, header: Header, strict_columns: bool = True):
        self.header = header
        self.strict_columns = strict_columns
        n_samples = len(header.samples)
        # A FORMAT column without samples is tolerated.
        self.expected_columns = (9 + n_samples,) if n_samples else (8, 9)

    def decode(self, line: str) -> Record:
        """
        Decode a single data line.

        Raises:
            DecodeError: If the column count or any value does not match the
                expected grammar.
        """
        text = line.rstrip("\r\n")
        columns = text.split("\t")
        try:
            self._check_columns(columns)

            chrom, pos, ids, ref, alt, qual, flt, info = columns[:8]
            if not chrom:
                raise DecodeError("empty CHROM")
            if not ref:
                raise DecodeError("empty REF")
            if not alt:
                raise DecodeError("empty ALT")

            format_keys = self.parse_format(columns[8]) if len(columns) > 8 else []
            samples = [self.parse_sample(format_keys, value) for value in columns[9:]]

            return Record(
                chromosome=chrom,
                position=self.parse_position(pos),
                ids=self.parse_ids(ids),
                reference_bases=ref,
                alternate_bases=alt,
                quality_score=self.parse_quality(qual),
                filters=self.parse_filters(flt),
                info=self.parse_info(info),
                format=format_keys,
                genotypes=self.flatten_genotypes(samples),
                samples=samples,
            )
        except DecodeError as e:
            e.line = text
            raise

    def _check_columns(self, columns: list[str]) -> None:
        if len(columns) < 8:
            raise DecodeError(f"expected at least 8 columns, found {len(columns)}")
        if self.strict_columns and len(columns) not in self.expected_columns:
            raise DecodeError(
                f"expected {self.expected_columns[0]} columns for "
                f"{len(self.header.samples)} samples, found {len(columns)}"
            )

    @staticmethod
    def parse_position(value: str) -> int:
        if not (value.isascii() and value.isdigit()):
            raise DecodeError(f"invalid POS '{value}'")
        position = int(value)
        if position < 1:
            raise DecodeError(f"POS must be >= 1, found {position}")
        return position

    @staticmethod
    def parse_ids(value: str) -> list[str]:
        """``.`` is no IDs; otherwise the ``;``-separated tokens."""
        if value == MISSING:
            return []
        ids = value.split(";")
        if any(not i for i in ids):
            raise DecodeError(f"empty token in ID '{value}'")
        return ids

    @staticmethod
    def parse_quality(value: str) -> float | None:
        if value == MISSING:
            return None
        if not _FLOAT_PATTERN.match(value):
            raise DecodeError(f"invalid QUAL '{value}'")
        return float(value)

    @staticmethod
    def parse_filters(value: str) -> Filters:
        if value == MISSING:
            return Filters.not_tested()
        if value == "PASS":
            return Filters.passed()
        failed = value.split(";")
        if any(not f for f in failed):
            raise DecodeError(f"empty token in FILTER '{value}'")
        return Filters.fail(failed)

    @staticmethod
    def parse_info(value: str) -> dict[str, str]:
        """
        Split INFO into an ordered key -> raw value mapping.

        Flag entries (no ``=``) map to the empty string.
        """
        info: dict[str, str] = {}
        if value == MISSING:
            return info
        for token in value.split(";"):
            if not token:
                raise DecodeError(f"empty token in INFO '{value}'")
            key, _, raw = token.partition("=")
            if not key:
                raise DecodeError(f"empty key in INFO token '{token}'")
            if key in info:
                raise DecodeError(f"duplicate INFO key '{key}'")
            info[key] = raw
        return info

    @staticmethod
    def parse_format(value: str) -> list[str]:
        keys = value.split(":")
        if any(not k for k in keys):
            raise DecodeError(f"empty key in FORMAT '{value}'")
        if len(set(keys)) != len(keys):
            raise DecodeError(f"duplicate key in FORMAT '{value}'")
        return keys

    @staticmethod
    def parse_sample(format_keys: list[str], value: str) -> dict[str, str]:
        """
        Zip a sample column against the FORMAT keys.

        Trailing fields may be dropped, so fewer values than keys is valid.
        """
        values = value.split(":")
        if len(values) > len(format_keys):
            raise DecodeError(
                f"sample '{value}' has {len(values)} fields but FORMAT declares {len(format_keys)}"
            )
        return dict(zip(format_keys, values))

    @staticmethod
    def flatten_genotypes(samples: list[dict[str, str]]) -> dict[str, str]:
        """
        Merge per-sample mappings into one; the first sample wins on every key.

        This collapse loses every sample but the first for shared keys; use
        ``Record.samples`` when per-sample identity matters.
        """
        flat: dict[str, str] = {}
        for sample in samples:
            for key, value in sample.items():
                flat.setdefault(key, value)
        return flat
