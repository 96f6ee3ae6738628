"""
Header Parser: builds the Header model from the VCF meta-information block.

Handles:
- ``##fileformat=VCFvMAJOR.MINOR`` (must be the first line)
- ``##INFO=<ID=..,Number=..,Type=..,Description="..">``
- ``##FILTER=<ID=..,Description="..">``
- the ``#CHROM`` column-header line, which closes the block and names the samples

Any other ``##key=value`` line is accepted and ignored.
"""

import logging
import re
from collections.abc import Iterable

from pydantic import ValidationError

from ..errors import HeaderParseError
from ..models.core import FileFormat, FilterDef, Header, InfoDef, Number, NumberKind, ValueType

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO")

_FILE_FORMAT_PATTERN = re.compile(r"^VCFv([0-9]+)\.([0-9]+)$")


class HeaderParser:
    """
    Stateless parser for the meta-information block.
    """

    @staticmethod
    def parse(lines: Iterable[str]) -> Header:
        """
        Parse meta-information lines into a Header.

        Args:
            lines: Raw header lines, in file order, ending with the ``#CHROM``
                line. Line terminators are ignored.

        Returns:
            The parsed Header.

        Raises:
            HeaderParseError: If the block is truncated or any line is malformed.
        """
        file_format: FileFormat | None = None
        infos: dict[str, InfoDef] = {}
        filters: dict[str, FilterDef] = {}
        samples: list[str] | None = None

        line_number = 0
        for line_number, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")

            if samples is not None:
                raise HeaderParseError("unexpected line after the #CHROM header", line_number)

            if line_number == 1:
                if not line.startswith("##fileformat="):
                    raise HeaderParseError("first line must be ##fileformat", line_number)
                file_format = HeaderParser.parse_file_format(
                    line[len("##fileformat="):], line_number
                )
                continue

            if line.startswith("#CHROM"):
                samples = HeaderParser.parse_column_header(line, line_number)
            elif line.startswith("##INFO="):
                info = HeaderParser.parse_info(line[len("##INFO="):], line_number)
                if info.id in infos:
                    raise HeaderParseError(f"duplicate INFO ID '{info.id}'", line_number)
                infos[info.id] = info
            elif line.startswith("##FILTER="):
                flt = HeaderParser.parse_filter(line[len("##FILTER="):], line_number)
                if flt.id in filters:
                    raise HeaderParseError(f"duplicate FILTER ID '{flt.id}'", line_number)
                filters[flt.id] = flt
            elif line.startswith("##fileformat="):
                raise HeaderParseError("duplicate ##fileformat line", line_number)
            elif line.startswith("##"):
                if "=" not in line:
                    raise HeaderParseError(f"meta-information line without '=': {line}", line_number)
            else:
                raise HeaderParseError(f"unexpected line in header: {line[:40]}", line_number)

        if file_format is None:
            raise HeaderParseError("empty header: missing ##fileformat")
        if samples is None:
            raise HeaderParseError("truncated header: missing #CHROM line", line_number or None)

        logger.debug(
            "Parsed header %s: %d INFO, %d FILTER, %d samples",
            file_format, len(infos), len(filters), len(samples),
        )
        return Header(file_format=file_format, infos=infos, filters=filters, samples=samples)

    @staticmethod
    def parse_file_format(value: str, line_number: int | None = None) -> FileFormat:
        """Parse ``VCFvMAJOR.MINOR``."""
        match = _FILE_FORMAT_PATTERN.match(value.strip())
        if not match:
            raise HeaderParseError(f"invalid fileformat '{value}'", line_number)
        return FileFormat(major=int(match.group(1)), minor=int(match.group(2)))

    @staticmethod
    def parse_number(value: str, line_number: int | None = None) -> Number:
        """Parse an INFO ``Number`` value: ``.``, ``A``, ``R``, ``G`` or an integer."""
        if value.isascii() and value.isdigit():
            return Number.fixed(int(value))
        try:
            kind = NumberKind(value)
        except ValueError:
            raise HeaderParseError(f"invalid Number '{value}'", line_number) from None
        if kind == NumberKind.COUNT:
            raise HeaderParseError(f"invalid Number '{value}'", line_number)
        return Number(kind=kind)

    @staticmethod
    def parse_info(value: str, line_number: int | None = None) -> InfoDef:
        fields = HeaderParser.parse_structured(value, line_number)
        HeaderParser._require(fields, ("ID", "Number", "Type", "Description"), "INFO", line_number)
        try:
            ty = ValueType(fields["Type"])
        except ValueError:
            raise HeaderParseError(f"invalid INFO Type '{fields['Type']}'", line_number) from None
        number = HeaderParser.parse_number(fields["Number"], line_number)
        try:
            return InfoDef(id=fields["ID"], number=number, type=ty, description=fields["Description"])
        except ValidationError as e:
            raise HeaderParseError(f"invalid INFO definition: {_first_error(e)}", line_number) from e

    @staticmethod
    def parse_filter(value: str, line_number: int | None = None) -> FilterDef:
        fields = HeaderParser.parse_structured(value, line_number)
        HeaderParser._require(fields, ("ID", "Description"), "FILTER", line_number)
        try:
            return FilterDef(id=fields["ID"], description=fields["Description"])
        except ValidationError as e:
            raise HeaderParseError(f"invalid FILTER definition: {_first_error(e)}", line_number) from e

    @staticmethod
    def parse_structured(value: str, line_number: int | None = None) -> dict[str, str]:
        """
        Parse a ``<key=value,key="quoted, value",...>`` structure.

        Commas inside double quotes do not split; ``\\"`` and ``\\\\`` are
        unescaped inside quotes.
        """
        if not (value.startswith("<") and value.endswith(">")):
            raise HeaderParseError(f"structured value must be enclosed in <>: {value}", line_number)

        fields: dict[str, str] = {}
        body = value[1:-1]
        key: list[str] = []
        val: list[str] = []
        target = key
        in_quotes = False
        escaped = False

        def flush() -> None:
            name = "".join(key)
            if not name:
                raise HeaderParseError(f"empty key in structured value: {value}", line_number)
            if target is key:
                raise HeaderParseError(f"missing '=' after '{name}'", line_number)
            if name in fields:
                raise HeaderParseError(f"duplicate key '{name}'", line_number)
            fields[name] = "".join(val)

        for ch in body:
            if in_quotes:
                if escaped:
                    val.append(ch)
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_quotes = False
                else:
                    val.append(ch)
            elif ch == '"' and target is val:
                in_quotes = True
            elif ch == "=" and target is key:
                target = val
            elif ch == ",":
                flush()
                key, val = [], []
                target = key
            else:
                target.append(ch)

        if in_quotes:
            raise HeaderParseError(f"unterminated quoted string: {value}", line_number)
        flush()
        return fields

    @staticmethod
    def parse_column_header(line: str, line_number: int | None = None) -> list[str]:
        """Validate the ``#CHROM`` line and return the sample names."""
        columns = line.split("\t")
        if len(columns) == 1:
            columns = line.split()
        if tuple(columns[: len(FIXED_COLUMNS)]) != FIXED_COLUMNS:
            raise HeaderParseError(
                f"column header must start with {' '.join(FIXED_COLUMNS)}", line_number
            )
        if len(columns) == len(FIXED_COLUMNS):
            return []
        if columns[len(FIXED_COLUMNS)] != "FORMAT":
            raise HeaderParseError("ninth column must be FORMAT", line_number)

        samples = columns[len(FIXED_COLUMNS) + 1:]
        if len(set(samples)) != len(samples):
            raise HeaderParseError("duplicate sample names in column header", line_number)
        return samples

    @staticmethod
    def _require(fields: dict[str, str], keys: tuple[str, ...], kind: str, line_number: int | None) -> None:
        for key in keys:
            if key not in fields:
                raise HeaderParseError(f"{kind} definition missing '{key}'", line_number)


def _first_error(err: ValidationError) -> str:
    detail = err.errors()[0]
    field = ".".join(str(part) for part in detail["loc"])
    return f"{field}: {detail['msg']}" if field else detail["msg"]
