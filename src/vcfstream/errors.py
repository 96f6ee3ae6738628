"""
Error taxonomy for vcfstream.

Two tiers:
- I/O failures at open time, classified into a closed set of kinds.
- Structural failures: a header that cannot be parsed, or a data line that
  cannot be decoded against its header.

``EndOfStream`` marks graceful completion of sequential reading and is
deliberately not a ``VcfError``.
"""

import errno
from enum import Enum
from pathlib import Path

__all__ = [
    "IOErrorKind",
    "VcfError",
    "VcfIOError",
    "HeaderParseError",
    "DecodeError",
    "EndOfStream",
    "classify_io_error",
]


class IOErrorKind(str, Enum):
    """Closed set of I/O failure kinds surfaced by ``open_vcf``."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    BROKEN_PIPE = "broken_pipe"
    ALREADY_EXISTS = "already_exists"
    UNKNOWN = "unknown"


_ERRNO_KINDS = {
    errno.ENOENT: IOErrorKind.NOT_FOUND,
    errno.EACCES: IOErrorKind.PERMISSION_DENIED,
    errno.EPERM: IOErrorKind.PERMISSION_DENIED,
    errno.EPIPE: IOErrorKind.BROKEN_PIPE,
    errno.EEXIST: IOErrorKind.ALREADY_EXISTS,
}


def classify_io_error(err: OSError) -> IOErrorKind:
    """Map an ``OSError`` to its ``IOErrorKind``; anything unmatched is UNKNOWN."""
    if isinstance(err, FileNotFoundError):
        return IOErrorKind.NOT_FOUND
    if isinstance(err, PermissionError):
        return IOErrorKind.PERMISSION_DENIED
    if isinstance(err, BrokenPipeError):
        return IOErrorKind.BROKEN_PIPE
    if isinstance(err, FileExistsError):
        return IOErrorKind.ALREADY_EXISTS
    return _ERRNO_KINDS.get(err.errno, IOErrorKind.UNKNOWN)


class VcfError(Exception):
    """Base exception for vcfstream errors."""


class VcfIOError(VcfError):
    """Raised when the VCF file cannot be opened or read."""

    def __init__(self, kind: IOErrorKind, path: Path | str | None = None, message: str = ""):
        self.kind = kind
        self.path = path
        detail = message or kind.value.replace("_", " ")
        super().__init__(f"{detail}: {path}" if path is not None else detail)

    @classmethod
    def from_os_error(cls, err: OSError, path: Path | str | None = None) -> "VcfIOError":
        return cls(classify_io_error(err), path=path, message=err.strerror or str(err))


class HeaderParseError(VcfError):
    """Raised when the meta-information block does not form a valid header."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class DecodeError(VcfError):
    """Raised when a data line does not match the grammar its header requires."""

    def __init__(self, detail: str, line_number: int | None = None, line: str | None = None):
        self.detail = detail
        self.line_number = line_number
        self.line = line
        message = detail if line_number is None else f"line {line_number}: {detail}"
        super().__init__(message)

    def at_line(self, line_number: int) -> "DecodeError":
        """Tag this error with the file line number and return it."""
        self.line_number = line_number
        self.args = (f"line {line_number}: {self.detail}",)
        return self


class EndOfStream(EOFError):
    """Raised by ``read_one`` when no records remain."""
