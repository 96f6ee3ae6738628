"""
Stream Reader: sequential access to the records of an open VCF file.

A VcfHandle owns the open file, the parsed Header and the line cursor. The
header is parsed once at open time; records are then pulled one line at a
time, either singly (``read_one``) or in bounded batches (``read_many``).

Handle states:
    OPENED     header parsed, cursor at the first data line
    STREAMING  at least one record read
    EXHAUSTED  end of input observed
    FAULTED    a line failed to decode (sticky)
    CLOSED     ``close()`` called

Example:
    with open_vcf("calls.vcf") as handle:
        print(handle.header.file_format)
        while batch := handle.read_many(1000):
            ...
"""

import threading
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from ..core.header import HeaderParser
from ..core.record import RecordDecoder
from ..errors import DecodeError, EndOfStream, HeaderParseError, VcfIOError
from ..models.core import BatchErrorPolicy, Header, ReaderConfig, Record
from ..utils.logging import get_logger, timed

__all__ = [
    "HandleState",
    "VcfHandle",
    "open_vcf",
    "get_header",
    "read_one",
    "read_many",
]

logger = get_logger(__name__)


class HandleState(str, Enum):
    OPENED = "opened"
    STREAMING = "streaming"
    EXHAUSTED = "exhausted"
    FAULTED = "faulted"
    CLOSED = "closed"


class VcfHandle:
    """
    An open VCF file positioned after its header.

    The file is read as bytes and decoded one line at a time, so a line that
    is not valid text in the configured encoding fails on its own without
    disturbing its neighbours or the line count.

    All operations on one handle are serialised by a lock, so a handle may be
    shared between threads; each read observes a consistent cursor. Create
    handles with ``open_vcf`` or ``VcfHandle.open``.
    """

    def __init__(self, stream: BinaryIO, header: Header, config: ReaderConfig, line_number: int = 0):
        self._stream = stream
        self._header = header
        self._config = config
        self._decoder = RecordDecoder(header, strict_columns=config.strict_columns)
        self._line_number = line_number
        self._state = HandleState.OPENED
        self._lock = threading.Lock()

    @classmethod
    def open(cls, config: ReaderConfig) -> "VcfHandle":
        """
        Open the file named by ``config.path`` and parse its header.

        Raises:
            VcfIOError: If the file cannot be opened or read.
            HeaderParseError: If the header block is malformed, truncated or
                not valid text in ``config.encoding``.
        """
        path = config.path
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise VcfIOError.from_os_error(e, path) from e

        try:
            with timed(f"Reading header of {path}", logger):
                lines = cls._read_header_lines(stream, config.encoding)
                header = HeaderParser.parse(lines)
        except OSError as e:
            stream.close()
            raise VcfIOError.from_os_error(e, path) from e
        except BaseException:
            stream.close()
            raise

        logger.debug("Opened %s (%s, %d samples)", path, header.file_format, len(header.samples))
        return cls(stream, header, config, line_number=len(lines))

    @staticmethod
    def _read_header_lines(stream: BinaryIO, encoding: str) -> list[str]:
        # Meta lines, then the first line not starting with "##" (normally
        # #CHROM). A truncated block is reported by the parser.
        lines = []
        for line_number, raw in enumerate(iter(stream.readline, b""), start=1):
            try:
                line = raw.decode(encoding)
            except UnicodeDecodeError as e:
                raise HeaderParseError(
                    f"header line is not valid {encoding} text: {e.reason}", line_number
                ) from e
            lines.append(line)
            if not line.startswith("##"):
                break
        return lines

    @property
    def header(self) -> Header:
        with self._lock:
            return self._header

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def path(self) -> Path:
        return self._config.path

    @property
    def line_number(self) -> int:
        """Number of the last line consumed (1-based, header lines included)."""
        return self._line_number

    def read_one(self) -> Record:
        """
        Read and decode the next record.

        Raises:
            EndOfStream: If no records remain.
            DecodeError: If the line does not decode; the handle becomes FAULTED.
        """
        with self._lock:
            raw = self._next_line()
            if raw is None:
                self._set_state(HandleState.EXHAUSTED)
                raise EndOfStream(f"end of {self.path}")
            try:
                record = self._decode(raw)
            except DecodeError:
                self._set_state(HandleState.FAULTED)
                raise
            self._set_state(HandleState.STREAMING)
            return record

    def read_many(self, count: int) -> list[Record]:
        """
        Read up to ``count`` records.

        Stops once ``count`` lines have been taken or at end of input;
        reaching the end early is not an error and returns the records read
        so far.

        With the default ``BatchErrorPolicy.FAIL``, every line counts toward
        ``count`` and a line that fails to decode fails the whole batch: the
        remaining lines of the batch are still consumed (and discarded), then
        the first DecodeError is raised and no records are returned.

        With ``BatchErrorPolicy.PARTIAL`` bad lines are logged and skipped and
        do not count toward ``count``, so a short batch still means end of
        input.

        Raises:
            ValueError: If ``count`` is negative.
            DecodeError: Under the FAIL policy, if any line in the batch is bad.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        partial = self._config.batch_errors == BatchErrorPolicy.PARTIAL
        with self._lock:
            self._check_open()
            records: list[Record] = []
            first_error: DecodeError | None = None
            taken = 0
            skipped = 0

            while taken < count:
                raw = self._next_line()
                if raw is None:
                    self._set_state(HandleState.EXHAUSTED)
                    break
                if first_error is not None:
                    taken += 1
                    continue
                try:
                    records.append(self._decode(raw))
                except DecodeError as e:
                    if partial:
                        skipped += 1
                        logger.warning("Skipping undecodable line %d: %s", e.line_number, e.detail)
                        continue
                    first_error = e
                else:
                    self._set_state(HandleState.STREAMING)
                taken += 1

            if first_error is not None:
                self._set_state(HandleState.FAULTED)
                logger.debug("Batch of %d lines failed at line %d", taken, first_error.line_number)
                raise first_error

            logger.debug("Read batch of %d records (%d lines skipped)", len(records), skipped)
            return records

    def close(self) -> None:
        with self._lock:
            if self._state != HandleState.CLOSED:
                self._stream.close()
                self._state = HandleState.CLOSED

    def __enter__(self) -> "VcfHandle":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __iter__(self) -> Iterator[Record]:
        while True:
            try:
                record = self.read_one()
            except EndOfStream:
                return
            yield record

    def __repr__(self) -> str:
        return f"VcfHandle(path='{self.path}', state={self._state.value}, line={self._line_number})"

    # Callers hold self._lock for everything below.

    def _check_open(self) -> None:
        if self._state == HandleState.CLOSED:
            raise ValueError("I/O operation on closed VCF handle")

    def _next_line(self) -> bytes | None:
        """Next raw line, or None when the read yields no content."""
        self._check_open()
        try:
            raw = self._stream.readline()
        except OSError as e:
            raise VcfIOError.from_os_error(e, self.path) from e
        if not raw:
            return None
        self._line_number += 1
        if not raw.rstrip(b"\r\n"):
            return None
        return raw

    def _decode(self, raw: bytes) -> Record:
        """Decode one raw line; every failure is a DecodeError tagged with its line number."""
        try:
            line = raw.decode(self._config.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"line is not valid {self._config.encoding} text: {e.reason}",
                line_number=self._line_number,
                line=raw.decode(self._config.encoding, errors="replace").rstrip("\r\n"),
            ) from e
        try:
            return self._decoder.decode(line)
        except DecodeError as e:
            raise e.at_line(self._line_number)

    def _set_state(self, state: HandleState) -> None:
        if self._state in (HandleState.FAULTED, HandleState.CLOSED):
            return
        self._state = state


def open_vcf(path: Path | str, **options) -> VcfHandle:
    """
    Open a VCF file for streaming.

    Args:
        path: Path to an uncompressed VCF file.
        **options: Further ``ReaderConfig`` fields (encoding, batch_errors,
            strict_columns).

    Raises:
        VcfIOError: Classified I/O failure (not found, permission denied, ...).
        HeaderParseError: The file was read but its header is invalid.
    """
    return VcfHandle.open(ReaderConfig(path=Path(path), **options))


def get_header(handle: VcfHandle) -> Header:
    return handle.header


def read_one(handle: VcfHandle) -> Record:
    return handle.read_one()


def read_many(handle: VcfHandle, count: int) -> list[Record]:
    return handle.read_many(count)
