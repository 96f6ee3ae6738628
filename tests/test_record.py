"""Tests for per-line record decoding."""

import pytest

from vcfstream.core.record import RecordDecoder
from vcfstream.errors import DecodeError
from vcfstream.models.core import Filters, FilterStatus


def sites_line(id_="rs1", qual="50", flt="PASS", info="DP=10", pos="100"):
    return f"1\t{pos}\t{id_}\tA\tT\t{qual}\t{flt}\t{info}"


def test_decode_sites_only_record(sites_only_header):
    record = RecordDecoder(sites_only_header).decode("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\n")
    assert record.chromosome == "1"
    assert record.position == 100
    assert record.ids == ["rs1"]
    assert record.reference_bases == "A"
    assert record.alternate_bases == "T"
    assert record.quality_score == 50.0
    assert record.filters == Filters.passed()
    assert record.info == {"DP": "10"}
    assert record.format == []
    assert record.genotypes == {}
    assert record.samples == []


@pytest.mark.parametrize(
    "column, expected",
    [
        (".", []),
        ("rs1", ["rs1"]),
        ("rs1;rs2", ["rs1", "rs2"]),
        ("rs1;rs2;COSM3", ["rs1", "rs2", "COSM3"]),
    ],
)
def test_ids(sites_only_header, column, expected):
    record = RecordDecoder(sites_only_header).decode(sites_line(id_=column))
    assert record.ids == expected


@pytest.mark.parametrize(
    "column, expected",
    [
        (".", None),
        ("50", 50.0),
        ("12.5", 12.5),
        ("0", 0.0),
        ("1e3", 1000.0),
        ("-3.25", -3.25),
    ],
)
def test_quality_score(sites_only_header, column, expected):
    record = RecordDecoder(sites_only_header).decode(sites_line(qual=column))
    assert record.quality_score == expected


def test_filters(sites_only_header):
    decoder = RecordDecoder(sites_only_header)
    assert decoder.decode(sites_line(flt="PASS")).filters.status == FilterStatus.PASS
    assert decoder.decode(sites_line(flt=".")).filters.status == FilterStatus.NOT_TESTED
    failed = decoder.decode(sites_line(flt="q10;s50")).filters
    assert failed.status == FilterStatus.FAIL
    assert failed.failed == ["q10", "s50"]


def test_info_keeps_raw_values_in_column_order(sites_only_header):
    record = RecordDecoder(sites_only_header).decode(sites_line(info="NS=3;DP=14;AF=0.5,0.2;DB;H2;EQ=a=b"))
    assert list(record.info) == ["NS", "DP", "AF", "DB", "H2", "EQ"]
    assert record.info["AF"] == "0.5,0.2"
    # Flags carry no value; only the first '=' splits.
    assert record.info["DB"] == ""
    assert record.info["EQ"] == "a=b"


def test_missing_info(sites_only_header):
    assert RecordDecoder(sites_only_header).decode(sites_line(info=".")).info == {}


def test_format_and_samples(sample_header):
    record = RecordDecoder(sample_header).decode(
        "1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:AD:DP\t0/1:3,2:5\t1/1"
    )
    assert record.format == ["GT", "AD", "DP"]
    # Trailing fields may be dropped from a sample.
    assert record.samples == [{"GT": "0/1", "AD": "3,2", "DP": "5"}, {"GT": "1/1"}]


def test_genotypes_first_sample_wins(sample_header):
    # Regression: the flattened view keeps only the first sample's value per key.
    record = RecordDecoder(sample_header).decode(
        "1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:DP\t0/1:5\t1/1:9"
    )
    assert record.genotypes == {"GT": "0/1", "DP": "5"}
    assert record.samples[1] == {"GT": "1/1", "DP": "9"}


def test_genotypes_fill_keys_missing_from_first_sample(sample_header):
    record = RecordDecoder(sample_header).decode(
        "1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:DP\t0/1\t1/1:9"
    )
    assert record.genotypes == {"GT": "0/1", "DP": "9"}


def test_strips_crlf(sites_only_header):
    record = RecordDecoder(sites_only_header).decode(sites_line(info="DP=7") + "\r\n")
    assert record.info == {"DP": "7"}


@pytest.mark.parametrize(
    "line, detail",
    [
        ("1\t100\trs1\tA\tT\t50\tPASS", "at least 8 columns"),
        ("1\tabc\trs1\tA\tT\t50\tPASS\tDP=10", "invalid POS"),
        ("1\t-5\trs1\tA\tT\t50\tPASS\tDP=10", "invalid POS"),
        ("1\t0\trs1\tA\tT\t50\tPASS\tDP=10", "POS must be >= 1"),
        ("1\t100\trs1\tA\tT\thigh\tPASS\tDP=10", "invalid QUAL"),
        ("1\t100\trs1;\tA\tT\t50\tPASS\tDP=10", "empty token in ID"),
        ("1\t100\trs1\tA\tT\t50\tq10;;s50\tDP=10", "empty token in FILTER"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10;;AF=1", "empty token in INFO"),
        ("1\t100\trs1\tA\tT\t50\tPASS\t=3", "empty key in INFO"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=1;DP=2", "duplicate INFO key"),
        ("\t100\trs1\tA\tT\t50\tPASS\tDP=10", "empty CHROM"),
        ("1\t100\trs1\t\tT\t50\tPASS\tDP=10", "empty REF"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT\t0/1\t1/1", "expected 8 columns"),
    ],
)
def test_decode_errors(sites_only_header, line, detail):
    with pytest.raises(DecodeError, match=detail) as excinfo:
        RecordDecoder(sites_only_header).decode(line)
    assert excinfo.value.line == line


@pytest.mark.parametrize(
    "line, detail",
    [
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:DP\t0/1:5", "expected 11 columns"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10", "expected 11 columns"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:DP\t0/1:5:7\t1/1", "FORMAT declares 2"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT::DP\t0/1\t1/1", "empty key in FORMAT"),
        ("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:GT\t0/1\t1/1", "duplicate key in FORMAT"),
    ],
)
def test_decode_errors_with_samples(sample_header, line, detail):
    with pytest.raises(DecodeError, match=detail):
        RecordDecoder(sample_header).decode(line)


def test_lenient_columns(sample_header):
    decoder = RecordDecoder(sample_header, strict_columns=False)
    record = decoder.decode("1\t100\trs1\tA\tT\t50\tPASS\tDP=10\tGT:DP\t0/1:5")
    assert record.samples == [{"GT": "0/1", "DP": "5"}]
    assert decoder.decode("1\t100\trs1\tA\tT\t50\tPASS\tDP=10").format == []


def test_sites_only_header_tolerates_format_column(sites_only_header):
    record = RecordDecoder(sites_only_header).decode(sites_line() + "\tGT")
    assert record.format == ["GT"]
    assert record.samples == []
