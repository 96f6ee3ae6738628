"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from vcfstream.core.header import HeaderParser  # noqa: E402
from vcfstream.models.core import Header  # noqa: E402

HEADER_LINES = [
    "##fileformat=VCFv4.1",
    "##contig=<ID=1,length=249250621>",
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Total Depth">',
    '##INFO=<ID=AF,Number=A,Type=Float,Description="Allele Frequency">',
    '##INFO=<ID=DB,Number=0,Type=Flag,Description="dbSNP membership, build 129">',
    '##INFO=<ID=AA,Number=1,Type=String,Description="Ancestral Allele">',
    '##FILTER=<ID=q10,Description="Quality below 10">',
    '##FILTER=<ID=s50,Description="Less than 50% of samples have data">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
    '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read Depth">',
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tNA00001\tNA00002",
]

RECORD_LINES = [
    "1\t100\trs1\tA\tT\t50\tPASS\tDP=10;AF=0.5;DB\tGT:DP\t0/1:5\t1/1:9",
    "1\t200\t.\tG\tC\t.\t.\tDP=3\tGT:DP\t0/0:7\t./.:.",
    "1\t300\trs2;rs3\tT\tTA\t12.5\tq10;s50\t.\tGT\t0|1\t1|1",
    "1\t400\t.\tC\tG\t99\tPASS\tAA=C\tGT:DP\t1/1:20\t0/1:11",
    "1\t500\trs4\tGA\tG\t3\tq10\tDP=1\tGT:DP\t0/1:1\t0/0:2",
]


def vcf_text(header_lines: list[str], record_lines: list[str]) -> str:
    return "\n".join(header_lines + record_lines) + "\n"


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a VCF from header and record lines into tmp_path."""
    counter = {"n": 0}

    def _write(record_lines=None, header_lines=None, name=None) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"test_{counter['n']}.vcf")
        path.write_text(
            vcf_text(
                HEADER_LINES if header_lines is None else header_lines,
                RECORD_LINES if record_lines is None else record_lines,
            )
        )
        return path

    return _write


@pytest.fixture
def sample_vcf(write_vcf) -> Path:
    """Two-sample VCF with five valid records."""
    return write_vcf()


@pytest.fixture
def sample_header() -> Header:
    return HeaderParser.parse(HEADER_LINES)


@pytest.fixture
def sites_only_header() -> Header:
    return HeaderParser.parse(
        [
            "##fileformat=VCFv4.3",
            '##INFO=<ID=DP,Number=1,Type=Integer,Description="Depth">',
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO",
        ]
    )
