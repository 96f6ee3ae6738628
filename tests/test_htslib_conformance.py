"""
Cross-check the reader against htslib (via pysam) on the same file.
"""

import pysam

from vcfstream import FilterStatus, open_vcf


def _htslib_filters(rec) -> list[str]:
    return list(rec.filter.keys())


def _our_filters(record) -> list[str]:
    if record.filters.status == FilterStatus.PASS:
        return ["PASS"]
    return list(record.filters.failed)


def test_header_matches_htslib(sample_vcf):
    with pysam.VariantFile(str(sample_vcf)) as vf, open_vcf(sample_vcf) as handle:
        header = handle.header
        assert vf.header.version == str(header.file_format)
        assert list(vf.header.info.keys()) == list(header.infos)
        # htslib always declares PASS.
        assert [f for f in vf.header.filters.keys() if f != "PASS"] == list(header.filters)
        assert list(vf.header.samples) == header.samples
        for key, info in header.infos.items():
            assert vf.header.info[key].type == info.type.value


def test_records_match_htslib(sample_vcf):
    with pysam.VariantFile(str(sample_vcf)) as vf, open_vcf(sample_vcf) as handle:
        ours = handle.read_many(100)
        theirs = list(vf)

    assert len(ours) == len(theirs)
    for record, rec in zip(ours, theirs):
        assert record.chromosome == rec.chrom
        assert record.position == rec.pos
        assert (";".join(record.ids) or None) == rec.id
        assert record.reference_bases == rec.ref
        assert record.alternate_bases == ",".join(rec.alts)
        assert record.quality_score == rec.qual
        assert _our_filters(record) == _htslib_filters(rec)
        assert list(record.info) == list(rec.info.keys())
        assert record.format == list(rec.format.keys())
