"""
Value Converter: plain, self-describing values for callers outside the core.

Enumerations become tags; tags with a payload become ``(tag, payload)``
tuples. Everything produced here is built from str, int, float, bool, None,
list, tuple and dict, so it can be handed to any serializer.

    Number COUNT(1)   -> ("count", 1)
    Number A          -> "alternate_alleles"
    Filters PASS      -> "pass"
    Filters FAIL      -> ("fail", ["q10", "s50"])
"""

from typing import Any

from .models.core import (
    FilterStatus,
    Filters,
    Header,
    Number,
    NumberKind,
    Record,
    ValueType,
)

__all__ = [
    "RESERVED_INFO_KEYS",
    "number_to_value",
    "type_to_value",
    "filters_to_value",
    "info_key_name",
    "header_to_value",
    "record_to_value",
    "typed_info",
    "typed_info_value",
]

UNKNOWN = "unknown"

_NUMBER_TAGS = {
    NumberKind.A: "alternate_alleles",
    NumberKind.R: "reference_and_alternate_alleles",
    NumberKind.G: "genotypes",
    NumberKind.UNKNOWN: UNKNOWN,
}

_TYPE_TAGS = {
    ValueType.INTEGER: "integer",
    ValueType.FLOAT: "float",
    ValueType.FLAG: "flag",
    ValueType.CHARACTER: "character",
    ValueType.STRING: "string",
}

# Reserved INFO keys of VCF 4.x (including the
# structural-variant keys) and their descriptive names.
RESERVED_INFO_KEYS = {
    "AA": "ancestral_allele",
    "AC": "allele_count",
    "AD": "total_read_depths",
    "ADF": "forward_strand_read_depths",
    "ADR": "reverse_strand_read_depths",
    "AF": "allele_frequencies",
    "AN": "total_allele_count",
    "BQ": "base_quality",
    "CIGAR": "cigar",
    "DB": "is_in_db_snp",
    "DP": "total_depth",
    "H2": "is_in_hap_map2",
    "H3": "is_in_hap_map3",
    "MQ": "mapping_quality",
    "MQ0": "zero_mapping_quality_count",
    "NS": "samples_with_data_count",
    "SB": "strand_bias",
    "SOMATIC": "is_somatic_mutation",
    "VALIDATED": "is_validated",
    "1000G": "is_in_1000_genomes",
    "IMPRECISE": "is_imprecise",
    "NOVEL": "is_novel",
    "END": "end_position",
    "SVTYPE": "sv_type",
    "SVLEN": "sv_lengths",
    "CIPOS": "position_confidence_intervals",
    "CIEND": "end_confidence_intervals",
    "HOMLEN": "microhomology_lengths",
    "HOMSEQ": "microhomology_sequences",
    "BKPTID": "breakpoint_ids",
    "MEINFO": "mobile_element_info",
    "METRANS": "mobile_element_transduction_info",
    "DGVID": "dbv_id",
    "DBVARID": "db_var_id",
    "DBRIPID": "db_rip_id",
    "MATEID": "mate_breakend_ids",
    "PARID": "partner_breakend_id",
    "EVENT": "breakend_event_id",
    "CILEN": "breakend_confidence_intervals",
    "DPADJ": "adjacent_read_depths",
    "CN": "breakend_copy_number",
    "CNADJ": "adjacent_copy_number",
    "CICN": "copy_number_confidence_intervals",
    "CICNADJ": "adjacent_copy_number_confidence_intervals",
}


def number_to_value(number: Number) -> str | tuple[str, int]:
    if number.kind == NumberKind.COUNT:
        return ("count", number.count)
    return _NUMBER_TAGS.get(number.kind, UNKNOWN)


def type_to_value(value_type: ValueType) -> str:
    return _TYPE_TAGS.get(value_type, UNKNOWN)


def filters_to_value(filters: Filters) -> str | tuple[str, list[str]]:
    if filters.status == FilterStatus.PASS:
        return "pass"
    if filters.status == FilterStatus.FAIL:
        return ("fail", list(filters.failed))
    if filters.status == FilterStatus.NOT_TESTED:
        return "none"
    return UNKNOWN


def info_key_name(key: str) -> str:
    """Descriptive name of a reserved INFO key, ``"other"`` for anything else."""
    return RESERVED_INFO_KEYS.get(key, "other")


def header_to_value(header: Header) -> dict[str, Any]:
    """Convert a Header into nested plain values."""
    return {
        "file_format": {"major": header.file_format.major, "minor": header.file_format.minor},
        "infos": {
            info_id: {
                "id": info.id,
                "number": number_to_value(info.number),
                "type": type_to_value(info.type),
                "description": info.description,
            }
            for info_id, info in header.infos.items()
        },
        "filters": {
            filter_id: {"id": flt.id, "description": flt.description}
            for filter_id, flt in header.filters.items()
        },
        "samples": list(header.samples),
    }


def record_to_value(record: Record) -> dict[str, Any]:
    """Convert a Record into plain values; INFO and genotype values stay raw strings."""
    return {
        "chromosome": record.chromosome,
        "position": record.position,
        "ids": list(record.ids),
        "reference_bases": record.reference_bases,
        "alternate_bases": record.alternate_bases,
        "quality_score": record.quality_score,
        "filters": filters_to_value(record.filters),
        "info": dict(record.info),
        "format": list(record.format),
        "genotypes": dict(record.genotypes),
        "samples": [dict(sample) for sample in record.samples],
    }


def _scalar(raw: str, value_type: ValueType) -> Any:
    if raw == ".":
        return None
    if value_type == ValueType.INTEGER:
        return int(raw)
    if value_type == ValueType.FLOAT:
        return float(raw)
    if value_type == ValueType.CHARACTER and len(raw) != 1:
        raise ValueError(f"not a single character: {raw!r}")
    return raw


def typed_info_value(raw: str, number: Number, value_type: ValueType) -> Any:
    """
    Interpret one raw INFO value according to its header definition.

    Flags become True. A fixed count of 1 yields a scalar; every other
    Number yields a list. Missing components (``.``) become None. A value
    that does not fit its declared type is returned unchanged.
    """
    if value_type == ValueType.FLAG:
        return True
    try:
        if number.kind == NumberKind.COUNT and number.count == 1:
            return _scalar(raw, value_type)
        return [_scalar(part, value_type) for part in raw.split(",")]
    except ValueError:
        return raw


def typed_info(record: Record, header: Header) -> dict[str, Any]:
    """
    Typed view of ``record.info``.

    Keys without an ``##INFO`` definition keep their raw string value.
    """
    typed: dict[str, Any] = {}
    for key, raw in record.info.items():
        definition = header.infos.get(key)
        if definition is None:
            typed[key] = raw
        else:
            typed[key] = typed_info_value(raw, definition.number, definition.type)
    return typed
