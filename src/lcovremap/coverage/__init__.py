"""LCOV coverage model, parsing, and serialization.

Usage:
    from lcovremap.coverage import load_coverage, format_record

    table = load_coverage(Path("coverage/lcov.info"))
    for path, record in table.items():
        print(format_record(record))
"""

from lcovremap.coverage.models import (
    BranchHit,
    CoverageRecord,
    FunctionHit,
    GeneratedFileTable,
    HitGroup,
    LineHit,
    OutputTable,
)
from lcovremap.coverage.parser import load_coverage, load_lcov, parse_lcov
from lcovremap.coverage.writer import format_record, format_records

__all__ = [
    # Models
    "BranchHit",
    "CoverageRecord",
    "FunctionHit",
    "GeneratedFileTable",
    "HitGroup",
    "LineHit",
    "OutputTable",
    # Parsing
    "load_coverage",
    "load_lcov",
    "parse_lcov",
    # Writing
    "format_record",
    "format_records",
]
