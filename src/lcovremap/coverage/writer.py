"""LCOV serialization.

Each record is emitted as a self-contained block::

    TN:
    SF:<path>
    FN:<line>,<name>
    FNF:<functions found>
    FNH:<functions hit>
    FNDA:<hits>,<name>
    DA:<line>,<hits>
    LF:<lines found>
    LH:<lines hit>
    BRDA:<line>,<block>,<branch>,<taken>
    BRF:<branches found>
    BRH:<branches hit>
    end_of_record

``FNH``/``LH``/``BRH`` carry the summed hit counts of the group, not the
number of entries with a non-zero count.
"""

from collections.abc import Iterable

from lcovremap.coverage.models import CoverageRecord

RECORD_SEPARATOR = "\n"


def format_record(record: CoverageRecord, *, path: str | None = None) -> str:
    """Serialize one record. ``path`` overrides the ``SF:`` value."""
    output = ["TN:", f"SF:{record.path if path is None else path}"]

    functions = record.functions
    output.extend(f"FN:{func.line},{func.name}" for func in functions)
    output.append(f"FNF:{functions.found}")
    output.append(f"FNH:{functions.hit}")
    output.extend(f"FNDA:{func.hits},{func.name}" for func in functions)

    lines = record.lines
    output.extend(f"DA:{line.line},{line.hits}" for line in lines)
    output.append(f"LF:{lines.found}")
    output.append(f"LH:{lines.hit}")

    branches = record.branches
    output.extend(
        f"BRDA:{branch.line},{branch.block},{branch.branch},{branch.taken}"
        for branch in branches
    )
    output.append(f"BRF:{branches.found}")
    output.append(f"BRH:{branches.hit}")

    output.append("end_of_record")
    return "\n".join(output)


def format_records(records: Iterable[tuple[str, CoverageRecord]]) -> str:
    """Serialize ``(path, record)`` pairs in order, one block each."""
    return RECORD_SEPARATOR.join(format_record(record, path=path) for path, record in records)
