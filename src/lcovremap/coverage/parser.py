"""LCOV format parser.

LCOV format is a plain text format with records like:
- TN:<test name>
- SF:<source file path>
- FN:<line>,<name>
- FNDA:<hit count>,<name>
- FNF:<functions found>
- FNH:<functions hit>
- DA:<line>,<hit count>[,<checksum>]
- LF:<lines found>
- LH:<lines hit>
- BRDA:<line>,<block>,<branch>,<taken>
- BRF:<branches found>
- BRH:<branches hit>
- end_of_record

Totals found in the input are ignored; each record recomputes its own from
the entries it holds.
"""

from dataclasses import dataclass, field
from pathlib import Path

from lcovremap.core.errors import CoverageError
from lcovremap.core.logging import get_logger
from lcovremap.coverage.models import (
    BranchHit,
    CoverageRecord,
    FunctionHit,
    GeneratedFileTable,
    LineHit,
)

log = get_logger("coverage.parser")

END_OF_RECORD = "end_of_record"

_IGNORED_KEYS = frozenset({"TN", "FNF", "FNH", "LF", "LH", "BRF", "BRH"})


@dataclass
class _PendingFunction:
    line: int
    name: str
    hits: int | None = None


@dataclass
class _RecordBuilder:
    """Collects one SF block.

    Functions are held back until the block closes because their hit counts
    arrive on later FNDA lines.
    """

    record: CoverageRecord
    functions: list[_PendingFunction] = field(default_factory=list)

    def set_function_hits(self, name: str, hits: int) -> bool:
        for func in self.functions:
            if func.name == name and func.hits is None:
                func.hits = hits
                return True
        return False

    def build(self) -> CoverageRecord:
        for func in self.functions:
            hits = func.hits or 0
            self.record.add_function(FunctionHit(line=func.line, name=func.name, hits=hits))
        return self.record


def _to_int(value: str, lineno: int, line: str) -> int:
    # '-' marks a branch (or line) that was never evaluated
    if value == "-":
        return 0
    try:
        return int(value)
    except ValueError:
        reason = f"expected an integer, got {value!r}"
        raise CoverageError.parse_error(lineno, line, reason) from None


def _split(value: str, count: int, lineno: int, line: str, key: str) -> list[str]:
    parts = value.split(",", count - 1)
    if len(parts) < count:
        raise CoverageError.parse_error(lineno, line, f"{key} needs {count} fields")
    return parts


def parse_lcov(content: str) -> GeneratedFileTable:
    """Parse LCOV text into generated-file records, in input order.

    Raises:
        CoverageError: On an entry with missing or non-numeric fields.
    """
    files: GeneratedFileTable = {}
    current: _RecordBuilder | None = None

    def close(builder: _RecordBuilder) -> None:
        record = builder.build()
        if record.path in files:
            log.warning("duplicate_record", path=record.path)
        files[record.path] = record

    for lineno, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue

        if line == END_OF_RECORD:
            if current is not None:
                close(current)
            current = None
            continue

        key, sep, value = line.partition(":")
        if not sep:
            log.debug("unrecognized_line", lineno=lineno, line=line)
            continue

        if key == "SF":
            if current is not None:
                # SF without end_of_record: the previous block ends here
                close(current)
            current = _RecordBuilder(CoverageRecord(value))
            continue

        if key in _IGNORED_KEYS:
            continue

        if current is None:
            # Data outside an SF block has no file to attach to
            continue

        if key == "FN":
            fn_line, name = _split(value, 2, lineno, line, key)
            current.functions.append(_PendingFunction(_to_int(fn_line, lineno, line), name))

        elif key == "FNDA":
            hits, name = _split(value, 2, lineno, line, key)
            if not current.set_function_hits(name, _to_int(hits, lineno, line)):
                log.debug("fnda_without_fn", path=current.record.path, name=name)

        elif key == "DA":
            # DA:line,hits[,checksum]
            da_line, rest = _split(value, 2, lineno, line, key)
            hits = rest.split(",", 1)[0]
            current.record.add_line(
                LineHit(line=_to_int(da_line, lineno, line), hits=_to_int(hits, lineno, line))
            )

        elif key == "BRDA":
            br_line, block, branch, taken = _split(value, 4, lineno, line, key)
            current.record.add_branch(
                BranchHit(
                    line=_to_int(br_line, lineno, line),
                    block=_to_int(block, lineno, line),
                    branch=_to_int(branch, lineno, line),
                    taken=_to_int(taken, lineno, line),
                )
            )

    # Handle file without end_of_record
    if current is not None:
        close(current)

    return files


def load_lcov(path: Path) -> GeneratedFileTable:
    """Read and parse an LCOV file. Read errors propagate unchanged."""
    content = path.read_text(encoding="utf-8")
    files = parse_lcov(content)
    log.info("coverage_loaded", path=str(path), files=len(files))
    return files


def load_coverage(lcov: str | Path) -> GeneratedFileTable:
    """Parse ``lcov`` as raw LCOV text when it holds a record, else as a path."""
    if isinstance(lcov, str) and END_OF_RECORD in lcov:
        return parse_lcov(lcov)
    return load_lcov(Path(lcov))
