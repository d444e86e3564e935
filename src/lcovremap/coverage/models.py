"""Coverage data model.

File-centric model mirroring an LCOV record: every record holds three hit
groups (functions, lines, branches). Entries are appended, never merged by
identity, so a record can absorb many generated entries that resolve to the
same original line.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar


@dataclass(frozen=True, slots=True)
class FunctionHit:
    """Function coverage: ``FN`` + ``FNDA`` pair."""

    line: int
    name: str
    hits: int


@dataclass(frozen=True, slots=True)
class LineHit:
    """Line coverage: ``DA`` entry."""

    line: int
    hits: int


@dataclass(frozen=True, slots=True)
class BranchHit:
    """Branch coverage: ``BRDA`` entry.

    ``taken`` is the branch's contribution to the group's hit total.
    """

    line: int
    block: int
    branch: int
    taken: int


T = TypeVar("T", FunctionHit, LineHit, BranchHit)


@dataclass(slots=True)
class HitGroup(Generic[T]):
    """Running ``found``/``hit`` totals over an ordered list of entries.

    ``add`` is the only mutator and updates all three fields together, so
    ``found == len(details)`` and ``hit`` equals the summed contributions at
    all times.
    """

    _details: list[T] = field(default_factory=list)
    _found: int = 0
    _hit: int = 0

    @property
    def found(self) -> int:
        return self._found

    @property
    def hit(self) -> int:
        return self._hit

    @property
    def details(self) -> Sequence[T]:
        return tuple(self._details)

    def add(self, entry: T, hits: int) -> None:
        self._details.append(entry)
        self._found += 1
        self._hit += hits

    def __iter__(self) -> Iterator[T]:
        return iter(self._details)

    def __len__(self) -> int:
        return self._found


@dataclass(slots=True)
class CoverageRecord:
    """Coverage for a single file, keyed by ``path``.

    For parsed input the path is the generated file as written in ``SF:``;
    for remapped output it is the derived original path.
    """

    path: str
    functions: HitGroup[FunctionHit] = field(default_factory=HitGroup)
    lines: HitGroup[LineHit] = field(default_factory=HitGroup)
    branches: HitGroup[BranchHit] = field(default_factory=HitGroup)

    def add_function(self, func: FunctionHit) -> CoverageRecord:
        self.functions.add(func, func.hits)
        return self

    def add_line(self, line: LineHit) -> CoverageRecord:
        self.lines.add(line, line.hits)
        return self

    def add_branch(self, branch: BranchHit) -> CoverageRecord:
        self.branches.add(branch, branch.taken)
        return self

    def extend(self, other: CoverageRecord) -> CoverageRecord:
        """Append every entry of ``other``, preserving its order.

        Iterates snapshots, so extending a record with itself doubles it.
        """
        for func in other.functions.details:
            self.add_function(func)
        for line in other.lines.details:
            self.add_line(line)
        for branch in other.branches.details:
            self.add_branch(branch)
        return self


class OutputTable:
    """Original file path -> CoverageRecord, in first-insertion order.

    Records are only created through ``record_for`` and only grow through
    their ``add_*`` methods or ``merge``.
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[str, CoverageRecord] = {}

    def record_for(self, path: str) -> CoverageRecord:
        """Get the record for ``path``, creating it on first use."""
        record = self._records.get(path)
        if record is None:
            record = self._records[path] = CoverageRecord(path)
        return record

    def merge(self, other: OutputTable) -> OutputTable:
        """Concatenate ``other`` into this table.

        Records sharing a path are extended, never replaced; new paths are
        appended after the existing ones.
        """
        for record in other:
            self.record_for(record.path).extend(record)
        return self

    def get(self, path: str) -> CoverageRecord | None:
        return self._records.get(path)

    def paths(self) -> list[str]:
        return list(self._records)

    def __iter__(self) -> Iterator[CoverageRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __repr__(self) -> str:
        return f"OutputTable({self.paths()!r})"


# Generated file path (as written in the LCOV input) -> parsed record
GeneratedFileTable = dict[str, CoverageRecord]
