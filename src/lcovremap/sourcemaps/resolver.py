"""Generated-position to original-position lookup.

Coverage tools report the line a statement starts on, while bundlers tend to
record the mapping a few columns further in. Lookups therefore default to
least-upper-bound bias on the same generated line: the first mapping at or
after the requested column wins. A line with no mappings, or a winning
mapping without a source (runtime helpers injected by the bundler), is
unresolvable.
"""

from __future__ import annotations

import os
from bisect import bisect_left, bisect_right
from pathlib import Path
from typing import TYPE_CHECKING

from lcovremap.sourcemaps.models import Bias, OriginalPosition, SourceMapHandle

if TYPE_CHECKING:
    from sourcemap.objects import Token


class PositionResolver:
    """Resolves generated positions through one source map."""

    def __init__(self, handle: SourceMapHandle) -> None:
        self.handle = handle

        by_line: dict[int, list[Token]] = {}
        for token in handle.index:
            by_line.setdefault(token.dst_line, []).append(token)

        self._tokens: dict[int, list[Token]] = {}
        self._columns: dict[int, list[int]] = {}
        for dst_line, tokens in by_line.items():
            tokens.sort(key=lambda t: t.dst_col)
            self._tokens[dst_line] = tokens
            self._columns[dst_line] = [t.dst_col for t in tokens]

    def resolve(
        self,
        line: int,
        column: int = 0,
        bias: Bias = Bias.LEAST_UPPER_BOUND,
    ) -> OriginalPosition | None:
        """Map a generated ``line`` (1-based) and ``column`` (0-based).

        Returns:
            The original position, or None when the position has no
            original counterpart.
        """
        # sourcemap tokens use 0-based lines
        tokens = self._tokens.get(line - 1)
        if not tokens:
            return None
        columns = self._columns[line - 1]

        match bias:
            case Bias.LEAST_UPPER_BOUND:
                i = bisect_left(columns, column)
                if i == len(columns):
                    return None
            case Bias.GREATEST_LOWER_BOUND:
                i = bisect_right(columns, column) - 1
                if i < 0:
                    return None
                # first of several mappings sharing that column
                i = bisect_left(columns, columns[i])

        token = tokens[i]
        if not token.src:
            return None
        return OriginalPosition(
            source=token.src,
            line=token.src_line + 1,
            column=token.src_col,
            name=token.name,
        )

    def original_path(self, position: OriginalPosition, source_dir: Path) -> str:
        """Derive the output path of the file ``position`` points into.

        Without a source root, sources are relative to the map file: the path
        is rebuilt from the map's directory and expressed relative to
        ``source_dir`` with a leading ``./``. With a source root, the root
        prefix inside the recorded source is swapped for ``./``.
        """
        source_root = self.handle.source_root
        if source_root is None:
            joined = os.path.join(os.path.dirname(self.handle.map_path), position.source)
            return "." + os.sep + os.path.relpath(joined, source_dir)
        return position.source.replace(source_root, "./", 1)
