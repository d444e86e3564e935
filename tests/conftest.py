"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides builders for real (VLQ-encoded) source maps.
"""

import json
import logging
import sys
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

# One segment: (dst_col,) or (dst_col, src_index, src_line, src_col[, name_index]),
# all absolute and 0-based. One list of segments per generated line.
Segment = tuple[int, ...]


def _vlq(value: int) -> str:
    v = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = v & 31
        v >>= 5
        if v:
            digit |= 32
        out.append(_B64[digit])
        if not v:
            return "".join(out)


def encode_mappings(lines: Sequence[Sequence[Segment]]) -> str:
    """Encode absolute segments into a ``mappings`` string."""
    prev_src = prev_line = prev_col = prev_name = 0
    encoded_lines = []
    for segments in lines:
        prev_dst_col = 0
        encoded = []
        for segment in segments:
            fields = [segment[0] - prev_dst_col]
            prev_dst_col = segment[0]
            if len(segment) >= 4:
                fields += [
                    segment[1] - prev_src,
                    segment[2] - prev_line,
                    segment[3] - prev_col,
                ]
                prev_src, prev_line, prev_col = segment[1], segment[2], segment[3]
            if len(segment) == 5:
                fields.append(segment[4] - prev_name)
                prev_name = segment[4]
            encoded.append("".join(_vlq(f) for f in fields))
        encoded_lines.append(",".join(encoded))
    return ";".join(encoded_lines)


def source_map_json(
    sources: Sequence[str],
    mappings: dict[int, Sequence[Segment]],
    *,
    source_root: str | None = None,
    names: Sequence[str] = (),
) -> str:
    """Build a map document. ``mappings`` is keyed by 1-based generated line."""
    last = max(mappings, default=0)
    lines = [mappings.get(line, ()) for line in range(1, last + 1)]
    doc: dict[str, Any] = {
        "version": 3,
        "file": "out.js",
        "sources": list(sources),
        "names": list(names),
        "mappings": encode_mappings(lines),
    }
    if source_root is not None:
        doc["sourceRoot"] = source_root
    return json.dumps(doc)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by a test (the CLI makes one per run)."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def write_map() -> Callable[..., Path]:
    """Write a source map file: ``write_map(path, sources, mappings, **kw)``."""

    def write(
        path: Path,
        sources: Sequence[str],
        mappings: dict[int, Sequence[Segment]],
        **kwargs: Any,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source_map_json(sources, mappings, **kwargs))
        return path

    return write


@pytest.fixture
def map_json() -> Callable[..., str]:
    """Build map JSON text without writing it."""
    return source_map_json


@pytest.fixture
def project(tmp_path: Path, write_map: Callable[..., Path]) -> Path:
    """A built project: dist/app.js covered, mapped back to src/app.ts.

    Generated line 10 maps to original line 4; line 12 maps to original
    line 7; line 11 has a mapping without a source (injected helper).
    """
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.ts").write_text("export {}\n")
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "app.js").write_text("// bundled\n")
    write_map(
        tmp_path / "dist" / "app.js.map",
        ["../src/app.ts"],
        {
            10: [(0, 0, 3, 0)],
            11: [(0,)],
            12: [(2, 0, 6, 0)],
        },
    )
    return tmp_path
