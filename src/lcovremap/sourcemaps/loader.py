"""Locating, reading and decoding source maps.

A resolver function maps each generated path from the coverage input to the
file holding its map. Files ending in ``.map`` are read as map documents;
anything else is treated as the generated source itself and searched for a
``sourceMappingURL`` comment, which may carry the map inline as a ``data:``
URI or point at a sidecar file next to the generated source.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from pathlib import Path
from urllib.parse import unquote

import sourcemap

from lcovremap.core.errors import SourceMapError
from lcovremap.core.logging import get_logger
from lcovremap.sourcemaps.models import SourceMapHandle

log = get_logger("sourcemaps.loader")

DEFAULT_SUFFIX = ".map"

# generated path -> path of the file holding its map (None: no map)
SourceMapResolver = Callable[[str], str | None]


def default_sourcemap_resolver(suffix: str = DEFAULT_SUFFIX) -> SourceMapResolver:
    """Resolver that expects a sidecar map at ``<generated path><suffix>``."""

    def resolve(generated_path: str) -> str:
        return generated_path + suffix

    return resolve


def inline_sourcemap_resolver(generated_path: str) -> str:
    """Resolver for maps embedded in (or referenced by) the generated file."""
    return generated_path


def _read(generated_path: str, path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SourceMapError.missing(generated_path, str(path)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise SourceMapError.unreadable(generated_path, str(path), str(e)) from e


def _decode_data_uri(generated_path: str, path: Path, uri: str) -> str:
    """Decode ``data:[<mediatype>][;base64],<payload>``."""
    header, sep, payload = uri[len("data:") :].partition(",")
    if not sep:
        raise SourceMapError.decode_error(generated_path, str(path), "malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise SourceMapError.decode_error(generated_path, str(path), str(e)) from e
    return unquote(payload)


def _extract_from_source(generated_path: str, path: Path, content: str) -> tuple[str, Path]:
    """Find the map a generated file points at. Returns (map text, map path)."""
    url = sourcemap.discover(content)
    if not url:
        raise SourceMapError.missing(generated_path, str(path))

    if url.startswith("data:"):
        return _decode_data_uri(generated_path, path, url), path

    sidecar = path.parent / unquote(url)
    return _read(generated_path, sidecar), sidecar


def load_source_map(generated_path: str, map_path: str | None) -> SourceMapHandle:
    """Read and decode the map for ``generated_path``.

    Args:
        generated_path: Generated file key from the coverage input.
        map_path: What the resolver returned for it.

    Raises:
        SourceMapError: If the map is missing, unreadable or invalid.
    """
    if map_path is None:
        raise SourceMapError.missing(generated_path)

    path = Path(map_path)
    content = _read(generated_path, path)
    if path.suffix != ".map":
        content, path = _extract_from_source(generated_path, path, content)

    try:
        index = sourcemap.loads(content)
    except (ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        reason = str(e) or type(e).__name__
        raise SourceMapError.decode_error(generated_path, str(path), reason) from e

    # An empty sourceRoot behaves like an absent one
    source_root = index.raw.get("sourceRoot") or None

    log.debug(
        "sourcemap_loaded",
        generated=generated_path,
        map_path=str(path),
        sources=len(index.raw.get("sources", [])),
        source_root=source_root,
    )
    return SourceMapHandle(
        generated_path=generated_path,
        map_path=str(path),
        index=index,
        source_root=source_root,
    )
