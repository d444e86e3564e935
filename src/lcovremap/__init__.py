"""lcov-remap: remap LCOV coverage of bundled/transpiled code onto original sources."""

from lcovremap.ops import get_lcov, write_lcov

__version__ = "0.1.0"

__all__ = ["__version__", "get_lcov", "write_lcov"]
