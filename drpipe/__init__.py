"""Shared awaitables (drpipe.shared) and TypeScript binding generation (drpipe.tsgen)."""

__version__ = "0.1.0"
__all__ = ["shared", "tsgen"]