"""Final record assembly and report rendering."""

from __future__ import annotations

from fx_cyprus.reporting.builder import build_records

__all__ = ["build_records"]
