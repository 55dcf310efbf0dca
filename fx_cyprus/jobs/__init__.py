"""Scheduled job entry points for :mod:`fx_cyprus`."""

from __future__ import annotations

from typing import Any

__all__ = ["update_rates", "main"]


def __getattr__(name: str) -> Any:
    """Lazily expose job helpers to avoid import-time side effects."""

    if name in {"update_rates", "main"}:
        from fx_cyprus.jobs.populate_rates import main as _main
        from fx_cyprus.jobs.populate_rates import update_rates as _update_rates

        return {"update_rates": _update_rates, "main": _main}[name]
    raise AttributeError(f"module 'fx_cyprus.jobs' has no attribute {name}")
