"""CLI entry point for the scheduled rate update."""

from __future__ import annotations

from fx_cyprus.jobs.populate_rates import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    raise SystemExit(main())
