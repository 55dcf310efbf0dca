"""Per-run context handed to every pipeline stage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fx_cyprus.config import Settings
from fx_cyprus.utils.logger import get_logger


@dataclass(slots=True)
class RunContext:
    """Configuration plus the logger a stage should report through."""

    settings: Settings
    logger: logging.Logger = field(default_factory=lambda: get_logger("fx_cyprus.run"))

    @property
    def base_currency(self) -> str:
        return self.settings.base_currency

    @property
    def required_currencies(self) -> tuple[str, ...]:
        return self.settings.required_currencies


__all__ = ["RunContext"]
