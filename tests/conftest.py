from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from fx_cyprus.config import (
    BANK_OF_CYPRUS,
    BANK_OF_CYPRUS_LAYOUT,
    HELLENIC_BANK,
    HELLENIC_BANK_LAYOUT,
    Settings,
    SourceConfig,
)
from fx_cyprus.context import RunContext


def make_settings(
    tmp_path: Path,
    *,
    required: tuple[str, ...] = ("EUR", "USD", "GBP", "CHF"),
    threshold: str = "5",
) -> Settings:
    return Settings(
        primary=SourceConfig(HELLENIC_BANK, "https://hb.example/rates", HELLENIC_BANK_LAYOUT),
        secondary=SourceConfig(BANK_OF_CYPRUS, "https://boc.example/rates", BANK_OF_CYPRUS_LAYOUT),
        required_currencies=required,
        rate_threshold=Decimal(threshold),
        db_url=f"sqlite:///{tmp_path / 'rates.db'}",
        lock_path=tmp_path / "update.lock",
    )


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture()
def context(settings: Settings) -> RunContext:
    return RunContext(settings=settings)
