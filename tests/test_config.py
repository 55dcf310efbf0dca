from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from fx_cyprus.config import (
    BANK_OF_CYPRUS_LAYOUT,
    DEFAULT_LOCK_PATH,
    HELLENIC_BANK_LAYOUT,
    TableLayout,
    load_settings,
    parse_threshold,
    settings_from_mapping,
)
from fx_cyprus.db import DEFAULT_SQLITE_DB_PATH
from fx_cyprus.exceptions import ConfigurationError

CONFIG = """
[links]
hellenic_bank = "https://hb.example/rates"
bank_of_cyprus = "https://boc.example/rates"

[currencies]
required = "EUR, usd,GBP,CHF"
rate_threshold = 5

[layouts.secondary]
depth = [1, 2]
selling_index = 5
code_index = 0

[report]
csv_path = "out/rates.csv"

[logging]
level = "debug"
"""


def test_load_settings_reads_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(CONFIG, encoding="utf-8")

    settings = load_settings(path)

    assert settings.primary.url == "https://hb.example/rates"
    assert settings.primary.layout == HELLENIC_BANK_LAYOUT
    assert settings.secondary.layout == TableLayout(
        depth=(1, 2), selling_index=5, code_index=0, buying_index=4
    )
    assert settings.required_currencies == ("EUR", "USD", "GBP", "CHF")
    assert settings.rate_threshold == Decimal("5")
    assert settings.base_currency == "EUR"
    assert settings.csv_report_path == Path("out/rates.csv")
    assert settings.html_report_path is None
    assert settings.lock_path == DEFAULT_LOCK_PATH
    assert settings.log_level == "DEBUG"
    assert settings.sink_url == f"sqlite:///{DEFAULT_SQLITE_DB_PATH.as_posix()}"


def test_settings_defaults_layouts_and_accepts_lists() -> None:
    settings = settings_from_mapping(
        {
            "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
            "currencies": {"required": ["usd", "USD", "gbp"], "rate_threshold": "2.5"},
            "sink": {"url": "postgresql://localhost/rates"},
        }
    )

    assert settings.secondary.layout == BANK_OF_CYPRUS_LAYOUT
    assert settings.required_currencies == ("USD", "GBP")
    assert settings.rate_threshold == Decimal("2.5")
    assert settings.sink_url == "postgresql://localhost/rates"


def test_with_overrides_ignores_none() -> None:
    settings = settings_from_mapping(
        {
            "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
            "currencies": {"required": "USD", "rate_threshold": 5},
        }
    )

    updated = settings.with_overrides(db_url="sqlite:///x.db", log_level=None)

    assert updated.db_url == "sqlite:///x.db"
    assert updated.log_level == "INFO"
    assert settings.with_overrides(db_url=None) is settings


@pytest.mark.parametrize(
    "data",
    [
        {"links": {"bank_of_cyprus": "b"}, "currencies": {"required": "USD", "rate_threshold": 5}},
        {"links": {"hellenic_bank": "a"}, "currencies": {"required": "USD", "rate_threshold": 5}},
        {"links": {"hellenic_bank": "a", "bank_of_cyprus": "b"}, "currencies": {"rate_threshold": 5}},
        {"links": {"hellenic_bank": "a", "bank_of_cyprus": "b"}, "currencies": {"required": "USD"}},
        {
            "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
            "currencies": {"required": "USD,EURO", "rate_threshold": 5},
        },
        {
            "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
            "currencies": {"required": " , ", "rate_threshold": 5},
        },
        {
            "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
            "currencies": {"required": "USD", "rate_threshold": 5},
            "layouts": {"primary": {"depth": "x"}},
        },
    ],
)
def test_settings_from_mapping_rejects_invalid_configuration(data) -> None:
    with pytest.raises(ConfigurationError):
        settings_from_mapping(data)


def test_parse_threshold_rejects_non_numbers() -> None:
    with pytest.raises(ConfigurationError):
        parse_threshold("five")
    with pytest.raises(ConfigurationError):
        parse_threshold("-1")


def test_load_settings_reports_unreadable_or_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "missing.toml")
    broken = tmp_path / "broken.toml"
    broken.write_text("[links\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(broken)


def _minimal(**sections) -> dict:
    data = {
        "links": {"hellenic_bank": "a", "bank_of_cyprus": "b"},
        "currencies": {"required": "USD", "rate_threshold": 5},
    }
    for name, values in sections.items():
        data.setdefault(name, {}).update(values)
    return data


@pytest.mark.parametrize(
    "sections",
    [
        {"logging": {"level": "verbose"}},
        {"network": {"timeout": "soon"}},
        {"network": {"timeout": 0}},
        {"currencies": {"base": "EURO"}},
        {"currencies": {"base": "12"}},
    ],
)
def test_settings_from_mapping_rejects_invalid_optional_values(sections) -> None:
    with pytest.raises(ConfigurationError):
        settings_from_mapping(_minimal(**sections))


def test_settings_from_mapping_normalises_optional_values() -> None:
    settings = settings_from_mapping(
        _minimal(
            logging={"level": " warning "},
            network={"timeout": "12.5"},
            currencies={"base": "usd"},
        )
    )

    assert settings.log_level == "WARNING"
    assert settings.request_timeout == 12.5
    assert settings.base_currency == "USD"


def test_parse_threshold_accepts_zero() -> None:
    assert parse_threshold(0) == Decimal("0")
