"""Static run configuration loaded from a TOML file."""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Final, Mapping

from fx_cyprus.db import DEFAULT_SQLITE_DB_PATH
from fx_cyprus.exceptions import ConfigurationError

BASE_CURRENCY: Final[str] = "EUR"
DEFAULT_LOCK_PATH: Final[Path] = Path("/tmp/fx_cyprus_update.lock")
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

HELLENIC_BANK: Final[str] = "Hellenic Bank"
BANK_OF_CYPRUS: Final[str] = "Bank of Cyprus"


@dataclass(frozen=True, slots=True)
class TableLayout:
    """Where a source keeps its quote table and which columns hold what.

    ``depth`` follows the ``(depth, count)`` convention: the ``count``-th table
    among those nested inside exactly ``depth`` other tables.
    """

    depth: tuple[int, int] = (0, 3)
    selling_index: int = 3
    code_index: int = 2
    buying_index: int = 4


HELLENIC_BANK_LAYOUT: Final[TableLayout] = TableLayout(depth=(0, 3), selling_index=3, code_index=2)
BANK_OF_CYPRUS_LAYOUT: Final[TableLayout] = TableLayout(depth=(0, 0), selling_index=4, code_index=1)


@dataclass(frozen=True, slots=True)
class SourceConfig:
    name: str
    url: str
    layout: TableLayout = field(default_factory=TableLayout)


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything a single rate update needs to know up front."""

    primary: SourceConfig
    secondary: SourceConfig
    required_currencies: tuple[str, ...]
    rate_threshold: Decimal
    base_currency: str = BASE_CURRENCY
    db_url: str | None = None
    csv_report_path: Path | None = None
    html_report_path: Path | None = None
    lock_path: Path = DEFAULT_LOCK_PATH
    log_level: str = "INFO"
    request_timeout: float = 30.0

    @property
    def sink_url(self) -> str:
        """Database URL for the sink, defaulting to the bundled SQLite file."""

        return self.db_url or f"sqlite:///{DEFAULT_SQLITE_DB_PATH.as_posix()}"

    def with_overrides(self, **changes: Any) -> "Settings":
        """Return a copy with every non-``None`` keyword applied."""

        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied) if applied else self


def _parse_required(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ConfigurationError("currencies.required must be a list or a comma separated string")
    codes: list[str] = []
    for item in items:
        code = item.strip().upper()
        if not code:
            continue
        if len(code) != 3:
            raise ConfigurationError(f"Invalid currency code in currencies.required: {item!r}")
        if code not in codes:
            codes.append(code)
    if not codes:
        raise ConfigurationError("currencies.required must list at least one currency")
    return tuple(codes)


def parse_threshold(value: object) -> Decimal:
    try:
        threshold = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigurationError(f"currencies.rate_threshold is not a number: {value!r}") from exc
    if not threshold.is_finite() or threshold < 0:
        raise ConfigurationError(
            f"currencies.rate_threshold must be zero or a positive number: {value!r}"
        )
    return threshold


def _parse_base(value: object) -> str:
    base = str(value).strip().upper()
    if len(base) != 3 or not base.isalpha():
        raise ConfigurationError(f"currencies.base is not a currency code: {value!r}")
    return base


def _parse_log_level(value: object) -> str:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}: {value!r}"
        )
    return level


def _parse_timeout(value: object) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"network.timeout is not a number: {value!r}") from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(f"network.timeout must be a positive number: {value!r}")
    return timeout


def _parse_layout(raw: Mapping[str, Any] | None, default: TableLayout) -> TableLayout:
    if not raw:
        return default
    try:
        depth = raw.get("depth", default.depth)
        return TableLayout(
            depth=(int(depth[0]), int(depth[1])),
            selling_index=int(raw.get("selling_index", default.selling_index)),
            code_index=int(raw.get("code_index", default.code_index)),
            buying_index=int(raw.get("buying_index", default.buying_index)),
        )
    except (TypeError, ValueError, IndexError) as exc:
        raise ConfigurationError(f"Invalid table layout: {dict(raw)!r}") from exc


def _optional_path(value: object | None) -> Path | None:
    if value in (None, ""):
        return None
    return Path(str(value)).expanduser()


def settings_from_mapping(data: Mapping[str, Any]) -> Settings:
    """Build :class:`Settings` from an already parsed configuration mapping."""

    links = data.get("links", {})
    currencies = data.get("currencies", {})
    layouts = data.get("layouts", {})
    primary_url = links.get("hellenic_bank")
    secondary_url = links.get("bank_of_cyprus")
    if not primary_url:
        raise ConfigurationError("links.hellenic_bank is required")
    if not secondary_url:
        raise ConfigurationError("links.bank_of_cyprus is required")
    if "required" not in currencies:
        raise ConfigurationError("currencies.required is required")
    if "rate_threshold" not in currencies:
        raise ConfigurationError("currencies.rate_threshold is required")

    sink = data.get("sink", {})
    report = data.get("report", {})
    lock = data.get("lock", {})
    logging_section = data.get("logging", {})
    network = data.get("network", {})

    return Settings(
        primary=SourceConfig(
            name=HELLENIC_BANK,
            url=str(primary_url),
            layout=_parse_layout(layouts.get("primary"), HELLENIC_BANK_LAYOUT),
        ),
        secondary=SourceConfig(
            name=BANK_OF_CYPRUS,
            url=str(secondary_url),
            layout=_parse_layout(layouts.get("secondary"), BANK_OF_CYPRUS_LAYOUT),
        ),
        required_currencies=_parse_required(currencies["required"]),
        rate_threshold=parse_threshold(currencies["rate_threshold"]),
        base_currency=_parse_base(currencies.get("base", BASE_CURRENCY)),
        db_url=sink.get("url") or None,
        csv_report_path=_optional_path(report.get("csv_path")),
        html_report_path=_optional_path(report.get("html_path")),
        lock_path=_optional_path(lock.get("path")) or DEFAULT_LOCK_PATH,
        log_level=_parse_log_level(logging_section.get("level", "INFO")),
        request_timeout=_parse_timeout(network.get("timeout", 30.0)),
    )


def load_settings(path: str | Path) -> Settings:
    """Read and validate the TOML configuration at ``path``."""

    config_path = Path(path).expanduser()
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration {config_path}: {exc}") from exc
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Malformed configuration {config_path}: {exc}") from exc
    return settings_from_mapping(data)


__all__ = [
    "BASE_CURRENCY",
    "BANK_OF_CYPRUS",
    "BANK_OF_CYPRUS_LAYOUT",
    "HELLENIC_BANK",
    "HELLENIC_BANK_LAYOUT",
    "LOG_LEVELS",
    "Settings",
    "SourceConfig",
    "TableLayout",
    "load_settings",
    "parse_threshold",
    "settings_from_mapping",
]
