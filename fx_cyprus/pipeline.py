"""End-to-end rate update: fetch, validate, derive, persist and report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from fx_cyprus.config import SourceConfig
from fx_cyprus.context import RunContext
from fx_cyprus.db.base_backend import BackendStrategy
from fx_cyprus.db.sqlite_manager import PersistenceResult
from fx_cyprus.engine.gap_filler import fill_missing_rates
from fx_cyprus.engine.mid_rate import compute_direct_rates
from fx_cyprus.engine.rotator import rotate_rates
from fx_cyprus.engine.validator import QuoteComparison, validate_quotes
from fx_cyprus.exceptions import EmptySourceError
from fx_cyprus.ingestion.models import Quote, Rate, RateRecord
from fx_cyprus.ingestion.parser import QuoteParser
from fx_cyprus.ingestion.strategy import SourceFetcher
from fx_cyprus.reporting.builder import build_records
from fx_cyprus.reporting.reporters import Reporter


@dataclass(slots=True)
class RateTable:
    """Every intermediate product of the derivation stages."""

    primary_quotes: list[Quote]
    secondary_quotes: list[Quote]
    comparisons: list[QuoteComparison]
    direct_rates: list[Rate]
    filled_rates: list[Rate]
    rates: list[Rate]

    @property
    def records(self) -> list[RateRecord]:
        return build_records(self.rates)


@dataclass(slots=True)
class UpdateResult:
    table: RateTable
    records: list[RateRecord]
    persistence: PersistenceResult = field(default_factory=PersistenceResult)


def load_quotes(fetcher: SourceFetcher, source: SourceConfig, context: RunContext) -> list[Quote]:
    """Fetch and parse one source; a result without a single priced row aborts the run."""

    context.logger.info("Getting currency rates from %s web site ...", source.name)
    rows = fetcher.fetch(source)
    parser = QuoteParser(source.layout, context.required_currencies, source=source.name)
    quotes = parser.parse(rows)
    context.logger.debug("Rates from %s: %s", source.name, quotes)
    if not any(quote.sell is not None and quote.buy is not None for quote in quotes):
        raise EmptySourceError(source.name)
    return quotes


def derive_rates(
    primary: Sequence[Quote],
    secondary: Sequence[Quote],
    context: RunContext,
) -> RateTable:
    """Cross-validate the two quote sets and build the complete rate table."""

    log = context.logger
    log.info("Verify rates ...")
    comparisons = validate_quotes(primary, secondary, context.settings.rate_threshold, context)

    direct = compute_direct_rates(primary, context)
    if not direct:
        raise EmptySourceError(context.settings.primary.name)
    log.info("Calculating missing rates ...")
    filled = fill_missing_rates(direct, context.required_currencies, context)
    log.debug("Direct + missing rates: %s", filled)

    log.info("Rotating rates ...")
    rotated = rotate_rates(filled, context)
    log.debug("All (rotated) rates: %s", rotated)
    return RateTable(
        primary_quotes=list(primary),
        secondary_quotes=list(secondary),
        comparisons=comparisons,
        direct_rates=direct,
        filled_rates=filled,
        rates=rotated,
    )


def build_rate_table(context: RunContext, fetcher: SourceFetcher) -> RateTable:
    """Fetch both sources and derive the complete rate table.

    Raises a :class:`~fx_cyprus.exceptions.FatalRunError` on any fetch, parse or
    cross-validation failure.
    """

    settings = context.settings
    log = context.logger
    log.info("Updating currencies")
    primary = load_quotes(fetcher, settings.primary, context)
    log.info("Getting currency rates from %s for cross-checking ...", settings.secondary.name)
    secondary = load_quotes(fetcher, settings.secondary, context)
    return derive_rates(primary, secondary, context)


def publish_rates(
    table: RateTable,
    context: RunContext,
    *,
    sink: BackendStrategy,
    reporter: Reporter,
) -> UpdateResult:
    """Hand the finished records to the sink, then to the reporter."""

    log = context.logger
    records = table.records
    log.info("Saving rates in DB ...")
    sink.ensure_schema()
    persistence = sink.insert_rates(records)
    if persistence.failed:
        log.warning("%s of %s rates could not be saved", persistence.failed, len(records))

    reporter.report(records)
    log.info("Finishing!")
    return UpdateResult(table=table, records=records, persistence=persistence)


def run_update(
    context: RunContext,
    *,
    fetcher: SourceFetcher,
    sink: BackendStrategy,
    reporter: Reporter,
) -> UpdateResult:
    """Run every stage in order.

    Fatal conditions raise before the sink or reporter sees anything.
    """

    table = build_rate_table(context, fetcher)
    return publish_rates(table, context, sink=sink, reporter=reporter)


__all__ = [
    "RateTable",
    "UpdateResult",
    "build_rate_table",
    "derive_rates",
    "load_quotes",
    "publish_rates",
    "run_update",
]
