"""Upstream data sources.

Every source except the quote degrades to an empty value instead of
raising: failures are logged and reported through ``SourceResult.status``
so callers always get a best-effort record. The quote is load-bearing for
every downstream calculation, so its failure propagates.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from stock_opinion.analysis.metrics import FinancialMetrics, Quote
from stock_opinion.data.yfinance_client import fetch_history, fetch_info, fetch_search
from stock_opinion.utils.ohlcv import bars_to_rows
from stock_opinion.utils.sanitize import normalize_symbol, sanitize_text
from stock_opinion.utils.validators import BarParams

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_UNAVAILABLE = "unavailable"

DEFAULT_NEWS_COUNT = 5


class TickerNotFoundError(ValueError):
    """Raised when no quote exists for a symbol."""

    def __init__(self, symbol: str, reason: str | None = None):
        message = f"Failed to fetch data for {symbol}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.symbol = symbol


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """A fetched value plus whether it is real, empty or a degraded stand-in."""

    value: T
    status: str = STATUS_OK
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != STATUS_UNAVAILABLE

    @classmethod
    def unavailable(cls, value: T, error: Exception | str) -> "SourceResult[T]":
        if isinstance(error, Exception):
            error = f"{type(error).__name__}: {error}"
        return cls(value=value, status=STATUS_UNAVAILABLE, error=error)


async def get_quote(symbol: str) -> Quote:
    """
    Fetch the latest quote.

    Raises:
        TickerNotFoundError: If the symbol is invalid or has no price
        YFinanceRetryError: If the provider keeps failing
    """
    normalized_symbol = normalize_symbol(symbol)
    try:
        info = await fetch_info(normalized_symbol)
    except ValueError as e:
        raise TickerNotFoundError(normalized_symbol, str(e)) from e

    quote = Quote.from_info(normalized_symbol, info)
    if quote.price is None:
        raise TickerNotFoundError(normalized_symbol, "no price in quote")
    return quote


async def get_fundamentals(symbol: str) -> SourceResult[FinancialMetrics]:
    """Fetch and normalize fundamentals; empty metrics on any failure."""
    normalized_symbol = normalize_symbol(symbol)
    try:
        info = await fetch_info(normalized_symbol)
    except Exception as e:
        logger.warning(f"get_fundamentals({normalized_symbol}) failed: {e}")
        return SourceResult.unavailable(FinancialMetrics.empty(), e)

    metrics = FinancialMetrics.from_info(info)
    status = STATUS_OK if metrics.available_fields() else STATUS_EMPTY
    return SourceResult(metrics, status)


async def get_historical_bars(
    symbol: str,
    start: datetime,
    end: datetime,
    interval: str = "1d",
) -> SourceResult[list[dict[str, Any]]]:
    """Fetch chronological {date, close, volume} bars; [] on no data or error."""
    try:
        params = BarParams(symbol=symbol, start=start, end=end, interval=interval)
    except ValueError as e:
        logger.warning(f"get_historical_bars({symbol}) invalid parameters: {e}")
        return SourceResult.unavailable([], e)
    return await _fetch_bars(params)


async def get_lookback_bars(
    symbol: str,
    days: int,
    interval: str = "1d",
) -> SourceResult[list[dict[str, Any]]]:
    """Fetch bars covering the last ``days`` days."""
    try:
        params = BarParams.lookback(symbol, days=days, interval=interval)
    except ValueError as e:
        logger.warning(f"get_lookback_bars({symbol}) invalid parameters: {e}")
        return SourceResult.unavailable([], e)
    return await _fetch_bars(params)


async def _fetch_bars(params: BarParams) -> SourceResult[list[dict[str, Any]]]:
    try:
        df = await fetch_history(params)
    except Exception as e:
        logger.warning(f"fetch bars({params.symbol}, {params.interval}) failed: {e}")
        return SourceResult.unavailable([], e)

    rows = bars_to_rows(df)
    if not rows:
        logger.info(f"No historical data found for {params.symbol} ({params.interval})")
        return SourceResult(rows, STATUS_EMPTY)
    return SourceResult(rows, STATUS_OK)


async def search_news(
    symbol: str,
    max_results: int = DEFAULT_NEWS_COUNT,
) -> SourceResult[list[dict[str, Any]]]:
    """Fetch recent headlines as {title, link}; [] on error. Provider order is kept."""
    normalized_symbol = normalize_symbol(symbol)
    try:
        found = await fetch_search(normalized_symbol, max_quotes=0, max_news=max_results)
    except Exception as e:
        logger.warning(f"search_news({normalized_symbol}) failed: {e}")
        return SourceResult.unavailable([], e)

    items: list[dict[str, Any]] = []
    for article in found.get("news", []):
        title = sanitize_text(article.get("title"), max_length=200)
        if not title:
            continue
        items.append({"title": title, "link": article.get("link")})
        if len(items) >= max_results:
            break

    return SourceResult(items, STATUS_OK if items else STATUS_EMPTY)


async def search_symbol(query: str) -> str:
    """
    Resolve free text (company name or ticker) to the best-matching ticker.

    An exact ticker match wins, then the provider's top result; with no
    match, or on error, the uppercased query is returned as-is.
    """
    cleaned = (query or "").strip()
    fallback = cleaned.upper()
    if not cleaned:
        return fallback

    try:
        found = await fetch_search(cleaned, max_quotes=5, max_news=0)
    except Exception as e:
        logger.warning(f"search_symbol({cleaned!r}) failed: {e}")
        return fallback

    symbols = [str(q["symbol"]).upper() for q in found.get("quotes", []) if q.get("symbol")]
    if not symbols:
        logger.info(f"No symbol match for {cleaned!r}, using input as ticker")
        return fallback
    if fallback in symbols:
        return fallback
    return symbols[0]
