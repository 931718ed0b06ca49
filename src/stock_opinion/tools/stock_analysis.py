"""Full stock analysis aggregator tool."""

import asyncio
import logging
import os
from time import perf_counter
from typing import Any

from stock_opinion.analysis.engine import analyze
from stock_opinion.analysis.metrics import FinancialMetrics
from stock_opinion.data.cache import ResponseCache, cache_key, response_cache
from stock_opinion.data.singleflight import SingleFlight
from stock_opinion.data.sources import (
    STATUS_OK,
    SourceResult,
    TickerNotFoundError,
    get_fundamentals,
    get_lookback_bars,
    get_quote,
    search_news,
)
from stock_opinion.utils.formatting import format_metrics_for_display
from stock_opinion.utils.normalize import sanitize_nan_inf
from stock_opinion.utils.provenance import (
    ERROR_DATA_UNAVAILABLE,
    ERROR_INVALID_PARAMETERS,
    ERROR_INVALID_SYMBOL,
    build_error_response,
    build_meta,
    build_provenance,
    utc_timestamp,
)
from stock_opinion.utils.sanitize import normalize_symbol

logger = logging.getLogger(__name__)

DATASET = "stock_data"
FETCH_TIMEOUT_SECONDS = float(os.environ.get("FETCH_TIMEOUT", "10"))
HISTORY_DAYS = int(os.environ.get("HISTORY_DAYS", "180"))

# Concurrent requests for the same uncached ticker share one pipeline run
_analysis_singleflight: SingleFlight[dict[str, Any]] = SingleFlight("stock_analysis")


async def _run_source(name: str, coro: Any) -> tuple[str, Any, float]:
    """Await one upstream fetch with a timeout; exceptions are returned, not raised."""
    source_start = perf_counter()
    try:
        result = await asyncio.wait_for(coro, timeout=FETCH_TIMEOUT_SECONDS)
    except TimeoutError:
        result = TimeoutError(f"{name} exceeded {FETCH_TIMEOUT_SECONDS}s")
    except Exception as e:
        result = e
    return (name, result, (perf_counter() - source_start) * 1000)


def _as_source_result(name: str, result: Any, empty: Any) -> SourceResult:
    if isinstance(result, Exception):
        logger.warning(f"{name} unavailable: {result}")
        return SourceResult.unavailable(empty, result)
    return result


async def assemble_analysis(symbol: str) -> dict[str, Any]:
    """
    Fetch quote, fundamentals, news and history concurrently and score them.

    Args:
        symbol: Normalized ticker symbol

    Returns:
        Snapshot dict (everything but ``meta``)

    Raises:
        TickerNotFoundError: If there is no quote for the symbol
        Exception: Any other quote failure (timeout, retries exhausted)
    """
    results = await asyncio.gather(
        _run_source("quote", get_quote(symbol)),
        _run_source("fundamentals", get_fundamentals(symbol)),
        _run_source("news", search_news(symbol)),
        _run_source("historical_bars", get_lookback_bars(symbol, days=HISTORY_DAYS)),
    )
    by_name = {name: (result, duration_ms) for name, result, duration_ms in results}

    quote, quote_ms = by_name["quote"]
    if isinstance(quote, Exception):
        raise quote

    fundamentals = _as_source_result("fundamentals", by_name["fundamentals"][0], FinancialMetrics.empty())
    news = _as_source_result("news", by_name["news"][0], [])
    bars = _as_source_result("historical_bars", by_name["historical_bars"][0], [])

    analysis = analyze(fundamentals.value, quote)

    as_of = utc_timestamp()
    data_provenance: dict[str, Any] = {
        "quote": build_provenance(STATUS_OK, as_of=as_of, duration_ms=round(quote_ms, 1)),
    }
    for name, source in (("fundamentals", fundamentals), ("news", news), ("historical_bars", bars)):
        data_provenance[name] = build_provenance(
            source.status,
            as_of=as_of,
            error=source.error,
            duration_ms=round(by_name[name][1], 1),
        )
    data_provenance["historical_bars"]["lookback_days"] = HISTORY_DAYS

    metrics = fundamentals.value.to_dict()
    return sanitize_nan_inf(
        {
            "data_provenance": data_provenance,
            "symbol": quote.symbol,
            "quote": quote.to_dict(),
            "fundamentals": metrics,
            "fundamentals_display": format_metrics_for_display(metrics),
            "news": news.value,
            "analysis": analysis.to_dict(),
            "historical_bars": bars.value,
        }
    )


async def _assemble_and_cache(symbol: str, cache: ResponseCache) -> dict[str, Any]:
    snapshot = await assemble_analysis(symbol)
    cache.set(DATASET, symbol, snapshot)
    return snapshot


async def stock_analysis(symbol: str, cache: ResponseCache | None = None) -> dict[str, Any]:
    """
    Get the full analysis for a ticker: quote, fundamentals, news, opinion, history.

    Args:
        symbol: Stock ticker symbol
        cache: Response cache (default: the process-wide cache)

    Returns:
        Dict with quote, fundamentals, news, analysis and historical_bars,
        or an error response if the ticker has no quote
    """
    start_time = perf_counter()
    cache = cache if cache is not None else response_cache

    try:
        normalized_symbol = normalize_symbol(symbol)
    except ValueError as e:
        return build_error_response(
            error_type=ERROR_INVALID_PARAMETERS,
            message=str(e),
            symbol=symbol,
        )

    cached = cache.get(DATASET, normalized_symbol)
    if cached is not None:
        duration_ms = (perf_counter() - start_time) * 1000
        return {"meta": build_meta("stock_analysis", duration_ms, cache_hit=True), **cached}

    try:
        snapshot, joined = await _analysis_singleflight.do(
            cache_key(DATASET, normalized_symbol),
            lambda: _assemble_and_cache(normalized_symbol, cache),
        )
    except TickerNotFoundError as e:
        return build_error_response(
            error_type=ERROR_INVALID_SYMBOL,
            message=str(e),
            symbol=normalized_symbol,
        )
    except Exception as e:
        logger.warning(f"stock_analysis({normalized_symbol}) failed: {e}")
        return build_error_response(
            error_type=ERROR_DATA_UNAVAILABLE,
            message=f"Failed to fetch data for {normalized_symbol}: {e}",
            symbol=normalized_symbol,
        )

    duration_ms = (perf_counter() - start_time) * 1000
    meta = build_meta("stock_analysis", duration_ms, cache_hit=False)
    meta["singleflight_joined"] = joined
    return {"meta": meta, **snapshot}
