"""Intraday bars tool."""

import asyncio
import os
from time import perf_counter
from typing import Any

from stock_opinion.data.cache import ResponseCache, response_cache
from stock_opinion.data.sources import SourceResult, get_lookback_bars
from stock_opinion.utils.provenance import (
    ERROR_DATA_UNAVAILABLE,
    ERROR_INVALID_PARAMETERS,
    build_error_response,
    build_meta,
    build_provenance,
)
from stock_opinion.utils.sanitize import normalize_symbol

DATASET = "intraday_data"
INTRADAY_INTERVAL = "5m"
INTRADAY_LOOKBACK_DAYS = 1
FETCH_TIMEOUT_SECONDS = float(os.environ.get("FETCH_TIMEOUT", "10"))


async def intraday_bars(symbol: str, cache: ResponseCache | None = None) -> dict[str, Any]:
    """
    Get the last day of 5-minute bars for a ticker.

    Args:
        symbol: Stock ticker symbol
        cache: Response cache (default: the process-wide cache)

    Returns:
        Dict with chronological {date, close, volume} bars
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
        return {"meta": build_meta("intraday_bars", duration_ms, cache_hit=True), **cached}

    try:
        result: SourceResult = await asyncio.wait_for(
            get_lookback_bars(
                normalized_symbol,
                days=INTRADAY_LOOKBACK_DAYS,
                interval=INTRADAY_INTERVAL,
            ),
            timeout=FETCH_TIMEOUT_SECONDS,
        )
    except TimeoutError:
        return build_error_response(
            error_type=ERROR_DATA_UNAVAILABLE,
            message=f"Failed to fetch intraday data for {normalized_symbol}: timed out",
            symbol=normalized_symbol,
        )

    if not result.ok:
        return build_error_response(
            error_type=ERROR_DATA_UNAVAILABLE,
            message=f"Failed to fetch intraday data for {normalized_symbol}: {result.error}",
            symbol=normalized_symbol,
        )

    snapshot = {
        "data_provenance": {
            "price": build_provenance(
                result.status,
                interval=INTRADAY_INTERVAL,
                lookback_days=INTRADAY_LOOKBACK_DAYS,
            ),
        },
        "symbol": normalized_symbol,
        "interval": INTRADAY_INTERVAL,
        "bars": result.value,
    }
    cache.set(DATASET, normalized_symbol, snapshot)

    duration_ms = (perf_counter() - start_time) * 1000
    return {"meta": build_meta("intraday_bars", duration_ms, cache_hit=False), **snapshot}
