"""Data layer for fetching and caching stock data."""

from stock_opinion.data.cache import ResponseCache, cache_key, response_cache
from stock_opinion.data.singleflight import SingleFlight
from stock_opinion.data.sources import (
    SourceResult,
    TickerNotFoundError,
    get_fundamentals,
    get_historical_bars,
    get_lookback_bars,
    get_quote,
    search_news,
    search_symbol,
)
from stock_opinion.data.yfinance_client import (
    ServerShuttingDownError,
    YFinanceRetryError,
    fetch_history,
    fetch_info,
    fetch_search,
    shutdown_executor,
)

__all__ = [
    # Cache
    "ResponseCache",
    "cache_key",
    "response_cache",
    "SingleFlight",
    # Sources
    "SourceResult",
    "TickerNotFoundError",
    "get_fundamentals",
    "get_historical_bars",
    "get_lookback_bars",
    "get_quote",
    "search_news",
    "search_symbol",
    # yfinance
    "ServerShuttingDownError",
    "YFinanceRetryError",
    "fetch_history",
    "fetch_info",
    "fetch_search",
    "shutdown_executor",
]
