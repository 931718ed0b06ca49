"""Async wrapper around yfinance: one thread pool, bounded fan-out, retried calls."""

import asyncio
import logging
import os
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

import pandas as pd
import yfinance as yf
from requests.exceptions import HTTPError

from stock_opinion.data.singleflight import SingleFlight
from stock_opinion.utils.ohlcv import standardize_bars
from stock_opinion.utils.validators import BarParams

logger = logging.getLogger(__name__)

WORKERS = int(os.environ.get("YF_MAX_WORKERS", "4"))
MAX_RETRIES = int(os.environ.get("YF_MAX_RETRIES", "3"))
BASE_DELAY = float(os.environ.get("YF_BASE_DELAY", "1.0"))
MAX_DELAY = float(os.environ.get("YF_MAX_DELAY", "30.0"))

# Stale crumb: one refresh usually fixes it
_CRUMB_RETRIES = 1

_TRANSIENT_MARKERS = (
    "rate limit",
    "too many requests",
    "connection",
    "timeout",
    "temporary",
)

_pool = ThreadPoolExecutor(max_workers=WORKERS, thread_name_prefix="yfinance")
_slots = asyncio.Semaphore(WORKERS)
_stopping = asyncio.Event()

# Quote and fundamentals both read Ticker.info
_info_flight: SingleFlight[dict[str, Any]] = SingleFlight("fetch_info")

T = TypeVar("T")


class ServerShuttingDownError(Exception):
    """Raised for calls made after shutdown_executor()."""


class YFinanceRetryError(Exception):
    """A transient upstream failure that outlasted its retry budget."""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error


def _retry_budget(error: Exception) -> int:
    """
    How many retries an upstream error deserves.

    Zero means the error is permanent (bad symbol, 404, programming errors)
    and is re-raised immediately.
    """
    response = getattr(error, "response", None)
    if isinstance(error, HTTPError) and response is not None:
        status = response.status_code
        if status == 401:
            return _CRUMB_RETRIES
        if status == 429 or 500 <= status < 600:
            return MAX_RETRIES
        if status == 404:
            return 0

    text = str(error).lower()
    if "401" in text or "invalid crumb" in text:
        return _CRUMB_RETRIES
    if any(marker in text for marker in _TRANSIENT_MARKERS):
        return MAX_RETRIES
    return 0


def _backoff_delay(attempt: int) -> float:
    """Exponential delay for the given zero-based attempt, +/-25% jitter, capped."""
    delay = BASE_DELAY * (2**attempt)
    delay *= 1 + 0.25 * (2 * random.random() - 1)
    return min(delay, MAX_DELAY)


def _ensure_running() -> None:
    if _stopping.is_set():
        raise ServerShuttingDownError("Server is shutting down")


async def _run_with_retry(
    label: str,
    func: Callable[[], T],
    max_retries: int = MAX_RETRIES,
) -> T:
    """
    Run a blocking yfinance call on the pool, retrying transient failures.

    Args:
        label: Call description for log lines, e.g. "fetch_info(AAPL)"
        func: Zero-argument blocking callable
        max_retries: Upper bound on retries; each error type may lower it

    Raises:
        YFinanceRetryError: Retries exhausted
        ServerShuttingDownError: Shutdown began between attempts
        Exception: Any permanent error from func, unchanged
    """
    loop = asyncio.get_running_loop()
    attempt = 0
    while True:
        _ensure_running()
        try:
            result = await loop.run_in_executor(_pool, func)
        except Exception as e:
            allowed = _retry_budget(e)
            if allowed == 0:
                raise
            budget = min(max_retries, allowed)
            if attempt >= budget:
                logger.warning(f"{label}: giving up after {attempt + 1} attempts: {e}")
                raise YFinanceRetryError(
                    f"Failed after {attempt + 1} attempts: {e}",
                    last_error=e,
                ) from e
            delay = _backoff_delay(attempt)
            logger.info(f"{label}: attempt {attempt + 1} failed ({e}), retrying in {delay:.1f}s")
            await asyncio.sleep(delay)
            attempt += 1
            continue

        if attempt:
            logger.info(f"{label}: succeeded on attempt {attempt + 1}")
        return result


async def _call(label: str, func: Callable[[], T]) -> T:
    """Take a concurrency slot, then run func with retries."""
    _ensure_running()
    async with _slots:
        return await _run_with_retry(label, func)


async def fetch_info(symbol: str) -> dict[str, Any]:
    """
    Ticker.info for a normalized symbol; concurrent callers share one request.

    Raises:
        ValueError: yfinance returned nothing for the symbol
        YFinanceRetryError: Retries exhausted
        ServerShuttingDownError: Called after shutdown
    """
    _ensure_running()

    def read_info() -> dict[str, Any]:
        info = yf.Ticker(symbol).info
        if not info:
            raise ValueError(f"Invalid symbol: {symbol}")
        return info

    info, _ = await _info_flight.do(symbol, lambda: _call(f"fetch_info({symbol})", read_info))
    return info


async def fetch_history(params: BarParams) -> pd.DataFrame:
    """Download bars and reduce them to a chronological (date, close, volume) frame."""

    def download() -> pd.DataFrame:
        return standardize_bars(yf.download(**params.to_yf_kwargs()))

    return await _call(f"fetch_history({params.symbol}, {params.interval})", download)


async def fetch_search(query: str, max_quotes: int = 8, max_news: int = 0) -> dict[str, list]:
    """Yahoo search; returns raw "quotes" and "news" lists."""

    def search() -> dict[str, list]:
        found = yf.Search(query, max_results=max_quotes, news_count=max_news)
        return {"quotes": list(found.quotes or []), "news": list(found.news or [])}

    return await _call(f"fetch_search({query!r})", search)


def shutdown_executor() -> None:
    """Refuse new calls and drop queued ones."""
    _stopping.set()
    _pool.shutdown(wait=False, cancel_futures=True)
