"""Tests for the yfinance client retry and deduplication logic."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from requests.exceptions import HTTPError

from stock_opinion.data import yfinance_client
from stock_opinion.data.yfinance_client import (
    MAX_RETRIES,
    YFinanceRetryError,
    _backoff_delay,
    _retry_budget,
    _run_with_retry,
    fetch_info,
)


def _http_error(status_code):
    response = MagicMock()
    response.status_code = status_code
    return HTTPError(f"{status_code} error", response=response)


class TestRetryBudget:
    """Tests for _retry_budget."""

    def test_http_statuses(self):
        assert _retry_budget(_http_error(401)) == 1
        assert _retry_budget(_http_error(404)) == 0
        assert _retry_budget(_http_error(429)) == MAX_RETRIES
        assert _retry_budget(_http_error(503)) == MAX_RETRIES

    def test_message_markers(self):
        assert _retry_budget(RuntimeError("Too Many Requests")) == MAX_RETRIES
        assert _retry_budget(RuntimeError("Connection reset by peer")) == MAX_RETRIES
        assert _retry_budget(RuntimeError("Invalid Crumb")) == 1

    def test_permanent(self):
        assert _retry_budget(ValueError("Invalid symbol: ZZZZ")) == 0


class TestBackoffDelay:
    def test_bounded(self):
        for attempt in range(10):
            delay = _backoff_delay(attempt)
            assert 0 < delay <= yfinance_client.MAX_DELAY


class TestRunWithRetry:
    """Tests for _run_with_retry."""

    def test_success_after_transient_failures(self):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise RuntimeError("rate limit")
            return "ok"

        with patch.object(yfinance_client, "_backoff_delay", return_value=0.0):
            result = asyncio.run(_run_with_retry("flaky", flaky, max_retries=3))

        assert result == "ok"
        assert len(attempts) == 3

    def test_exhausted(self):
        def always_down():
            raise RuntimeError("connection refused")

        with patch.object(yfinance_client, "_backoff_delay", return_value=0.0):
            with pytest.raises(YFinanceRetryError, match="Failed after 3 attempts"):
                asyncio.run(_run_with_retry("down", always_down, max_retries=2))

    def test_crumb_error_retried_once(self):
        attempts = []

        def stale_crumb():
            attempts.append(1)
            raise _http_error(401)

        with patch.object(yfinance_client, "_backoff_delay", return_value=0.0):
            with pytest.raises(YFinanceRetryError) as exc_info:
                asyncio.run(_run_with_retry("crumb", stale_crumb, max_retries=3))

        assert len(attempts) == 2
        assert isinstance(exc_info.value.last_error, HTTPError)

    def test_permanent_error_not_retried(self):
        attempts = []

        def bad_symbol():
            attempts.append(1)
            raise ValueError("Invalid symbol: ZZZZ")

        with pytest.raises(ValueError):
            asyncio.run(_run_with_retry("bad", bad_symbol, max_retries=3))
        assert len(attempts) == 1


class TestFetchInfo:
    """Tests for fetch_info."""

    def test_concurrent_calls_share_one_request(self):
        ticker = MagicMock()
        ticker.info = {"symbol": "AAPL", "currentPrice": 190.0}

        async def run():
            return await asyncio.gather(fetch_info("AAPL"), fetch_info("AAPL"))

        with patch.object(yfinance_client.yf, "Ticker", return_value=ticker) as mock_ticker:
            first, second = asyncio.run(run())

        assert mock_ticker.call_count == 1
        assert first == second == {"symbol": "AAPL", "currentPrice": 190.0}

    def test_empty_info_is_invalid_symbol(self):
        ticker = MagicMock()
        ticker.info = {}

        with patch.object(yfinance_client.yf, "Ticker", return_value=ticker):
            with pytest.raises(ValueError, match="Invalid symbol"):
                asyncio.run(fetch_info("ZZZZ"))
