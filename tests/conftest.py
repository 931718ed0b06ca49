"""Pytest configuration and fixtures."""

import pandas as pd
import pytest

from stock_opinion.data.cache import ResponseCache


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def response_cache(tmp_path, clock):
    """Isolated on-disk response cache with a controllable clock."""
    cache = ResponseCache(cache_dir=str(tmp_path / "responses"), ttl=300, clock=clock)
    yield cache
    cache.close()


@pytest.fixture
def sample_info() -> dict:
    """Ticker.info payload shaped like a large-cap yfinance response."""
    return {
        "symbol": "AAPL",
        "currentPrice": 190.0,
        "regularMarketPrice": 190.0,
        "regularMarketOpen": 188.5,
        "regularMarketDayHigh": 191.2,
        "regularMarketDayLow": 187.9,
        "regularMarketVolume": 52_000_000,
        "regularMarketPreviousClose": 188.0,
        "regularMarketChange": 2.0,
        "regularMarketChangePercent": 1.0638,
        "marketCap": 2_950_000_000_000,
        "trailingPE": 29.5,
        "forwardPE": 27.1,
        "priceToBook": 45.2,
        "priceToSalesTrailing12Months": 7.6,
        "trailingEps": 6.44,
        "forwardEps": 7.01,
        "revenuePerShare": 24.9,
        "totalCashPerShare": 4.3,
        "dividendRate": 0.96,
        "dividendYield": 0.51,
        "payoutRatio": 0.15,
        "fiftyTwoWeekHigh": 199.6,
        "fiftyTwoWeekLow": 164.1,
        "beta": 1.29,
        "debtToEquity": 145.0,
        "currentRatio": 0.99,
        "quickRatio": 0.84,
        "totalCash": 67_000_000_000,
        "totalDebt": 108_000_000_000,
        "returnOnEquity": 1.47,
        "returnOnAssets": 0.22,
        "operatingMargins": 0.30,
        "profitMargins": 0.25,
        "grossMargins": 0.45,
        "ebitdaMargins": 0.33,
        "revenueGrowth": 0.02,
        "earningsGrowth": 0.11,
        "freeCashflow": 84_000_000_000,
        "operatingCashflow": 110_000_000_000,
        "totalRevenue": 385_000_000_000,
        "ebitda": 126_000_000_000,
        "grossProfits": 170_000_000_000,
        "targetMeanPrice": 210.0,
        "targetHighPrice": 250.0,
        "targetLowPrice": 160.0,
        "targetMedianPrice": 212.0,
        "recommendationMean": 2.0,
        "recommendationKey": "buy",
        "numberOfAnalystOpinions": 38,
        "financialCurrency": "USD",
    }


@pytest.fixture
def sample_download_df() -> pd.DataFrame:
    """yf.download-shaped frame: (field, ticker) MultiIndex columns, unsorted dates."""
    dates = pd.to_datetime(["2024-01-03", "2024-01-02", "2024-01-04"])
    columns = pd.MultiIndex.from_tuples(
        [("Close", "AAPL"), ("High", "AAPL"), ("Volume", "AAPL")],
        names=["Price", "Ticker"],
    )
    df = pd.DataFrame(
        [
            [101.0, 102.0, 1_100_000],
            [100.0, 101.0, 1_000_000],
            [102.5, 103.0, 1_200_000],
        ],
        index=pd.DatetimeIndex(dates, name="Date"),
        columns=columns,
    )
    return df
