"""Validation utilities and parameter classes."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from stock_opinion.utils.sanitize import normalize_symbol

VALID_INTERVALS = {
    "1m",
    "2m",
    "5m",
    "15m",
    "30m",
    "60m",
    "90m",
    "1h",
    "1d",
    "5d",
    "1wk",
    "1mo",
    "3mo",
}
INTRADAY_INTERVALS = {"1m", "2m", "5m", "15m", "30m", "60m", "90m", "1h"}


@dataclass(frozen=True)
class BarParams:
    """Immutable historical-bar request. Used for fetch + provenance."""

    symbol: str
    start: datetime
    end: datetime
    interval: str = "1d"

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", normalize_symbol(self.symbol))

        interval = self.interval.lower().strip()
        if interval not in VALID_INTERVALS:
            raise ValueError(
                f"Invalid interval '{self.interval}'. Must be one of: {VALID_INTERVALS}"
            )
        if self.start >= self.end:
            raise ValueError(f"start ({self.start}) must be before end ({self.end})")

        object.__setattr__(self, "interval", interval)

    @classmethod
    def lookback(
        cls,
        symbol: str,
        days: int,
        interval: str = "1d",
        now: datetime | None = None,
    ) -> "BarParams":
        """
        Build params covering the last ``days`` days up to ``now``.

        Daily windows are widened to whole dates (yfinance treats ``end`` as
        exclusive, so today's bar needs end=tomorrow). Intraday windows keep
        exact timestamps.
        """
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=days)
        if interval.lower().strip() in INTRADAY_INTERVALS:
            return cls(symbol=symbol, start=start, end=now, interval=interval)

        start_day = datetime(start.year, start.month, start.day, tzinfo=start.tzinfo)
        end_day = datetime(now.year, now.month, now.day, tzinfo=now.tzinfo) + timedelta(days=1)
        return cls(symbol=symbol, start=start_day, end=end_day, interval=interval)

    @property
    def is_intraday(self) -> bool:
        return self.interval in INTRADAY_INTERVALS

    def to_yf_kwargs(self) -> dict[str, Any]:
        """Kwargs for yf.download()."""
        if self.is_intraday:
            start: Any = self.start
            end: Any = self.end
        else:
            start = self.start.strftime("%Y-%m-%d")
            end = self.end.strftime("%Y-%m-%d")
        return {
            "tickers": self.symbol,
            "start": start,
            "end": end,
            "interval": self.interval,
            "auto_adjust": True,
            "progress": False,
        }
