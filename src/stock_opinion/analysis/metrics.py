"""Normalized quote and fundamentals records.

Built once from the raw yfinance ``Ticker.info`` payload. Every numeric field
is ``float | None`` (None = unavailable) and every ratio is a raw fraction:
0.1834 means 18.34%. Percent scaling happens only in utils.formatting.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any

from stock_opinion.utils.normalize import parse_number
from stock_opinion.utils.sanitize import sanitize_text


def _positive(value: float | None) -> bool:
    return value is not None and value > 0


@dataclass(frozen=True)
class Quote:
    """Latest market quote for a symbol."""

    symbol: str
    price: float | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: float | None = None
    previous_close: float | None = None
    change: float | None = None
    change_percent: float | None = None

    @classmethod
    def from_info(cls, symbol: str, info: dict[str, Any]) -> "Quote":
        price = parse_number(info.get("regularMarketPrice")) or parse_number(
            info.get("currentPrice")
        )
        previous_close = parse_number(info.get("regularMarketPreviousClose")) or parse_number(
            info.get("previousClose")
        )

        change = parse_number(info.get("regularMarketChange"))
        if change is None and price is not None and previous_close is not None:
            change = price - previous_close

        # yfinance reports regularMarketChangePercent already scaled (1.25 = 1.25%)
        change_pct_raw = parse_number(info.get("regularMarketChangePercent"))
        change_percent = change_pct_raw / 100 if change_pct_raw is not None else None
        if change_percent is None and change is not None and _positive(previous_close):
            change_percent = change / previous_close

        return cls(
            symbol=str(info.get("symbol") or symbol).upper(),
            price=price,
            open=parse_number(info.get("regularMarketOpen")) or parse_number(info.get("open")),
            high=parse_number(info.get("regularMarketDayHigh")) or parse_number(info.get("dayHigh")),
            low=parse_number(info.get("regularMarketDayLow")) or parse_number(info.get("dayLow")),
            volume=parse_number(info.get("regularMarketVolume")) or parse_number(info.get("volume")),
            previous_close=previous_close,
            change=change,
            change_percent=change_percent,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FinancialMetrics:
    """Fundamental metrics for one symbol. All fields independently optional."""

    current_price: float | None = None
    market_cap: float | None = None
    # Valuation
    trailing_pe: float | None = None
    forward_pe: float | None = None
    peg_ratio: float | None = None
    price_to_book: float | None = None
    price_to_sales: float | None = None
    price_to_cash_flow: float | None = None
    # Per share
    eps: float | None = None
    forward_eps: float | None = None
    revenue_per_share: float | None = None
    total_cash_per_share: float | None = None
    # Dividend
    dividend_yield: float | None = None
    dividend_rate: float | None = None
    payout_ratio: float | None = None
    # Range / risk
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None
    beta: float | None = None
    # Leverage / liquidity
    debt_to_equity: float | None = None
    current_ratio: float | None = None
    quick_ratio: float | None = None
    total_cash: float | None = None
    total_debt: float | None = None
    # Profitability
    return_on_equity: float | None = None
    return_on_assets: float | None = None
    operating_margin: float | None = None
    profit_margin: float | None = None
    gross_margin: float | None = None
    ebitda_margin: float | None = None
    # Growth
    revenue_growth: float | None = None
    earnings_growth: float | None = None
    # Cash flow / income
    free_cash_flow: float | None = None
    operating_cash_flow: float | None = None
    total_revenue: float | None = None
    ebitda: float | None = None
    gross_profits: float | None = None
    # Analyst consensus
    target_mean_price: float | None = None
    target_high_price: float | None = None
    target_low_price: float | None = None
    target_median_price: float | None = None
    recommendation_mean: float | None = None
    number_of_analyst_opinions: float | None = None
    recommendation_key: str | None = None
    financial_currency: str | None = None

    @classmethod
    def empty(cls) -> "FinancialMetrics":
        return cls()

    @classmethod
    def from_info(cls, info: dict[str, Any] | None) -> "FinancialMetrics":
        """Normalize a yfinance ``Ticker.info`` payload."""
        if not info:
            return cls()

        def num(key: str) -> float | None:
            return parse_number(info.get(key))

        price = num("currentPrice") or num("regularMarketPrice")

        trailing_pe = num("trailingPE")
        forward_pe = num("forwardPE")
        earnings_growth = num("earningsGrowth")

        # PEG: provider field first, then compute from P/E and growth (in percent points)
        peg_ratio = num("pegRatio") or num("trailingPegRatio")
        if peg_ratio is None:
            pe = forward_pe if _positive(forward_pe) else trailing_pe
            if _positive(pe) and _positive(earnings_growth):
                peg_ratio = pe / (earnings_growth * 100)

        # yfinance reports debtToEquity as a percentage (150.0 = 1.5x)
        debt_to_equity = num("debtToEquity")
        if debt_to_equity is not None:
            debt_to_equity = debt_to_equity / 100

        # Dividend yield: rate / price, then trailingAnnualDividendYield (a
        # fraction), then dividendYield, which Yahoo reports in percent
        # (0.44 = 0.44%)
        dividend_rate = num("dividendRate")
        trailing_yield = num("trailingAnnualDividendYield")
        percent_yield = num("dividendYield")
        dividend_yield: float | None = None
        if _positive(dividend_rate) and _positive(price):
            dividend_yield = dividend_rate / price
        elif trailing_yield is not None:
            dividend_yield = trailing_yield
        elif percent_yield is not None:
            dividend_yield = percent_yield / 100

        market_cap = num("marketCap")
        operating_cash_flow = num("operatingCashflow")
        price_to_cash_flow = (
            market_cap / operating_cash_flow
            if _positive(market_cap) and _positive(operating_cash_flow)
            else None
        )

        recommendation_key = info.get("recommendationKey")
        if recommendation_key in (None, "", "none"):
            recommendation_key = None

        return cls(
            current_price=price,
            market_cap=market_cap,
            trailing_pe=trailing_pe,
            forward_pe=forward_pe,
            peg_ratio=peg_ratio,
            price_to_book=num("priceToBook"),
            price_to_sales=num("priceToSalesTrailing12Months"),
            price_to_cash_flow=price_to_cash_flow,
            eps=num("trailingEps"),
            forward_eps=num("forwardEps"),
            revenue_per_share=num("revenuePerShare"),
            total_cash_per_share=num("totalCashPerShare"),
            dividend_yield=dividend_yield,
            dividend_rate=dividend_rate,
            payout_ratio=num("payoutRatio"),
            fifty_two_week_high=num("fiftyTwoWeekHigh"),
            fifty_two_week_low=num("fiftyTwoWeekLow"),
            beta=num("beta"),
            debt_to_equity=debt_to_equity,
            current_ratio=num("currentRatio"),
            quick_ratio=num("quickRatio"),
            total_cash=num("totalCash"),
            total_debt=num("totalDebt"),
            return_on_equity=num("returnOnEquity"),
            return_on_assets=num("returnOnAssets"),
            operating_margin=num("operatingMargins"),
            profit_margin=num("profitMargins"),
            gross_margin=num("grossMargins"),
            ebitda_margin=num("ebitdaMargins"),
            revenue_growth=num("revenueGrowth"),
            earnings_growth=earnings_growth,
            free_cash_flow=num("freeCashflow"),
            operating_cash_flow=operating_cash_flow,
            total_revenue=num("totalRevenue"),
            ebitda=num("ebitda"),
            gross_profits=num("grossProfits"),
            target_mean_price=num("targetMeanPrice"),
            target_high_price=num("targetHighPrice"),
            target_low_price=num("targetLowPrice"),
            target_median_price=num("targetMedianPrice"),
            recommendation_mean=num("recommendationMean"),
            number_of_analyst_opinions=num("numberOfAnalystOpinions"),
            recommendation_key=sanitize_text(recommendation_key, max_length=30),
            financial_currency=sanitize_text(info.get("financialCurrency"), max_length=10),
        )

    @property
    def pe_ratio(self) -> float | None:
        """P/E used for valuation: forward if positive, else trailing."""
        if _positive(self.forward_pe):
            return self.forward_pe
        return self.trailing_pe

    def available_fields(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
