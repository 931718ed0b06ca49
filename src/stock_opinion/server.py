"""Stock Opinion MCP Server using FastMCP."""

import json
import logging
import os

from fastmcp import FastMCP

from stock_opinion import SCHEMA_VERSION, SERVER_VERSION
from stock_opinion.data.yfinance_client import shutdown_executor
from stock_opinion.tools import intraday_bars, stock_analysis, symbol_lookup

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="stock-opinion",
)


@mcp.tool
async def search_symbol(query: str) -> str:
    """
    Resolve a company name or ticker to a ticker symbol.

    Args:
        query: Company name or ticker (e.g., "apple", "MSFT")

    Returns:
        JSON with the resolved symbol
    """
    result = await symbol_lookup(query=query)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_stock_analysis(ticker: str) -> str:
    """
    Get a fundamentals-driven investment opinion for a stock.

    Fetches the latest quote, fundamental metrics, recent headlines and six
    months of daily closes concurrently, then scores the fundamentals.

    Render in this order:
    1. Symbol, price and daily change (from quote)
    2. analysis.recommendation, analysis.price_target, analysis.upside and analysis.risk_level
    3. analysis.summary verbatim
    4. Key metrics from fundamentals_display
    5. Headlines from news
    If data_provenance.<source>.status is "unavailable", say that part is missing.

    Args:
        ticker: Stock ticker symbol (e.g., AAPL, GOOGL, MSFT)

    Returns:
        JSON with quote, fundamentals, news, analysis and historical bars
    """
    result = await stock_analysis(symbol=ticker)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
async def get_intraday_bars(ticker: str) -> str:
    """
    Get the last trading day of 5-minute bars for a stock.

    Args:
        ticker: Stock ticker symbol

    Returns:
        JSON with chronological {date, close, volume} bars
    """
    result = await intraday_bars(symbol=ticker)
    return json.dumps(result, indent=2, default=str)


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Stock Opinion MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    try:
        mcp.run()
    finally:
        shutdown_executor()


if __name__ == "__main__":
    main()
