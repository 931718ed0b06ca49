"""Symbol search tool."""

from time import perf_counter
from typing import Any

from stock_opinion.data.sources import search_symbol
from stock_opinion.utils.provenance import ERROR_INVALID_PARAMETERS, build_error_response, build_meta


async def symbol_lookup(query: str) -> dict[str, Any]:
    """
    Resolve a company name or ticker to a ticker symbol.

    Args:
        query: Free-text search (e.g. "apple" or "AAPL")

    Returns:
        Dict with the query and the resolved symbol
    """
    start_time = perf_counter()

    if not query or not query.strip():
        return build_error_response(
            error_type=ERROR_INVALID_PARAMETERS,
            message="Query is required",
        )

    symbol = await search_symbol(query)

    duration_ms = (perf_counter() - start_time) * 1000
    return {
        "meta": build_meta("symbol_lookup", duration_ms),
        "query": query.strip(),
        "symbol": symbol,
        "exact_match": symbol == query.strip().upper(),
    }
