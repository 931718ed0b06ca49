"""Response metadata: version stamps, per-source provenance and error envelopes."""

from datetime import datetime
from typing import Any

from stock_opinion import SCHEMA_VERSION, SERVER_VERSION

PROVIDER = "yfinance"

ERROR_INVALID_SYMBOL = "invalid_symbol"
ERROR_INVALID_PARAMETERS = "invalid_parameters"
ERROR_DATA_UNAVAILABLE = "data_unavailable"


def utc_timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


def build_meta(
    tool: str,
    duration_ms: float | None = None,
    cache_hit: bool | None = None,
) -> dict[str, Any]:
    """Version stamp for every response, plus timing and cache outcome when known."""
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
    }
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    if cache_hit is not None:
        meta["cache_hit"] = cache_hit
    return meta


def build_provenance(
    status: str,
    as_of: str | None = None,
    error: str | None = None,
    source: str = PROVIDER,
    **extra: Any,
) -> dict[str, Any]:
    """
    Describe one section of a response: where it came from and whether it is real.

    Args:
        status: "ok", "empty" or "unavailable"
        as_of: ISO timestamp of the fetch (default: now)
        error: Failure description; becomes the section's only warning
        source: Upstream provider name
        **extra: Section-specific fields (duration_ms, interval, lookback_days)

    Returns:
        Provenance dict with source, as_of, status and warnings
    """
    return {
        "source": source,
        "as_of": as_of or utc_timestamp(),
        "status": status,
        "warnings": [error] if error else [],
        **extra,
    }


def build_error_response(
    error_type: str,
    message: str,
    symbol: str | None = None,
) -> dict[str, Any]:
    """Request-level failure: the only case where no record is returned."""
    response: dict[str, Any] = {
        "error": True,
        "error_type": error_type,
        "message": message,
        "meta": build_meta("error"),
    }
    if symbol is not None:
        response["symbol"] = symbol
    return response
