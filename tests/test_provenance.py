"""Tests for response metadata helpers."""

from stock_opinion import SCHEMA_VERSION, SERVER_VERSION
from stock_opinion.utils.provenance import (
    ERROR_INVALID_SYMBOL,
    build_error_response,
    build_meta,
    build_provenance,
)


class TestBuildMeta:
    def test_version_stamp(self):
        meta = build_meta("stock_analysis")
        assert meta == {
            "server_version": SERVER_VERSION,
            "schema_version": SCHEMA_VERSION,
            "tool": "stock_analysis",
        }

    def test_timing_and_cache(self):
        meta = build_meta("stock_analysis", duration_ms=12.345, cache_hit=False)
        assert meta["duration_ms"] == 12.3
        assert meta["cache_hit"] is False


class TestBuildProvenance:
    """Tests for build_provenance."""

    def test_ok_section(self):
        prov = build_provenance("ok", as_of="2024-01-02T00:00:00Z", duration_ms=4.2)
        assert prov == {
            "source": "yfinance",
            "as_of": "2024-01-02T00:00:00Z",
            "status": "ok",
            "warnings": [],
            "duration_ms": 4.2,
        }

    def test_error_becomes_warning(self):
        prov = build_provenance("unavailable", error="TimeoutError: timed out")
        assert prov["status"] == "unavailable"
        assert prov["warnings"] == ["TimeoutError: timed out"]
        assert prov["as_of"].endswith("Z")


class TestBuildErrorResponse:
    def test_envelope(self):
        response = build_error_response(ERROR_INVALID_SYMBOL, "not found", symbol="ZZZZ")
        assert response["error"] is True
        assert response["error_type"] == "invalid_symbol"
        assert response["symbol"] == "ZZZZ"
        assert response["meta"]["tool"] == "error"

    def test_symbol_optional(self):
        assert "symbol" not in build_error_response("invalid_parameters", "Query is required")
