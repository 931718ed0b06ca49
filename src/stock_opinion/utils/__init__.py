"""Utility modules."""

from stock_opinion.utils.formatting import (
    format_metrics_for_display,
    format_money,
    format_percent,
    format_price,
    format_signed_percent,
)
from stock_opinion.utils.normalize import parse_number, sanitize_nan_inf, to_number
from stock_opinion.utils.ohlcv import bars_to_rows, standardize_bars
from stock_opinion.utils.provenance import build_error_response, build_meta, build_provenance
from stock_opinion.utils.sanitize import normalize_symbol, sanitize_text
from stock_opinion.utils.validators import BarParams

__all__ = [
    "format_metrics_for_display",
    "format_money",
    "format_percent",
    "format_price",
    "format_signed_percent",
    "parse_number",
    "sanitize_nan_inf",
    "to_number",
    "bars_to_rows",
    "standardize_bars",
    "build_error_response",
    "build_meta",
    "build_provenance",
    "normalize_symbol",
    "sanitize_text",
    "BarParams",
]
