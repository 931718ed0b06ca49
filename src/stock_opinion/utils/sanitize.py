"""Sanitization of untrusted provider text and user-supplied tickers."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
# Letters, digits and the separators exchanges use: BRK.B, BF-B, ^GSPC, EURUSD=X
_TICKER_CHARS = re.compile(r"[^A-Z0-9.\-^=]")

MAX_TICKER_LENGTH = 15


def sanitize_text(text: str | None, max_length: int = 500) -> str | None:
    """
    Sanitize untrusted text fields (news titles, company names).

    Removes control characters and truncates to max_length.

    Args:
        text: Text to sanitize (may be None)
        max_length: Maximum length before truncation

    Returns:
        Sanitized text or None if input was None
    """
    if text is None:
        return None

    text = _CONTROL_CHARS.sub("", str(text))

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text.strip()


def normalize_symbol(symbol: str | None) -> str:
    """
    Normalize a ticker to its canonical cache/lookup form.

    Uppercases, strips whitespace and drops characters no exchange symbol uses.

    Raises:
        ValueError: If nothing usable remains
    """
    cleaned = _TICKER_CHARS.sub("", (symbol or "").strip().upper())
    if not cleaned:
        raise ValueError(f"Invalid ticker symbol: {symbol!r}")
    if len(cleaned) > MAX_TICKER_LENGTH:
        raise ValueError(f"Ticker symbol too long: {symbol!r}")
    return cleaned
