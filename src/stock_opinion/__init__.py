"""Stock Opinion MCP Server: fundamentals-driven buy/hold/sell opinions."""

import os
from importlib.metadata import PackageNotFoundError, version


def get_server_version() -> str:
    """SERVER_VERSION env override, else the installed distribution, else "dev"."""
    override = os.environ.get("SERVER_VERSION")
    if override:
        return override
    try:
        return version("stock-opinion")
    except PackageNotFoundError:
        return "dev"


SERVER_VERSION = get_server_version()
# Output schema revisions:
# v1: quote, fundamentals, news, analysis, historical_bars
# v2: ratios as fractions, fundamentals_display, per-source provenance status
SCHEMA_VERSION = "2"
