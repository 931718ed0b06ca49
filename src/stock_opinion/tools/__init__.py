"""Stock opinion tools."""

from stock_opinion.tools.intraday import intraday_bars
from stock_opinion.tools.stock_analysis import assemble_analysis, stock_analysis
from stock_opinion.tools.symbol_search import symbol_lookup

__all__ = [
    "assemble_analysis",
    "intraday_bars",
    "stock_analysis",
    "symbol_lookup",
]
