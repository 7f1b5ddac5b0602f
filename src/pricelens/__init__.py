"""PriceLens - token price aggregation across DEX and CEX venues."""

__version__ = "0.1.0"
