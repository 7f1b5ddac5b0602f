"""Test data factories using factory_boy.

These factories generate realistic test data for PriceLens models.
"""

from tests.factories.quotes import CexQuoteFactory, DexPoolQuoteFactory

__all__ = [
    "CexQuoteFactory",
    "DexPoolQuoteFactory",
]
