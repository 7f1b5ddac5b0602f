"""Centralized exchange ticker clients and aggregation."""

from pricelens.services.cex.aggregator import CexAggregator
from pricelens.services.cex.exchanges import CexTickerClient, default_exchange_clients

__all__ = [
    "CexAggregator",
    "CexTickerClient",
    "default_exchange_clients",
]
