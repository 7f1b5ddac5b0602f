"""Price aggregation service package."""

from pricelens.services.aggregation.cache import ResultCache
from pricelens.services.aggregation.orchestrator import PriceAggregator
from pricelens.services.aggregation.search import TokenSearchService

__all__ = [
    "PriceAggregator",
    "ResultCache",
    "TokenSearchService",
]
