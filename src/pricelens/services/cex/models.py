"""Normalized ticker returned by every exchange client."""

from pydantic import BaseModel


class RawCexTicker(BaseModel):
    """Spot ticker of ``SYMBOL/USDT`` as reported by one exchange.

    Attributes:
        last_price: Last traded price (quote currency ~ USD).
        quote_volume_24h: 24h volume in quote currency.
        price_change_24h_percent: 24h change in percent.
        bid: Best bid.
        ask: Best ask.
    """

    last_price: float
    quote_volume_24h: float | None = None
    price_change_24h_percent: float | None = None
    bid: float | None = None
    ask: float | None = None

    @property
    def spread_percent(self) -> float | None:
        """Bid-ask spread relative to the bid, None without a usable book."""
        if not self.bid or not self.ask:
            return None
        return (self.ask - self.bid) / self.bid * 100
