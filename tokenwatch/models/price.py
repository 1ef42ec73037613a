"""Price data models."""

from typing import Optional

from pydantic import BaseModel, Field


class TradingPair(BaseModel):
    """A DEX trading pair as returned by a market-data search."""

    price_usd: float = Field(..., description="Quoted price in USD")
    liquidity_usd: float = Field(default=0.0, ge=0, description="Pool liquidity in USD")
    base_name: str = Field(default="", description="Base token name")
    base_symbol: str = Field(default="", description="Base token symbol")
    dex_id: str = Field(default="", description="DEX identifier")

    model_config = {"frozen": True}


class PriceSnapshot(BaseModel):
    """Token price with its conversion to the configured local currency."""

    usd: Optional[float] = Field(default=None, description="Price in USD, None if unavailable")
    converted: Optional[float] = Field(default=None, description="Price in local currency")
    rate: Optional[float] = Field(default=None, description="USD to local currency rate")
    currency: str = Field(default="INR", description="Local currency code")

    model_config = {"frozen": True}

    @property
    def available(self) -> bool:
        return self.usd is not None

    def convert(self, usd_value: float) -> Optional[float]:
        """Convert an arbitrary USD amount using this snapshot's rate."""
        if self.rate is None:
            return None
        return usd_value * self.rate
