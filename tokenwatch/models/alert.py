"""Alert data model."""

from typing import Optional

from pydantic import BaseModel, Field


class Alert(BaseModel):
    """Low/high price thresholds registered by one chat."""

    low: Optional[float] = Field(
        default=None, gt=0, description="Notify when price drops to or below this"
    )
    high: Optional[float] = Field(
        default=None, gt=0, description="Notify when price rises to or above this"
    )

    model_config = {"validate_assignment": True}

    @property
    def is_armed(self) -> bool:
        """True if at least one threshold is set."""
        return self.low is not None or self.high is not None
