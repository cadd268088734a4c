"""
Historical comparison data: category/region aggregates and prior awards.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HistoricalBaseline(BaseModel):
    """Aggregate statistics for one (category, region, year window).

    An absent baseline (None) means "unknown", never zero.
    """

    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    region: Optional[str] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None

    mean_amount: Optional[float] = None
    stddev_amount: float = Field(0.0, ge=0)
    average_bidder_count: Optional[float] = Field(None, ge=0)
    median_bidding_days: Optional[float] = Field(None, ge=0)
    sample_size: int = Field(0, ge=0)


class AwardedContract(BaseModel):
    """A past award from one vendor to one department."""

    model_config = ConfigDict(frozen=True)

    tender_id: str
    vendor_id: str
    department_id: str
    amount: float = Field(ge=0)
    award_date: date
