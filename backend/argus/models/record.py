"""
Input record handed to the pipeline by ingestion.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProcurementRecord(BaseModel):
    """One validated tender/award record. Never mutated by the pipeline."""

    model_config = ConfigDict(frozen=True)

    # Identifiers
    tender_id: str = Field(min_length=1)
    department_id: str = Field(min_length=1)
    department_name: Optional[str] = None

    # Classification
    category: Optional[str] = None
    region: Optional[str] = None
    procurement_year: int

    # Amounts
    estimated_budget: float = Field(ge=0, description="Estimated tender value in currency units")
    awarded_amount: Optional[float] = Field(None, ge=0)

    # Dates
    publication_date: Optional[date] = None
    submission_deadline: Optional[date] = None
    award_date: Optional[date] = None

    # Competition
    bidder_count: Optional[int] = Field(None, ge=0)
    awarded_vendor_id: Optional[str] = None

    specification_text: str = ""

    @property
    def bidding_window_days(self) -> Optional[int]:
        """Days between publication and submission deadline, when both are known."""
        if self.publication_date is None or self.submission_deadline is None:
            return None
        return (self.submission_deadline - self.publication_date).days
