"""ADLENS — Campaign Record & Date Range Models (Immutable)."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from adlens.core.dates import end_of_day, normalize_date, start_of_day

UNKNOWN_CREATIVE = "(unknown)"


class CampaignRecord(BaseModel):
    """One row of performance data for one creative on one calendar day.

    ``date`` holds what the parser produced (a ``YYYY-MM-DD`` string or an
    already-resolved date); after pipeline normalization it is a naive
    local-midnight datetime, or None when the source value was not a date.
    """

    date: Any = Field(default=None, description="YYYY-MM-DD or resolved date")
    campaign_id: str = ""
    campaign_name: str = ""
    creative_id: str = ""
    creative_name: str = ""
    thumbnail_url: Optional[str] = None
    spend: float = 0.0
    conversions: float = 0.0
    reach: float = 0.0
    impressions: float = 0.0
    engagement: float = 0.0

    model_config = {"frozen": True}

    @property
    def creative_key(self) -> str:
        """Identity used to group rows of the same creative."""
        return self.creative_id or self.creative_name or UNKNOWN_CREATIVE


class DateRange(BaseModel):
    """Inclusive ``[from, to]`` window of naive local instants."""

    from_: datetime = Field(alias="from")
    to: datetime

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("from_", "to", mode="after")
    @classmethod
    def _to_local(cls, value: datetime) -> datetime:
        # Aware bounds are moved into the host zone, like record dates.
        return normalize_date(value)

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.from_ > self.to:
            raise ValueError("date range 'from' must not be after 'to'")
        return self

    @classmethod
    def for_days(cls, first_day: date, last_day: date) -> "DateRange":
        """Window from the start of ``first_day`` to the end of ``last_day``."""
        return cls(from_=start_of_day(first_day), to=end_of_day(last_day))
