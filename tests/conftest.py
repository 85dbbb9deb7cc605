import time
from datetime import datetime

import pytest

from adlens.analyzer.pipeline import CampaignDataPipeline
from adlens.core.errors import RetrievalError
from adlens.models.campaign_models import CampaignRecord

SAMPLE_CSV = """date,campaign_name,creative_id,creative_name,spend,conversions,reach,impressions,engagement
2024-01-29,Summer,c1,Creative One,100,2,800,1000,50
2024-02-04,Summer,c2,Creative Two,50,0,400,500,10
"""

NOW = datetime(2024, 2, 5, 10, 0)


class StaticSource:
    """Serves a fixed payload and counts fetches."""

    def __init__(self, text: str = SAMPLE_CSV):
        self.text = text
        self.calls = 0

    async def fetch_text(self) -> str:
        self.calls += 1
        return self.text


class FailingSource:
    def __init__(self, error: Exception | None = None):
        self.error = error or RetrievalError("Failed to fetch data (HTTP 500)", 500)

    async def fetch_text(self) -> str:
        raise self.error


def fixed_clock(now: datetime = NOW):
    return lambda: now


@pytest.fixture
def make_record():
    def _make(date="2024-01-29", creative_id="c1", **measures):
        return CampaignRecord(date=date, creative_id=creative_id, **measures)

    return _make


@pytest.fixture
def pipeline():
    return CampaignDataPipeline(source=StaticSource(), clock=fixed_clock())


@pytest.fixture
def negative_utc_offset(monkeypatch):
    """Run the test with the host zone set west of UTC."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/Sao_Paulo")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
