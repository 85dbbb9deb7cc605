"""ADLENS — Campaign Data Pipeline Orchestrator.

Runs the full data flow once per session:
  fetch → parse → normalize → store → (filter → metrics / ranking / trends)

The pipeline owns the Record Store and the active date range. Derived views
are recomputed on read and memoized by (store version, date range), so a new
fetch or a new range is always reflected and nothing else is.
"""

import time
from datetime import datetime, tzinfo
from typing import Callable, List, NamedTuple, Optional, Protocol, Sequence

from adlens.analyzer.metrics_engine import aggregate_metrics
from adlens.analyzer.range_engine import (
    count_invalid_dates,
    default_date_range,
    filter_by_date_range,
    get_available_date_range,
)
from adlens.analyzer.ranking_engine import get_top_creatives
from adlens.analyzer.trend_engine import get_campaign_trends
from adlens.config import Settings, settings as default_settings
from adlens.connectors.sheets.client import SheetClient
from adlens.connectors.sheets.parser import parse_csv
from adlens.core.dates import Clock, make_clock, normalize_date, resolve_timezone
from adlens.core.errors import AdlensError, PipelineBusyError
from adlens.core.logging import get_logger
from adlens.models.campaign_models import CampaignRecord, DateRange
from adlens.models.dashboard_models import (
    AdPerformance,
    AvailableDateRange,
    CampaignTrend,
    DashboardMetrics,
    DashboardSnapshot,
    PipelineState,
)

logger = get_logger("analyzer.pipeline")

Parser = Callable[[str], Sequence[CampaignRecord]]


class TextSource(Protocol):
    """Anything that can hand back the raw CSV payload."""

    async def fetch_text(self) -> str: ...


class DerivedViews(NamedTuple):
    filtered_data: List[CampaignRecord]
    metrics: DashboardMetrics
    top_creatives: List[AdPerformance]
    campaign_trends: List[CampaignTrend]


EMPTY_VIEWS = DerivedViews([], DashboardMetrics(), [], [])


class CampaignDataPipeline:
    """Session-scoped orchestrator: IDLE → LOADING → READY | FAILED."""

    def __init__(
        self,
        source: TextSource,
        parser: Parser = parse_csv,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
        top_creatives_limit: int = 6,
        default_window_days: int = 7,
    ):
        self.source = source
        self.parser = parser
        self.tz = tz
        self.clock = clock or make_clock(tz)
        self.top_creatives_limit = top_creatives_limit
        self.default_window_days = default_window_days

        self._state = PipelineState.IDLE
        self._loading = False
        self._error: Optional[str] = None
        self._error_kind: Optional[str] = None
        self._fetched_at: Optional[datetime] = None

        self._records: tuple[CampaignRecord, ...] = ()
        self._store_version = 0
        self._invalid_date_count = 0

        self._date_range: Optional[DateRange] = None
        self._range_set_by_caller = False

        self._views_key: Optional[tuple] = None
        self._views: DerivedViews = EMPTY_VIEWS
        self._available_key: Optional[int] = None
        self._available: Optional[AvailableDateRange] = None

    # ── Lifecycle ──

    async def start(self) -> None:
        """Fetch, parse and store the records (once per session)."""
        if self._state != PipelineState.IDLE:
            logger.warning(
                f"Pipeline already started (state={self._state.value}); ignoring",
                extra={"state": self._state.value},
            )
            return

        self._transition(PipelineState.LOADING)
        self._loading = True
        started = time.perf_counter()
        try:
            text = await self.source.fetch_text()
            records = self._normalize(self.parser(text))
            self._store(records)
            if records and not self._range_set_by_caller:
                self._date_range = default_date_range(
                    self.clock(), self.default_window_days
                )
                logger.info(
                    f"Default date range: {self._date_range.from_} → {self._date_range.to}"
                )
            self._error = None
            self._error_kind = None
            self._transition(PipelineState.READY)
        except AdlensError as e:
            self._fail(str(e), e.kind)
        except Exception as e:
            logger.exception(f"Unexpected pipeline failure: {e}")
            self._fail(f"Unknown error: {e}", "unknown")
        finally:
            self._loading = False
            logger.info(
                f"Pipeline load finished: {self._state.value}",
                extra={
                    "state": self._state.value,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                    "record_count": len(self._records),
                },
            )

    async def restart(self) -> None:
        """Begin a new session, keeping a caller-chosen date range."""
        if self._loading:
            raise PipelineBusyError("A fetch is already in progress")
        self._transition(PipelineState.IDLE)
        await self.start()

    def _transition(self, state: PipelineState) -> None:
        logger.info(
            f"Pipeline state: {self._state.value} → {state.value}",
            extra={"state": state.value},
        )
        self._state = state

    def _fail(self, message: str, kind: str) -> None:
        logger.error(f"Pipeline load failed ({kind}): {message}")
        self._error = message
        self._error_kind = kind
        self._transition(PipelineState.FAILED)

    def _normalize(self, parsed: Sequence[CampaignRecord]) -> List[CampaignRecord]:
        records = [
            r.model_copy(update={"date": normalize_date(r.date, self.tz)})
            for r in parsed
        ]
        invalid = count_invalid_dates(records, self.tz)
        if invalid:
            logger.warning(
                f"{invalid} records have no valid date and are excluded from dated views",
                extra={"record_count": invalid},
            )
        self._invalid_date_count = invalid
        return records

    def _store(self, records: List[CampaignRecord]) -> None:
        self._records = tuple(records)
        self._store_version += 1
        self._fetched_at = self.clock()

    # ── Date range ──

    def set_date_range(self, date_range: Optional[DateRange]) -> None:
        """Replace the active window; None reverts to the default window."""
        if date_range is None:
            self._range_set_by_caller = False
            self._date_range = (
                default_date_range(self.clock(), self.default_window_days)
                if self._records
                else None
            )
        else:
            self._range_set_by_caller = True
            self._date_range = date_range
        logger.info(
            f"Date range set: {self._date_range.from_ if self._date_range else None}"
            f" → {self._date_range.to if self._date_range else None}"
        )

    # ── Read model ──

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def error_kind(self) -> Optional[str]:
        return self._error_kind

    @property
    def fetched_at(self) -> Optional[datetime]:
        return self._fetched_at

    @property
    def invalid_date_count(self) -> int:
        return self._invalid_date_count

    @property
    def date_range(self) -> Optional[DateRange]:
        return self._date_range

    @property
    def raw_data(self) -> List[CampaignRecord]:
        return list(self._records)

    @property
    def filtered_data(self) -> List[CampaignRecord]:
        return list(self._derived().filtered_data)

    @property
    def metrics(self) -> DashboardMetrics:
        return self._derived().metrics

    @property
    def top_creatives(self) -> List[AdPerformance]:
        return list(self._derived().top_creatives)

    @property
    def campaign_trends(self) -> List[CampaignTrend]:
        return list(self._derived().campaign_trends)

    @property
    def available_date_range(self) -> Optional[AvailableDateRange]:
        if self._available_key != self._store_version:
            self._available = get_available_date_range(self._records, self.tz)
            self._available_key = self._store_version
        return self._available

    def top_creatives_for(self, limit: int) -> List[AdPerformance]:
        """Ranking with a non-default size, over the current window."""
        if limit == self.top_creatives_limit:
            return self.top_creatives
        return get_top_creatives(self._derived().filtered_data, limit)

    def _derived(self) -> DerivedViews:
        key = (self._store_version, self._date_range)
        if key != self._views_key:
            self._views = self._compute_views()
            self._views_key = key
        return self._views

    def _compute_views(self) -> DerivedViews:
        if self._date_range is None:
            return EMPTY_VIEWS

        filtered = filter_by_date_range(
            self._records, self._date_range.from_, self._date_range.to, self.tz
        )
        return DerivedViews(
            filtered_data=filtered,
            metrics=aggregate_metrics(filtered),
            top_creatives=get_top_creatives(filtered, self.top_creatives_limit),
            campaign_trends=get_campaign_trends(
                filtered, self._date_range.to, start=self._date_range.from_, tz=self.tz
            ),
        )

    def snapshot(self, include_raw: bool = True) -> DashboardSnapshot:
        """Everything a dashboard needs, in one model."""
        views = self._derived()
        return DashboardSnapshot(
            state=self._state,
            loading=self._loading,
            error=self._error,
            error_kind=self._error_kind,
            fetched_at=self._fetched_at,
            date_range=self._date_range,
            available_date_range=self.available_date_range,
            metrics=views.metrics,
            top_creatives=views.top_creatives,
            campaign_trends=views.campaign_trends,
            invalid_date_count=self._invalid_date_count,
            raw_data=list(self._records) if include_raw else [],
            filtered_data=views.filtered_data,
        )


def build_pipeline(
    config: Settings = default_settings,
    source: Optional[TextSource] = None,
) -> CampaignDataPipeline:
    """Wire a pipeline from settings."""
    tz = resolve_timezone(config.reference_timezone)
    return CampaignDataPipeline(
        source=source
        or SheetClient(source_url=config.source_url, timeout=config.request_timeout),
        tz=tz,
        top_creatives_limit=config.top_creatives_limit,
        default_window_days=config.default_window_days,
    )
