"""ADLENS — Unified Metric Registry.

Defines the canonical measures carried by a campaign record and the CSV
header aliases each field is known by. Spreadsheet exports arrive with
English or Portuguese headers, so the parser resolves columns through this
registry instead of fixed names.
"""

import re
import unicodedata
from enum import Enum
from typing import Dict, Tuple


class MetricType(str, Enum):
    """How a metric is categorised."""

    VOLUME = "volume"  # Raw counts: impressions, reach
    COST = "cost"  # Monetary: spend
    CONVERSION = "conversion"  # Results attributed to the ad
    ENGAGEMENT = "engagement"  # Interactions with the ad


class MetricDefinition:
    """Describes a single metric."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        unit: str = "",
        description: str = "",
        aliases: Tuple[str, ...] = (),
    ):
        self.name = name
        self.metric_type = metric_type
        self.unit = unit
        self.description = description
        self.aliases = aliases

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


# ─────────────────────────────────────────────
# MEASURES — Summed by the analyzer engines
# ─────────────────────────────────────────────

MEASURES: Dict[str, MetricDefinition] = {
    "spend": MetricDefinition(
        "spend",
        MetricType.COST,
        "currency",
        "Total amount spent",
        aliases=(
            "spend",
            "amount_spent",
            "cost",
            "investimento",
            "valor_usado",
            "valor_gasto",
            "gasto",
        ),
    ),
    "conversions": MetricDefinition(
        "conversions",
        MetricType.CONVERSION,
        "count",
        "Conversions attributed to the ad",
        aliases=("conversions", "results", "conversoes", "resultados", "leads"),
    ),
    "reach": MetricDefinition(
        "reach",
        MetricType.VOLUME,
        "count",
        "Unique users who saw the ad",
        aliases=("reach", "alcance"),
    ),
    "impressions": MetricDefinition(
        "impressions",
        MetricType.VOLUME,
        "count",
        "Number of times the ad was shown",
        aliases=("impressions", "impressoes"),
    ),
    "engagement": MetricDefinition(
        "engagement",
        MetricType.ENGAGEMENT,
        "count",
        "Clicks and interactions with the ad",
        aliases=(
            "engagement",
            "engagements",
            "clicks",
            "link_clicks",
            "engajamento",
            "cliques",
        ),
    ),
}


# ─────────────────────────────────────────────
# DIMENSIONS — Non-numeric record fields
# ─────────────────────────────────────────────

DIMENSION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "date": ("date", "day", "reporting_starts", "data", "dia"),
    "campaign_id": ("campaign_id", "id_da_campanha"),
    "campaign_name": ("campaign_name", "campaign", "campanha", "nome_da_campanha"),
    "creative_id": ("creative_id", "ad_id", "id_do_anuncio", "id_criativo"),
    "creative_name": (
        "creative_name",
        "creative",
        "ad_name",
        "ad",
        "criativo",
        "anuncio",
        "nome_do_anuncio",
    ),
    "thumbnail_url": ("thumbnail_url", "thumbnail", "image_url", "imagem", "miniatura"),
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def normalize_header(header: str) -> str:
    """Fold a CSV header to ``snake_case`` ASCII (``Impressões`` → ``impressoes``)."""
    folded = unicodedata.normalize("NFKD", str(header))
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", "_", folded).strip("_")


def _build_alias_index() -> Dict[str, str]:
    index: Dict[str, str] = {}
    for field, aliases in DIMENSION_ALIASES.items():
        for alias in aliases:
            index[alias] = field
    for name, metric in MEASURES.items():
        for alias in metric.aliases:
            index[alias] = name
    return index


HEADER_ALIASES: Dict[str, str] = _build_alias_index()

UNIT_SUFFIX = re.compile(r"\s*\([^()]*\)\s*$")


def resolve_field(header: str) -> str | None:
    """Map a raw CSV header to its record field name, if known.

    A trailing qualifier such as a currency (``Amount Spent (BRL)``) is
    ignored when the full header is not an alias.
    """
    field = HEADER_ALIASES.get(normalize_header(header))
    if field is None:
        bare = UNIT_SUFFIX.sub("", str(header))
        if bare != str(header):
            field = HEADER_ALIASES.get(normalize_header(bare))
    return field
