"""ADLENS — CSV → CampaignRecord Parser.

Reads every column as text and maps headers through the metric registry.
Dates are emitted as ``YYYY-MM-DD`` strings whenever the source format is
recognised; normalization into local instants happens in the pipeline.
"""

import io
import re
from typing import Any, Dict, List

import pandas as pd

from adlens.core.errors import ParseError
from adlens.core.metric_registry import MEASURES, resolve_field
from adlens.core.logging import get_logger
from adlens.models.campaign_models import CampaignRecord

logger = get_logger("sheets.parser")

DMY_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
ISO_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2})[ T]\d{1,2}:\d{2}")
GROUPED_COMMA = re.compile(r"^-?\d{1,3}(,\d{3})+$")
GROUPED_DOT = re.compile(r"^-?\d{1,3}(\.\d{3}){2,}$")
CURRENCY_NOISE = re.compile(r"[^\d,.\-]")


def _safe_float(value: Any) -> float:
    """Parse a spreadsheet number (``R$ 1.234,56``, ``1,234.56``, ``12%``)."""
    text = CURRENCY_NOISE.sub("", str(value or ""))
    if not text:
        return 0.0

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", "") if GROUPED_COMMA.match(text) else text.replace(",", ".")
    elif GROUPED_DOT.match(text):
        text = text.replace(".", "")

    try:
        return float(text)
    except ValueError:
        return 0.0


def _clean_date(value: Any) -> str:
    """Rewrite ``DD/MM/YYYY`` and ISO timestamps as ``YYYY-MM-DD``."""
    text = str(value or "").strip()
    m = DMY_DATE.match(text)
    if m:
        day, month, year = (int(g) for g in m.groups())
        return f"{year:04d}-{month:02d}-{day:02d}"
    m = ISO_TIMESTAMP.match(text)
    if m:
        return m.group(1)
    return text


def _map_columns(columns: List[str]) -> Dict[str, str]:
    """field name → CSV column; the first matching column wins."""
    mapping: Dict[str, str] = {}
    for column in columns:
        field = resolve_field(column)
        if field and field not in mapping:
            mapping[field] = column
    return mapping


def parse_csv(text: str) -> List[CampaignRecord]:
    """Parse a CSV payload into campaign records."""
    if not text or not text.strip():
        raise ParseError("Empty CSV payload")

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"Malformed CSV payload: {e}") from e

    columns = _map_columns([str(c) for c in df.columns])
    if "date" not in columns:
        raise ParseError(f"CSV payload has no date column (headers: {list(df.columns)})")

    unmapped = [c for c in df.columns if c not in columns.values()]
    if unmapped:
        logger.info(f"Ignoring unmapped columns: {unmapped}")

    records: List[CampaignRecord] = []
    for row in df.to_dict(orient="records"):
        if not any(str(v).strip() for v in row.values()):
            continue

        fields: Dict[str, Any] = {"date": _clean_date(row[columns["date"]])}
        for name in ("campaign_id", "campaign_name", "creative_id", "creative_name"):
            if name in columns:
                fields[name] = str(row[columns[name]]).strip()
        if "thumbnail_url" in columns:
            fields["thumbnail_url"] = str(row[columns["thumbnail_url"]]).strip() or None
        for name in MEASURES:
            if name in columns:
                fields[name] = _safe_float(row[columns[name]])

        records.append(CampaignRecord(**fields))

    logger.info(
        f"Parsed {len(records)} records from {len(df.columns)} columns",
        extra={"record_count": len(records)},
    )
    return records
