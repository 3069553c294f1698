"""Date helpers for run metadata and source date labels."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable

import pandas as pd

from ausvotes.common.errors import ConfigError

DATE_FORMATS = {
    "YYYYMMDD": "%Y%m%d",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD-Mon-YY": "%d-%b-%y",
    "DD Mon YY": "%d %b %y",
    "DD/MM/YY": "%d/%m/%y",
    "DD/MM/YYYY": "%d/%m/%Y",
}


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def _resolve_format(fmt: str) -> str:
    return DATE_FORMATS.get(fmt, fmt)


def parse_date(value: object, formats: Iterable[str]) -> date | None:
    """Return the first successful parse of ``value`` against ``formats``.

    Formats may be strptime patterns or keys of ``DATE_FORMATS``. Values that
    match none of them (including missing values) give ``None``.
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in formats:
        try:
            return datetime.strptime(text, _resolve_format(fmt)).date()
        except ValueError:
            continue
    return None


def parse_date_column(series: pd.Series, formats: Iterable[str]) -> pd.Series:
    formats = list(formats)
    return series.map(lambda value: parse_date(value, formats))


def parse_iso_date(value: object, ctx: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ConfigError(f"`{ctx}` must be a valid date formatted as 'YYYY-MM-DD', got {value!r}") from exc


def validate_date_range(date_range: dict) -> tuple[date, date]:
    if not isinstance(date_range, dict) or "from" not in date_range or "to" not in date_range:
        raise ConfigError("`date_range` must be a mapping with 'from' and 'to' keys.")
    start = parse_iso_date(date_range["from"], "date_range.from")
    end = parse_iso_date(date_range["to"], "date_range.to")
    if start > end:
        raise ConfigError(f"`date_range` starts after it ends: {start.isoformat()} > {end.isoformat()}")
    return start, end
