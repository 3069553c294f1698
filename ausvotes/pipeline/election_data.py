"""Fetch, harmonise and stack one dataset family across several events."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterable

import pandas as pd

from ausvotes.common.cache import TableCache, cache_key, options_token
from ausvotes.common.errors import ConfigError, StageError
from ausvotes.common.logging import get_logger
from ausvotes.harmonise.candidates import harmonise_candidates, harmonise_elected, harmonise_group
from ausvotes.harmonise.ccd import CCD_COLUMNS, harmonise_ccd
from ausvotes.harmonise.coords import harmonise_coords
from ausvotes.harmonise.overseas import OVERSEAS_COLUMNS, harmonise_overseas
from ausvotes.harmonise.ppv import PPV_COLUMNS, harmonise_ppv
from ausvotes.harmonise.pva import (
    PVA_DATE_COLUMNS,
    PVA_PARTY_COLUMNS,
    harmonise_pva_date,
    harmonise_pva_party,
    preprocess_pva,
)
from ausvotes.harmonise.results import harmonise_prepoll, harmonise_reps
from ausvotes.transform.columns import amend_colnames
from ausvotes.transform.combine import combine_tables

logger = get_logger(__name__)

Fetch = Callable[[dict], "pd.DataFrame | None"]

HARMONISERS: dict[str, Callable[..., pd.DataFrame]] = {
    "pva_date": harmonise_pva_date,
    "pva_party": harmonise_pva_party,
    "ppv": harmonise_ppv,
    "prepoll": harmonise_prepoll,
    "overseas": harmonise_overseas,
    "elected": harmonise_elected,
    "group": harmonise_group,
    "candidates": harmonise_candidates,
    "reps": harmonise_reps,
    "ccd": harmonise_ccd,
    "coords": harmonise_coords,
}

PVA_FAMILIES = ("pva_date", "pva_party")

# Canonical columns a family emits itself; the final column amendment leaves them alone.
FAMILY_COLUMNS = {
    "pva_date": PVA_DATE_COLUMNS,
    "pva_party": PVA_PARTY_COLUMNS,
    "ppv": PPV_COLUMNS,
    "overseas": OVERSEAS_COLUMNS,
    "ccd": CCD_COLUMNS,
}


def _with_event_columns(table: pd.DataFrame, event: dict) -> pd.DataFrame:
    out = table.copy()
    for name in ("date", "event"):
        if name in out.columns:
            out = out.drop(columns=[name])
    out.insert(0, "event", event["event"])
    out.insert(0, "date", date.fromisoformat(event["date"]))
    return out


def prepare_event_table(
    family: str,
    raw: pd.DataFrame,
    event: dict,
    *,
    process: bool = True,
    harmoniser_options: dict[str, Any] | None = None,
) -> pd.DataFrame:
    """One event's download with ``date``/``event`` prepended, optionally harmonised."""
    table = _with_event_columns(raw, event)
    if family in PVA_FAMILIES:
        table = preprocess_pva(table, family)
    if not process:
        return table

    table = amend_colnames(table, only=("StateAb", "DivisionNm"))
    table = HARMONISERS[family](table, event["event"], **(harmoniser_options or {}))
    return amend_colnames(table, keep=FAMILY_COLUMNS.get(family, ()))


def get_election_data(
    family: str,
    events: Iterable[dict],
    fetch: Fetch,
    *,
    process: bool = True,
    cache: TableCache | None = None,
    harmoniser_options: dict[str, Any] | None = None,
) -> pd.DataFrame:
    """Stack ``family`` for every event in ``events``, oldest first.

    ``fetch`` returns the raw table for an event record, or ``None`` when the
    family was not published for that event. A ``cache_token(event)`` method on
    ``fetch`` adds where each event was read from to the cache key. Raises
    ``StageError`` when no event yields any rows.
    """
    if family not in HARMONISERS:
        raise ConfigError(f"`{family}` is not a known dataset family. Choose from: {', '.join(HARMONISERS)}")

    events = sorted(events, key=lambda item: item["date"])
    source_token = getattr(fetch, "cache_token", None)
    key = cache_key(
        family,
        *(
            item["event"] if source_token is None else f"{item['event']}={source_token(item)}"
            for item in events
        ),
        "processed" if process else "raw",
        options_token(harmoniser_options),
    )
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached

    combined = pd.DataFrame()
    for event in events:
        raw = fetch(event)
        if raw is None:
            logger.info(
                f"Skipping `{family}` for `{event['event']}` as it is not available.",
                extra={"family": family, "election": event["event"], "status": "skipped"},
            )
            continue
        table = prepare_event_table(
            family, raw, event, process=process, harmoniser_options=harmoniser_options
        )
        combined = combine_tables([combined, table])

    if combined.empty:
        raise StageError(
            f"No data was available for `{family}` with the parameters used. Check the date range and try again."
        )

    logger.info(
        f"Combined `{family}` data for {len(events)} event(s).",
        extra={"family": family, "status": "ok", "rows_out": len(combined)},
    )
    if cache is not None:
        cache.set(key, combined)
    return combined
