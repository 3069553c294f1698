"""Polling place coordinate back-filling."""

from __future__ import annotations

import pandas as pd

from ausvotes.common.logging import get_logger
from ausvotes.transform.columns import require_columns

logger = get_logger(__name__)

COORD_COLUMNS = ("Latitude", "Longitude")


def reference_coordinates(data: pd.DataFrame) -> pd.DataFrame:
    """Known non-zero coordinates per polling place, first occurrence wins."""
    require_columns(data, ("PollingPlaceID", *COORD_COLUMNS))
    known = data.loc[:, ["PollingPlaceID", *COORD_COLUMNS]]
    for name in COORD_COLUMNS:
        known = known.loc[known[name].notna() & (known[name] != 0)]
    return known.drop_duplicates("PollingPlaceID").reset_index(drop=True)


def harmonise_coords(data: pd.DataFrame, event: str, *, reference: pd.DataFrame | None = None) -> pd.DataFrame:
    """Fill missing or zero latitude/longitude from ``reference`` matched on ``PollingPlaceID``.

    Without a reference the table's own known coordinates are used, so rows
    sharing a polling place fill each other's gaps.
    """
    logger.info(
        f"Filling in missing coordinates for `{event}` data, where possible.",
        extra={"family": "coords", "election": event, "status": "processing"},
    )
    require_columns(data, ("PollingPlaceID", *COORD_COLUMNS))
    lookup = reference_coordinates(data if reference is None else reference).set_index("PollingPlaceID")

    out = data.copy()
    for name in COORD_COLUMNS:
        gaps = out[name].isna() | (out[name] == 0)
        filled = out.loc[gaps, "PollingPlaceID"].map(lookup[name])
        out.loc[gaps, name] = filled.where(filled.notna(), out.loc[gaps, name])
    return out
