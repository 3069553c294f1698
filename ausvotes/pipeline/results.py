"""Join polling-place results to the statistical areas their votes came from."""

from __future__ import annotations

import pandas as pd

from ausvotes.common.logging import get_logger
from ausvotes.transform.columns import drop_columns, rename_columns, require_columns

logger = get_logger(__name__)

JOIN_COLUMNS = ("date", "event", "PollingPlaceID")

# ABS column that StatisticalAreaID corresponds to for each event's vintage.
STATISTICAL_AREA_COLUMNS = {
    "2013 Federal Election": "CD_CODE_2006",
    "2016 Federal Election": "SA1_7DIGITCODE_2011",
    "2019 Federal Election": "SA1_7DIGITCODE_2016",
    "2022 Federal Election": "SA1_7DIGITCODE_2016",
    "2023 Referendum": "SA1_7DIGITCODE_2016",
}


def attach_statistical_areas(sa1_votes: pd.DataFrame, dataset: pd.DataFrame, event: str) -> pd.DataFrame:
    """Outer join ``dataset`` onto the votes-by-area table for ``event``.

    Location names are taken from ``sa1_votes``; ``StatisticalAreaID`` is
    renamed to the ABS code column of the event's boundary vintage so the
    result joins directly onto a correspondence table.
    """
    require_columns(sa1_votes, JOIN_COLUMNS)
    require_columns(dataset, JOIN_COLUMNS)
    merged = sa1_votes.merge(
        drop_columns(dataset, ("StateAb", "DivisionNm", "PollingPlaceNm")),
        on=list(JOIN_COLUMNS),
        how="outer",
    )
    area_column = STATISTICAL_AREA_COLUMNS.get(event)
    if area_column is not None and "StatisticalAreaID" in merged.columns:
        merged = rename_columns(merged, {area_column: "StatisticalAreaID"})
    logger.info(
        f"Attached statistical areas to `{event}` results.",
        extra={"election": event, "rows_in": len(dataset), "rows_out": len(merged)},
    )
    return merged
