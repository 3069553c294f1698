"""Shared event-keyed harmonisation algorithm.

Each dataset family declares a ``Family``: its canonical columns and a lookup
of event name to ``Variant``. A variant only carries parameters; the steps
themselves live in ``harmonise`` so every family runs the same sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

import pandas as pd

from ausvotes.common.logging import get_logger
from ausvotes.common.time_utils import parse_date_column
from ausvotes.transform.columns import drop_columns, keep_columns, rename_columns
from ausvotes.transform.pivot import pivot_long
from ausvotes.transform.states import amend_names, fill_missing_state, upper_state

logger = get_logger(__name__)

PROCESSING_MESSAGE = "Processing `{event}` data to ensure all columns align across all elections."
PASSTHROUGH_MESSAGE = "No processing required for `{event}`. Data returned unprocessed."


@dataclass(frozen=True)
class Variant:
    renames: Mapping[str, str] = field(default_factory=dict)
    drop: tuple[str, ...] = ()
    drop_missing: str | None = None
    fill_state: bool = False
    state_names: bool = False
    upper_state: bool = False
    pivot: bool = False
    id_cols: tuple[str, ...] | None = None
    date_format: str | None = None


@dataclass(frozen=True)
class Family:
    name: str
    variants: Mapping[str, Variant]
    columns: tuple[str, ...] = ()
    names_to: str | None = None
    values_to: str | None = None
    finalise: Callable[[pd.DataFrame, str, Variant], pd.DataFrame] | None = None

    def id_cols(self, variant: Variant) -> tuple[str, ...]:
        if variant.id_cols is not None:
            return variant.id_cols
        return tuple(name for name in self.columns if name not in (self.names_to, self.values_to))


def with_variants(events: tuple[str, ...], variant: Variant) -> dict[str, Variant]:
    return {event: variant for event in events}


def log_passthrough(family: str, event: str) -> None:
    logger.info(
        PASSTHROUGH_MESSAGE.format(event=event),
        extra={"family": family, "election": event, "status": "passthrough"},
    )


def log_processing(family: str, event: str, rows_in: int) -> None:
    logger.info(
        PROCESSING_MESSAGE.format(event=event),
        extra={"family": family, "election": event, "status": "processing", "rows_in": rows_in},
    )


def harmonise(family: Family, data: pd.DataFrame, event: str) -> pd.DataFrame:
    """Bring one event's table to ``family``'s canonical shape.

    Events without a variant are returned as the very same object.
    """
    variant = family.variants.get(event)
    if variant is None:
        log_passthrough(family.name, event)
        return data

    log_processing(family.name, event, len(data))
    out = rename_columns(data, variant.renames)
    out = drop_columns(out, variant.drop)
    if variant.drop_missing is not None:
        out = out.loc[out[variant.drop_missing].notna()].reset_index(drop=True)
    if variant.fill_state:
        out = fill_missing_state(out)
    if variant.state_names:
        out = amend_names(out, "StateAb", "state_to_abbr")
    if variant.upper_state:
        out = upper_state(out)
    if variant.pivot:
        out = pivot_long(
            out,
            family.id_cols(variant),
            (family.names_to, family.values_to),
            family.names_to,
            family.values_to,
        )
    if variant.date_format is not None and family.names_to in out.columns:
        out[family.names_to] = parse_date_column(out[family.names_to], [variant.date_format])
    if family.finalise is not None:
        out = family.finalise(out, event, variant)
    if family.columns:
        out = keep_columns(out, family.columns)
    return out.reset_index(drop=True)
