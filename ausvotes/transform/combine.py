"""Row-binding of per-event tables with deterministic type reconciliation."""

from __future__ import annotations

from typing import Callable, Iterable

import pandas as pd

from ausvotes.common.errors import TypeMismatchOnCombine
from ausvotes.common.logging import get_logger

logger = get_logger(__name__)

_NUMERIC_KINDS = {"integer", "floating", "mixed-integer-float", "decimal"}
_TEXT_KINDS = {"string", "bytes", "mixed", "mixed-integer"}
_DATE_KINDS = {"date", "datetime", "datetime64"}


def _to_numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series, errors="coerce")


# Unordered pairs of column kinds and how to bring both sides to one representation.
COERCION_RULES: dict[frozenset[str], Callable[[pd.Series], pd.Series]] = {
    frozenset({"numeric", "text"}): _to_numeric,
    frozenset({"numeric", "bool"}): _to_numeric,
}


def column_kind(series: pd.Series) -> str:
    """Coarse kind of a column: numeric, text, date, bool or empty."""
    if series.isna().all():
        return "empty"
    inferred = pd.api.types.infer_dtype(series, skipna=True)
    if inferred in _NUMERIC_KINDS:
        return "numeric"
    if inferred == "boolean":
        return "bool"
    if inferred in _DATE_KINDS:
        return "date"
    if inferred in _TEXT_KINDS:
        return "text"
    return inferred


def find_type_mismatches(first: pd.DataFrame, second: pd.DataFrame) -> dict[str, tuple[str, str]]:
    mismatches: dict[str, tuple[str, str]] = {}
    for name in first.columns:
        if name not in second.columns:
            continue
        left, right = column_kind(first[name]), column_kind(second[name])
        if "empty" in (left, right) or left == right:
            continue
        mismatches[name] = (left, right)
    return mismatches


def try_combine(first: pd.DataFrame, second: pd.DataFrame) -> pd.DataFrame:
    """Append ``second`` below ``first``, coercing shared columns whose kinds disagree.

    Columns found in only one table are filled with missing values in the
    other. A mismatch with no rule in ``COERCION_RULES`` raises
    ``TypeMismatchOnCombine``.
    """
    if len(first.columns) == 0:
        return second.reset_index(drop=True)
    if len(second.columns) == 0:
        return first.reset_index(drop=True)

    first, second = first.copy(), second.copy()
    shared = [name for name in first.columns if name in second.columns]
    for _ in range(len(shared) + 1):
        mismatches = find_type_mismatches(first, second)
        if not mismatches:
            return pd.concat([first, second], ignore_index=True, sort=False)

        logger.info(f"Attempting to fix columns: {', '.join(map(str, mismatches))}")
        for name, (left, right) in mismatches.items():
            rule = COERCION_RULES.get(frozenset({left, right}))
            if rule is None:
                raise TypeMismatchOnCombine(f"Can't combine column `{name}` of kind {left} with kind {right}")
            first[name] = rule(first[name])
            second[name] = rule(second[name])

    raise TypeMismatchOnCombine(f"Unable to reconcile column types after {len(shared) + 1} attempts")


def combine_tables(frames: Iterable[pd.DataFrame]) -> pd.DataFrame:
    """Append tables in the order given."""
    combined = pd.DataFrame()
    for frame in frames:
        combined = try_combine(combined, frame)
    return combined
