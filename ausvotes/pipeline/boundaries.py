"""Boundary correspondence: crosswalks from an event's base geography to a comparison geography."""

from __future__ import annotations

import warnings
from typing import Iterable

import pandas as pd

from ausvotes.common.constants import RATIO_TOLERANCE
from ausvotes.common.errors import InvalidBoundaryCombination, RatioIntegrityWarning, RedistributionWarning
from ausvotes.common.logging import get_logger
from ausvotes.pipeline.sources import BoundarySource
from ausvotes.transform.codes import amend_maincode
from ausvotes.transform.columns import drop_columns, keep_columns, rename_columns

logger = get_logger(__name__)

# Vintages with a published correspondence from 2006 collection districts.
CD_2006_TARGET_YEARS = (2011, 2016, 2021)


def _warn(message: str, category: type[Warning] = RatioIntegrityWarning) -> None:
    logger.warning(message)
    warnings.warn(message, category, stacklevel=3)


def _as_list(group_cols: str | Iterable[str]) -> list[str]:
    return [group_cols] if isinstance(group_cols, str) else list(group_cols)


def _ratio_totals(data: pd.DataFrame, ratio_col: str, group_cols: list[str]) -> pd.Series:
    return data.groupby(group_cols, sort=True)[ratio_col].sum()


def _deviating(totals: pd.Series, threshold: float) -> pd.Series:
    return totals[(totals - 1).abs() > threshold]


def verify_ratios(
    data: pd.DataFrame,
    ratio_col: str,
    group_cols: str | Iterable[str],
    process: bool = True,
    threshold: float = RATIO_TOLERANCE,
    reverify: bool = True,
) -> pd.DataFrame:
    """Check that ratios sum to 1 within each source group.

    With ``process`` the rows of every deviating group are removed; otherwise
    the data is kept as-is and a ``RatioIntegrityWarning`` is issued.
    """
    group_cols = _as_list(group_cols)
    group_type = group_cols[0].split("_")[0]

    bad = _deviating(_ratio_totals(data, ratio_col, group_cols), threshold)
    if bad.empty:
        logger.info(f"No groups found with total ratios deviating from 1 by more than {threshold}.")
        return data

    if not process:
        _warn(f"Some total ratios of the {group_type}s deviate from 1 by more than {threshold}.")
        return data

    if len(group_cols) == 1:
        mask = data[group_cols[0]].isin(bad.index)
    else:
        mask = pd.MultiIndex.from_frame(data[group_cols]).isin(bad.index)
    kept = data.loc[~mask].reset_index(drop=True)
    logger.info(
        f"Removed {len(bad)} {group_type}(s) with total ratios deviating from 1 by more than {threshold}.",
        extra={"rows_in": len(data), "rows_out": len(kept)},
    )

    if reverify:
        if _deviating(_ratio_totals(kept, ratio_col, group_cols), threshold).empty:
            logger.info(f"All total ratios are now within the acceptable range of 1 ± {threshold}.")
        else:
            _warn(f"Some total ratios still deviate from 1 by more than {threshold} after removal.")
    return kept


def combine_ratios(
    data: pd.DataFrame,
    col_name: str,
    ratio_col1: str,
    ratio_col2: str,
    group_cols: Iterable[str],
    process: bool = True,
) -> pd.DataFrame:
    """Compose two consecutive correspondence hops into one ratio per (source, target)."""
    group_cols = list(group_cols)
    chained = data.copy()
    chained[col_name] = chained[ratio_col1] * chained[ratio_col2]
    chained = chained.dropna(subset=[*group_cols, col_name])
    combined = chained.groupby(group_cols, sort=True, as_index=False)[col_name].sum()
    return verify_ratios(combined, col_name, group_cols[0], process)


def describe_base(event: str, config: dict) -> dict:
    base = config["event_base"].get(event)
    if base is None:
        raise InvalidBoundaryCombination(
            f"Invalid event: `{event}` has no base geography. Choose from: {', '.join(config['event_base'])}"
        )
    return base


def describe_target(compare_to: str, config: dict) -> dict:
    target = config["comparison_target"].get(compare_to)
    if target is None:
        raise InvalidBoundaryCombination(
            f"Invalid comparison: `{compare_to}` is not a known geography. "
            f"Choose from: {', '.join(config['comparison_target'])}"
        )
    return target


def validate_combination(event: str, compare_to: str, config: dict) -> tuple[dict, dict]:
    base = describe_base(event, config)
    target = describe_target(compare_to, config)
    base_type, base_year, sa1_year = base["type"], int(base["year"]), int(target["sa1_year"])

    if base_type == "CD" and base_year == 2006:
        if sa1_year not in CD_2006_TARGET_YEARS:
            raise InvalidBoundaryCombination(
                f"Invalid combination: Cannot correspond from CD 2006 to SA1 year {sa1_year}"
            )
    elif base_type == "SA1":
        if base_year > sa1_year:
            raise InvalidBoundaryCombination(
                f"Invalid combination: Cannot correspond from SA1 {base_year} to earlier SA1 year {sa1_year}"
            )
    else:
        raise InvalidBoundaryCombination(f"Invalid combination: Unsupported base geography {base_type} {base_year}")
    return base, target


def _sa1_2016_to_2021(source: BoundarySource) -> pd.DataFrame:
    table = source.load(2021, "SA1", "correspondence")
    table = keep_columns(rename_columns(table, {"RATIO_16SA1_21SA1": "RATIO_FROM_TO"}),
                         ("SA1_MAINCODE_2016", "SA1_CODE_2021", "RATIO_16SA1_21SA1"))
    return amend_maincode(table, "SA1_MAINCODE_2016")


def get_correspondence(
    base_type: str,
    base_year: int,
    target_sa1_year: int,
    source: BoundarySource,
    process: bool = True,
) -> pd.DataFrame:
    """Crosswalk from the base geography to SA1s of ``target_sa1_year``."""
    if base_type == "CD" and base_year == 2006:
        cd_2011 = rename_columns(
            source.load(2011, "SA1", "correspondence"),
            {"RATIO_06CD_11SA1": "RATIO_FROM_TO", "SA1_CODE_2011": "SA1_MAINCODE_2011"},
        )
        cd_2011 = drop_columns(cd_2011, ("SA1_7DIGITCODE_2011",))
        cd_2011 = verify_ratios(cd_2011, "RATIO_06CD_11SA1", "CD_CODE_2006", process)
        if target_sa1_year == 2011:
            return cd_2011

        sa1_2016 = rename_columns(
            source.load(2016, "SA1", "correspondence"),
            {
                "RATIO_11SA1_16SA1": "RATIO_FROM_TO",
                "SA1_CODE_2011": "SA1_MAINCODE_2011",
                "SA1_CODE_2016": "SA1_MAINCODE_2016",
            },
        )
        sa1_2016 = keep_columns(sa1_2016, ("SA1_CODE_2011", "SA1_CODE_2016", "RATIO_11SA1_16SA1"))
        cd_2016 = combine_ratios(
            cd_2011.merge(sa1_2016, on="SA1_CODE_2011", how="outer"),
            "RATIO_06CD_16SA1",
            "RATIO_06CD_11SA1",
            "RATIO_11SA1_16SA1",
            ("CD_CODE_2006", "SA1_CODE_2016"),
            process,
        )
        if target_sa1_year == 2016:
            return cd_2016

        sa1_2021 = rename_columns(_sa1_2016_to_2021(source), {"SA1_CODE_2016": "SA1_MAINCODE_2016"})
        sa1_2021 = drop_columns(sa1_2021, ("SA1_7DIGITCODE_2016",))
        return combine_ratios(
            cd_2016.merge(sa1_2021, on="SA1_CODE_2016", how="outer"),
            "RATIO_06CD_21SA1",
            "RATIO_06CD_16SA1",
            "RATIO_16SA1_21SA1",
            ("CD_CODE_2006", "SA1_CODE_2021"),
            process,
        )

    if base_type == "SA1":
        if base_year == target_sa1_year:
            sa1 = source.load(base_year, "SA1", "allocation")
            if base_year == 2021:
                return keep_columns(sa1, ("SA1_CODE_2021",)).drop_duplicates().reset_index(drop=True)
            return keep_columns(
                sa1, (f"SA1_MAINCODE_{base_year}", f"SA1_7DIGITCODE_{base_year}")
            ).drop_duplicates().reset_index(drop=True)

        if base_year == 2011:
            sa1_2016 = rename_columns(
                source.load(2016, "SA1", "correspondence"), {"RATIO_11SA1_16SA1": "RATIO_FROM_TO"}
            )
            if target_sa1_year == 2016:
                return sa1_2016
            if target_sa1_year == 2021:
                return combine_ratios(
                    sa1_2016.merge(
                        _sa1_2016_to_2021(source),
                        on=["SA1_MAINCODE_2016", "SA1_7DIGITCODE_2016"],
                        how="outer",
                    ),
                    "RATIO_11SA1_21SA1",
                    "RATIO_11SA1_16SA1",
                    "RATIO_16SA1_21SA1",
                    ("SA1_7DIGITCODE_2011", "SA1_CODE_2021"),
                    process,
                )

        if base_year == 2016 and target_sa1_year == 2021:
            return _sa1_2016_to_2021(source)

    raise InvalidBoundaryCombination(
        f"Unsupported correspondence from {base_type} {base_year} to SA1 {target_sa1_year}"
    )


def _merge_mb_allocation(
    alloc: pd.DataFrame,
    mb: pd.DataFrame,
    mb_col: str,
    area_col: str,
    sa1_cols: tuple[str, ...],
) -> pd.DataFrame:
    merged = keep_columns(mb, (mb_col, *sa1_cols)).merge(
        keep_columns(alloc, (mb_col, area_col)), on=mb_col, how="outer"
    )
    return drop_columns(merged, (mb_col,)).drop_duplicates().reset_index(drop=True)


def get_allocation_table(year: int, level: str, source: BoundarySource) -> pd.DataFrame:
    """SA1 to postal area (POA) or Commonwealth electoral division (CED) allocation."""
    alloc = source.load(year, level, "allocation")

    if level == "POA":
        if year in (2016, 2021):
            sa1_cols = ("SA1_MAINCODE_2016", "SA1_7DIGITCODE_2016") if year == 2016 else ("SA1_CODE_2021",)
            return _merge_mb_allocation(
                alloc, source.load(year, "MB", "allocation"), f"MB_CODE_{year}", f"POA_NAME_{year}", sa1_cols
            )
        return keep_columns(alloc, ("SA1_MAINCODE_2011", "POA_NAME_2011")).drop_duplicates().reset_index(drop=True)

    if level == "CED":
        if year in (2021, 2024):
            alloc = _merge_mb_allocation(
                alloc, source.load(2021, "MB", "allocation"), "MB_CODE_2021", f"CED_NAME_{year}", ("SA1_CODE_2021",)
            )
        else:
            sa1_col = "SA1_MAINCODE_2016" if year in (2016, 2018) else "SA1_MAINCODE_2011"
            alloc = keep_columns(alloc, (sa1_col, f"CED_NAME_{year}")).drop_duplicates().reset_index(drop=True)
        sa1_col = "SA1_MAINCODE_2011" if year == 2013 else "SA1_MAINCODE_2016" if year in (2016, 2018) else "SA1_CODE_2021"
        return amend_maincode(alloc, sa1_col)

    raise InvalidBoundaryCombination(f"Unsupported allocation level: {level}")


def apply_redistribution_adjustments(
    data: pd.DataFrame,
    special: str,
    source: BoundarySource,
    sa1_2021: pd.DataFrame | None = None,
) -> pd.DataFrame:
    """Overwrite ABS division names with the AEC's redistribution decisions."""
    redist_cfg = source.config["redistributions"][special]
    key, match_col, ced_col = redist_cfg["key"], redist_cfg["match_column"], redist_cfg["ced_column"]

    redist = source.load_redistribution(special)
    redist = redist.loc[redist[key].notna()].copy()
    if redist_cfg.get("title_case"):
        redist[ced_col] = redist[ced_col].str.lower().str.title()
    redist = redist.loc[redist[ced_col] != "Total"]

    if key != match_col:
        if sa1_2021 is None or key not in sa1_2021.columns:
            sa1_2021 = _sa1_2016_to_2021(source)
        bridge = keep_columns(sa1_2021, (key, match_col)).drop_duplicates()
        redist = redist.merge(bridge, on=key, how="left")
    redist = keep_columns(redist, (ced_col, match_col)).drop_duplicates()

    found = redist[match_col].isin(data[match_col])
    if not found.all():
        _warn("Some SA1s in AEC data not found in ABS data", RedistributionWarning)
        redist = redist.loc[found]

    new_names = redist.drop_duplicates(match_col, keep="last").set_index(match_col)[ced_col]
    out = data.copy()
    targets = out[match_col].isin(new_names.index)
    replacement = out.loc[targets, match_col].map(new_names)
    current = out.loc[targets, ced_col]
    changes = int((current.isna() | (current != replacement)).sum())
    out.loc[targets, ced_col] = replacement

    logger.info(f"{changes} ABS CEDs changed based on AEC redistribution data in {redist_cfg['label']}")
    return out


def _sa1_merge_keys(sa1_year: int) -> tuple[str, ...]:
    if sa1_year == 2021:
        return ("SA1_CODE_2021",)
    return (f"SA1_MAINCODE_{sa1_year}", f"SA1_7DIGITCODE_{sa1_year}")


def _merge_on_sa1(corresp: pd.DataFrame, alloc: pd.DataFrame, sa1_year: int, level: str) -> pd.DataFrame:
    if sa1_year != 2021:
        code_col, main_col = f"SA1_CODE_{sa1_year}", f"SA1_MAINCODE_{sa1_year}"
        if code_col in corresp.columns and main_col not in corresp.columns:
            corresp = corresp.rename(columns={code_col: main_col})
    keys = [name for name in _sa1_merge_keys(sa1_year) if name in corresp.columns and name in alloc.columns]
    if not keys:
        raise InvalidBoundaryCombination(
            f"Cannot join SA1 {sa1_year} correspondence to {level} allocation: no shared SA1 code column"
        )
    return corresp.merge(alloc, on=keys, how="outer")


def prepare_boundaries(
    event: str,
    compare_to: str,
    source: BoundarySource,
    process: bool = True,
) -> pd.DataFrame:
    """Crosswalk from ``event``'s boundaries to the ``compare_to`` geography.

    The combination is validated before any file is read.
    """
    base, target = validate_combination(event, compare_to, source.config)
    sa1_year = int(target["sa1_year"])
    logger.info(
        f"Preparing correspondence from {base['type']} {base['year']} ({event}) to {target['type']} ({compare_to})",
        extra={"election": event, "stage": "correspond"},
    )

    corresp = get_correspondence(base["type"], int(base["year"]), sa1_year, source, process)
    if target["type"] == "SA1":
        return corresp

    if target["type"] == "POA":
        return _merge_on_sa1(corresp, get_allocation_table(sa1_year, "POA", source), sa1_year, "POA")

    combined = _merge_on_sa1(corresp, get_allocation_table(int(target["ced_year"]), "CED", source), sa1_year, "CED")
    special = target.get("special")
    if special is not None:
        sa1_2021 = corresp if sa1_year == 2021 else None
        combined = apply_redistribution_adjustments(combined, special, source, sa1_2021)
    return combined
