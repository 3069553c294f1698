"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from ausvotes.common.constants import (
    BOUNDARY_KINDS,
    BOUNDARY_LEVELS,
    BOUNDARY_REF_DATE_MAX,
    BOUNDARY_REF_DATE_MIN,
    COMPARISON_TYPES,
    EVENT_TYPES,
)
from ausvotes.common.errors import ConfigError
from ausvotes.common.time_utils import parse_iso_date


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_empty_list(value, ctx: str) -> None:
    if not isinstance(value, list) or not value:
        raise ConfigError(f"{ctx} must be a non-empty list")


def validate_events_config(cfg: dict, *, allow_unknown: bool = False) -> list[dict]:
    _assert_required_keys(cfg, {"events"}, "events config")
    _assert_no_unknown_keys(cfg, {"events"}, "events config", allow_unknown)
    _assert_non_empty_list(cfg["events"], "events")

    events: list[dict] = []
    for idx, item in enumerate(cfg["events"]):
        ctx = f"events[{idx}]"
        _assert_required_keys(item, {"event", "date", "type"}, ctx)
        _assert_no_unknown_keys(item, {"event", "date", "type"}, ctx, allow_unknown)
        if item["type"] not in EVENT_TYPES:
            raise ConfigError(f"{ctx}.type must be one of: {', '.join(EVENT_TYPES)}")
        events.append(
            {
                "event": str(item["event"]),
                "date": parse_iso_date(item["date"], f"{ctx}.date").isoformat(),
                "type": item["type"],
            }
        )

    names = [item["event"] for item in events]
    dupes = {name for name in names if names.count(name) > 1}
    if dupes:
        raise ConfigError(f"Duplicate events: {', '.join(sorted(dupes))}")
    return events


def _validate_event_base(cfg: dict) -> None:
    for name, base in cfg.items():
        ctx = f"event_base[{name}]"
        _assert_required_keys(base, {"type", "year"}, ctx)
        if base["type"] not in ("CD", "SA1"):
            raise ConfigError(f"{ctx}.type must be CD or SA1")


def _validate_comparison_target(cfg: dict, redistributions: dict) -> None:
    for name, target in cfg.items():
        ctx = f"comparison_target[{name}]"
        _assert_required_keys(target, {"sa1_year", "type"}, ctx)
        _assert_no_unknown_keys(target, {"sa1_year", "type", "ced_year", "special"}, ctx, False)
        if target["type"] not in COMPARISON_TYPES:
            raise ConfigError(f"{ctx}.type must be one of: {', '.join(COMPARISON_TYPES)}")
        if target["type"] == "CED" and "ced_year" not in target:
            raise ConfigError(f"Missing keys in {ctx}: ced_year")
        special = target.get("special")
        if special is not None and special not in redistributions:
            raise ConfigError(f"{ctx}.special refers to unknown redistribution: {special}")


def _validate_sources(sources: list) -> None:
    for idx, item in enumerate(sources):
        ctx = f"sources[{idx}]"
        _assert_required_keys(item, {"ref_date", "level", "type", "source"}, ctx)
        if not BOUNDARY_REF_DATE_MIN <= int(item["ref_date"]) <= BOUNDARY_REF_DATE_MAX:
            raise ConfigError(f"{ctx}.ref_date must be between {BOUNDARY_REF_DATE_MIN} and {BOUNDARY_REF_DATE_MAX}")
        if item["level"] not in BOUNDARY_LEVELS:
            raise ConfigError(f"{ctx}.level must be one of: {', '.join(BOUNDARY_LEVELS)}")
        if item["type"] not in BOUNDARY_KINDS:
            raise ConfigError(f"{ctx}.type must be one of: {', '.join(BOUNDARY_KINDS)}")


def _validate_redistributions(cfg: dict) -> None:
    for name, redist in cfg.items():
        ctx = f"redistributions[{name}]"
        _assert_required_keys(redist, {"label", "key", "match_column", "ced_column", "files"}, ctx)
        _assert_non_empty_list(redist["files"], f"{ctx}.files")
        for idx, item in enumerate(redist["files"]):
            _assert_required_keys(item, {"source", "sa1_column", "ced_column"}, f"{ctx}.files[{idx}]")


def validate_boundaries_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"event_base", "comparison_target", "sources", "redistributions"}
    _assert_required_keys(cfg, top_required, "boundaries config")
    _assert_no_unknown_keys(cfg, top_required, "boundaries config", allow_unknown)
    _assert_non_empty_list(cfg["sources"], "sources")

    _validate_redistributions(cfg["redistributions"])
    _validate_event_base(cfg["event_base"])
    _validate_comparison_target(cfg["comparison_target"], cfg["redistributions"])
    _validate_sources(cfg["sources"])
    return cfg
