"""Configuration loading and event selection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from ausvotes.common.errors import ConfigError
from ausvotes.common.fs import read_yaml
from ausvotes.common.schema import validate_boundaries_config, validate_events_config
from ausvotes.common.time_utils import validate_date_range


@dataclass(frozen=True)
class ConfigBundle:
    events: list[dict]
    boundaries: dict

    def event(self, name: str) -> dict:
        for item in self.events:
            if item["event"] == name:
                return item
        raise ConfigError(f"Unknown event: {name}")


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def overlay_for(name: str) -> Path | None:
        if overlay_config_dir is None:
            return None
        return overlay_config_dir / name

    events = validate_events_config(
        _load_yaml_with_overlay(config_dir / "events.yml", overlay_for("events.yml")),
        allow_unknown=allow_unknown,
    )
    boundaries = validate_boundaries_config(
        _load_yaml_with_overlay(config_dir / "boundaries.yml", overlay_for("boundaries.yml")),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(events=events, boundaries=boundaries)


def select_events(
    events: list[dict],
    date_range: dict | None = None,
    event_type: str | None = None,
) -> list[dict]:
    """Events within ``date_range`` (inclusive) and of ``event_type``, oldest first."""
    selected = list(events)
    if date_range is not None:
        start, end = validate_date_range(date_range)
        selected = [item for item in selected if start <= date.fromisoformat(item["date"]) <= end]
    if event_type is not None:
        selected = [item for item in selected if item["type"] == event_type]
    return sorted(selected, key=lambda item: item["date"])
