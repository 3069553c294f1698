"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from ausvotes.common.fs import write_json
from ausvotes.common.time_utils import utc_timestamp_iso


def table_report(name: str, table: pd.DataFrame, path: Path | None = None) -> dict:
    missing = table.isna().sum()
    report = {
        "name": name,
        "rows": int(len(table)),
        "columns": [str(column) for column in table.columns],
        "missing": {str(column): int(count) for column, count in missing.items() if count},
    }
    if path is not None:
        report["path"] = str(path)
    if "event" in table.columns:
        report["events"] = sorted(str(value) for value in table["event"].dropna().unique())
    return report


def write_run_summary(
    data_dir: Path,
    *,
    run_id: str,
    command: str,
    status: str,
    outputs: list[dict],
    errors: list[dict] | None = None,
) -> Path:
    errors = errors or []
    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    payload = {
        "run_id": run_id,
        "command": command,
        "generated_at": utc_timestamp_iso(),
        "status": status,
        "outputs": outputs,
        "totals": {
            "outputs": len(outputs),
            "rows": sum(item.get("rows", 0) for item in outputs),
            "errors": len(errors),
        },
        "errors": errors,
    }
    write_json(summary_path, payload)
    return summary_path
