"""CSV export helpers for timelines and amortization ledgers."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Iterable

from .amortization import AmortizationEntry
from .timeline import TimelineDataPoint

TIMELINE_HEADERS = [
    "month",
    "date",
    "month_label",
    "baseline_balance",
    "accelerated_balance",
    "baseline_interest",
    "accelerated_interest",
    "one_time_payment",
]

AMORTIZATION_HEADERS = [
    "month",
    "date",
    "starting_balance",
    "payment",
    "principal",
    "interest",
    "ending_balance",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def _write_rows(output_path: Path, headers: list[str], rows: Iterable[object]) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in rows:
            writer.writerow({name: _serialize_value(getattr(row, name, None)) for name in headers})

    return output_path


def export_timeline_csv(*, points: Iterable[TimelineDataPoint], output_path: Path) -> Path:
    """Write timeline points to CSV at `output_path` and return the path."""

    return _write_rows(output_path, TIMELINE_HEADERS, points)


def export_amortization_csv(*, rows: Iterable[AmortizationEntry], output_path: Path) -> Path:
    """Write one debt's amortization ledger to CSV at `output_path`."""

    return _write_rows(output_path, AMORTIZATION_HEADERS, rows)


__all__ = ["export_amortization_csv", "export_timeline_csv"]
