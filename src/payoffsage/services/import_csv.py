"""CSV ingestion of debts and one-time fundings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.debt import DebtRecord
from ..models.funding import OneTimeFunding

logger = logging.getLogger(__name__)

DEBT_REQUIRED_COLUMNS = ("name", "balance", "interest_rate", "minimum_payment")
FUNDING_REQUIRED_COLUMNS = ("payment_date", "amount")


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, skipinitialspace=True)
    frame.columns = [str(c).strip().lower().replace(" ", "_") for c in frame.columns]
    return frame


def _require_columns(frame: pd.DataFrame, required: tuple[str, ...], file_path: Path) -> None:
    missing = [column for column in required if column not in frame.columns]
    if missing:
        raise ValueError(f"{file_path.name} is missing required column(s): {', '.join(missing)}")


def _records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    # Blank cells become None so optional fields keep their defaults
    cleaned = frame.astype(object).where(frame.notna(), None)
    rows = []
    for row in cleaned.to_dict(orient="records"):
        rows.append({key: value for key, value in row.items() if value is not None})
    return rows


def load_debts(path: Path | str, *, encoding: str = "utf-8") -> list[DebtRecord]:
    """Read debts from CSV; rows without an ``id`` column get ``debt-<row>`` ids."""

    file_path = Path(path)
    frame = normalize_frame(file_path=file_path, encoding=encoding)
    _require_columns(frame, DEBT_REQUIRED_COLUMNS, file_path)

    debts: list[DebtRecord] = []
    for index, row in enumerate(_records(frame), start=1):
        row["id"] = str(row.get("id", f"debt-{index}"))
        row["name"] = str(row.get("name", ""))
        debts.append(DebtRecord.model_validate(row))
    logger.info("Loaded %s debt(s) from %s", len(debts), file_path)
    return debts


def load_fundings(path: Path | str, *, encoding: str = "utf-8") -> list[OneTimeFunding]:
    """Read one-time fundings (``payment_date``, ``amount``, optional ``notes``)."""

    file_path = Path(path)
    frame = normalize_frame(file_path=file_path, encoding=encoding)
    _require_columns(frame, FUNDING_REQUIRED_COLUMNS, file_path)

    fundings: list[OneTimeFunding] = []
    for row in _records(frame):
        if "id" in row:
            row["id"] = str(row["id"])
        fundings.append(OneTimeFunding.model_validate(row))
    logger.info("Loaded %s funding(s) from %s", len(fundings), file_path)
    return fundings


__all__ = ["load_debts", "load_fundings", "normalize_frame"]
