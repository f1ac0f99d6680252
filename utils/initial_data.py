"""Utility for importing the initial country table from a spreadsheet.

The workbook (``.xlsx``) or ``.csv`` file needs ``Code`` and ``Name``
columns and may carry ``Internet Users`` and ``Adult Literacy Rate``.
Header spelling is forgiving: case, spaces and underscores are ignored.
Every row goes through the same validation as the API before it is saved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from config import settings
from middleware.errors import DuplicateKeyError, ValidationError
from services import country_service

logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    "code": "code",
    "countrycode": "code",
    "name": "name",
    "country": "name",
    "countryname": "name",
    "internetusers": "internet_users",
    "adultliteracyrate": "adult_literacy_rate",
    "literacyrate": "adult_literacy_rate",
}
REQUIRED_COLUMNS = {"code", "name"}


@dataclass
class ImportSummary:
    imported: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def _column_key(label: Any) -> str:
    return re.sub(r"[^a-z]", "", str(label).lower())


def _normalize_cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def rows_from_frame(df: pd.DataFrame) -> List[Dict[str, Optional[str]]]:
    """Map spreadsheet columns onto form fields, one dict per row."""
    mapping: Dict[Any, str] = {}
    for column in df.columns:
        target = COLUMN_ALIASES.get(_column_key(column))
        if target and target not in mapping.values():
            mapping[column] = target

    missing = REQUIRED_COLUMNS - set(mapping.values())
    if missing:
        raise ValueError(f"Missing required column(s): {', '.join(sorted(missing))}")

    frame = df[list(mapping)].rename(columns=mapping)
    return [
        {key: _normalize_cell(value) for key, value in record.items()}
        for record in frame.to_dict(orient="records")
    ]


def read_country_rows(path: str | Path) -> List[Dict[str, Optional[str]]]:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        df = pd.read_excel(path, engine="openpyxl", dtype=object)
    elif suffix == ".csv":
        df = pd.read_csv(path, dtype=str)
    else:
        raise ValueError(f"Unsupported seed file type: {path.suffix}")
    return rows_from_frame(df)


def import_countries(rows: Iterable[Dict[str, Any]]) -> ImportSummary:
    """Validate and save each row; invalid rows and existing codes are skipped."""
    summary = ImportSummary()
    for index, row in enumerate(rows, start=1):
        try:
            country_service.create_from_form(row)
        except ValidationError as exc:
            summary.skipped += 1
            summary.errors.append(f"Row {index} ({row.get('code')}): {'; '.join(exc.errors)}")
            continue
        except DuplicateKeyError:
            summary.skipped += 1
            continue
        summary.imported += 1
    return summary


def check_and_import_data() -> Optional[ImportSummary]:
    """Seed the collection from COUNTRY_SEED_FILE when it is still empty."""
    seed_file = settings.COUNTRY_SEED_FILE
    if not seed_file:
        return None

    if country_service.count() > 0:
        logger.info("Countries already present; skipping import from %s", seed_file)
        return None

    summary = import_countries(read_country_rows(seed_file))
    logger.info(
        "Imported %d countries from %s (%d skipped)",
        summary.imported,
        seed_file,
        summary.skipped,
    )
    for error in summary.errors:
        logger.warning("Seed row rejected: %s", error)
    return summary
