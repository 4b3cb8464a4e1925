"""CSV export/import of tasks.

Export builds a DataFrame and writes it with pandas behind a UTF-8 byte-order
mark: a header row of localized labels, then one row per task. Every text cell
is double-quoted (embedded quotes doubled); work hours are written bare. Import
uses a small single-pass parser so quoted commas and line breaks survive, then
creates one task per data row.
"""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import ValidationError

from nre_tracker.errors import CsvImportError, TrackerError
from nre_tracker.i18n import DEFAULT_LANGUAGE, labels
from nre_tracker.models import STATUS_OPTIONS, Task, TaskFormData, TaskStatus, coerce_work_hours


logger = logging.getLogger(__name__)

BOM = "\ufeff"

# (attribute, label key); work_hours is the only numeric column.
EXPORT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("name", "taskName"),
    ("task_type", "taskType"),
    ("owner", "owner"),
    ("device_type", "deviceType"),
    ("platform", "platform"),
    ("android_version", "androidVersion"),
    ("nre_number", "nreNumber"),
    ("status", "status"),
    ("start_date", "startDate"),
    ("end_date", "endDate"),
    ("work_hours", "workHours"),
    ("content", "content"),
)

MIN_IMPORT_COLUMNS = 11

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d")


def _hours_cell(hours: float):
    hours = float(hours or 0)
    return int(hours) if hours.is_integer() else hours


def tasks_to_export_df(tasks: Iterable[Task]) -> pd.DataFrame:
    """One row per task, columns in export order; work hours kept numeric."""
    attrs = [attr for attr, _key in EXPORT_COLUMNS]
    rows = []
    for task in tasks:
        row = {attr: getattr(task, attr) or "" for attr in attrs}
        row["work_hours"] = _hours_cell(task.work_hours)
        rows.append(row)
    # object dtype keeps ints as ints, so 8 is written as 8 and not 8.0
    return pd.DataFrame(rows, columns=attrs, dtype=object)


def encode_tasks(tasks: Iterable[Task], lang: str = DEFAULT_LANGUAGE) -> str:
    t = labels(lang)
    df = tasks_to_export_df(tasks)
    body = df.to_csv(
        index=False,
        header=[t[key] for _attr, key in EXPORT_COLUMNS],
        quoting=csv.QUOTE_NONNUMERIC,
        lineterminator="\n",
    )
    return BOM + body


def encode_tasks_bytes(tasks: Iterable[Task], lang: str = DEFAULT_LANGUAGE) -> bytes:
    return encode_tasks(tasks, lang).encode("utf-8")


def parse_csv(text: str) -> List[List[str]]:
    """Split CSV text into rows of fields.

    - fields are comma separated and may be wrapped in double quotes;
    - inside quotes, commas and line breaks are literal and ``""`` is one quote;
    - an unquoted ``\\n``, ``\\r\\n`` or lone ``\\r`` ends the row;
    - a last row without a trailing line break is kept.
    """
    if text.startswith(BOM):
        text = text[1:]

    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if in_quotes:
            if c == '"':
                if i + 1 < n and text[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(c)
        elif c == '"':
            in_quotes = True
        elif c == ",":
            row.append("".join(field))
            field = []
        elif c in ("\n", "\r"):
            row.append("".join(field))
            field = []
            rows.append(row)
            row = []
            if c == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            field.append(c)
        i += 1

    if field or row:
        row.append("".join(field))
        rows.append(row)
    return rows


def _normalize_date(raw: str) -> str:
    raw = (raw or "").strip()
    if not raw:
        return ""
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    raise ValueError(f"unrecognised date {raw!r}")


def _normalize_status(raw: str) -> str:
    raw = (raw or "").strip()
    return raw if raw in STATUS_OPTIONS else TaskStatus.PENDING.value


def _hours_or_zero(raw: str) -> float:
    try:
        return coerce_work_hours(raw)
    except ValueError:
        return 0.0


def row_to_form(row: Sequence[str]) -> TaskFormData:
    """Map one data row (11 or 12 columns) onto form data; raises ValueError."""
    if len(row) < MIN_IMPORT_COLUMNS:
        raise ValueError(f"expected at least {MIN_IMPORT_COLUMNS} columns, got {len(row)}")
    return TaskFormData(
        name=row[0],
        task_type=row[1],
        owner=row[2],
        device_type=row[3],
        platform=row[4],
        android_version=row[5],
        nre_number=row[6],
        status=_normalize_status(row[7]),
        start_date=_normalize_date(row[8]),
        end_date=_normalize_date(row[9]),
        work_hours=_hours_or_zero(row[10]),
        content=row[11] if len(row) > 11 else "",
    )


@dataclass
class DecodedRows:
    forms: List[TaskFormData]
    skipped: int


def decode_rows(text: str) -> DecodedRows:
    """Parse CSV text, drop the header row and malformed rows."""
    rows = parse_csv(text)
    forms: List[TaskFormData] = []
    skipped = 0
    for line_no, row in enumerate(rows[1:], start=2):
        try:
            forms.append(row_to_form(row))
        except (ValueError, ValidationError) as exc:
            skipped += 1
            logger.debug("Skipping CSV row %d: %s", line_no, exc)
    return DecodedRows(forms=forms, skipped=skipped)


def decode_tasks(text: str) -> List[TaskFormData]:
    return decode_rows(text).forms


@dataclass(frozen=True)
class ImportResult:
    created: int
    skipped: int


def import_csv(service, text: str) -> ImportResult:
    """Create one task per valid row, in file order, one request at a time.

    The first failing create stops the import. Tasks created before it are
    kept; the raised CsvImportError reports how many.
    """
    decoded = decode_rows(text)
    created = 0
    for idx, form in enumerate(decoded.forms, start=1):
        try:
            service.create(form)
        except (TrackerError, ValidationError) as exc:
            logger.error("CSV import aborted at data row %d after %d created: %s", idx, created, exc)
            raise CsvImportError(f"Import failed at row {idx}: {exc}", created=created, row_number=idx) from exc
        created += 1
    logger.info("CSV import finished: %d created, %d skipped", created, decoded.skipped)
    return ImportResult(created=created, skipped=decoded.skipped)


# --- export selection -------------------------------------------------------


def unique_years(tasks: Iterable[Task]) -> List[str]:
    years = {t.start_date.split("-")[0] for t in tasks if t.start_date}
    return sorted(years, reverse=True)


def select_for_export(tasks: Iterable[Task], by: str, value: str) -> List[Task]:
    if by == "year":
        return [t for t in tasks if t.start_date.startswith(value)]
    if by == "owner":
        return [t for t in tasks if t.owner == value]
    raise ValueError(f"unknown export criterion {by!r}")


def export_filename(value: Optional[str]) -> str:
    if not value:
        return "tasks_export.csv"
    return f"tasks_{value}.csv"
