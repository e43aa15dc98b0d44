"""Turn uploaded grade sheets into student record dicts.

Both CSV and Excel input are first read into plain row dicts keyed by the
header cells, then run through the same normalization. Headers vary between
exports, so every logical field has an ordered list of accepted spellings
and the first one carrying a value wins.
"""
import csv
import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from io import BytesIO, StringIO
from typing import Any, Iterable

import pandas as pd

from grade_api.core.errors import InvalidRowsError, ProcessingError

logger = logging.getLogger(__name__)

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "student_id": ("Student_ID", "student_id", "Student ID"),
    "student_name": ("Student_Name", "student_name", "Student Name"),
    "total_marks": ("Total_Marks", "total_marks", "Total Marks"),
    "marks_obtained": ("Marks_Obtained", "marks_obtained", "Marks Obtained"),
}


def read_csv_rows(data: bytes) -> list[dict[str, Any]]:
    try:
        content = data.decode("utf-8-sig")
        reader = csv.DictReader(StringIO(content))
        if reader.fieldnames:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
        rows = [row for row in reader if not _is_blank_row(row)]
    except (UnicodeDecodeError, csv.Error):
        logger.exception("CSV processing error")
        raise ProcessingError("Failed to process CSV file")
    return rows


# xlsx files are zip archives, legacy xls files are OLE2 compound documents
WORKBOOK_SIGNATURES = (b"PK\x03\x04", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")


def is_workbook(data: bytes) -> bool:
    return data.startswith(WORKBOOK_SIGNATURES)


def read_excel_rows(data: bytes) -> list[dict[str, Any]]:
    """Rows of the first worksheet; pandas picks openpyxl or xlrd by content.

    Browsers on Windows label plain ``.csv`` files as ``application/vnd.ms-excel``,
    so a buffer without a workbook signature is read as CSV text instead.
    """
    if not is_workbook(data):
        logger.info("Spreadsheet upload is not a workbook, reading it as CSV")
        return read_csv_rows(data)
    try:
        frame = pd.read_excel(BytesIO(data), sheet_name=0)
    except Exception:
        logger.exception("Excel processing error")
        raise ProcessingError("Failed to process Excel file")
    frame = frame.dropna(how="all")
    frame.columns = [str(col).strip() for col in frame.columns]
    return frame.to_dict(orient="records")


def compute_percentage(marks_obtained: float, total_marks: float) -> float:
    """Percentage to two places, halves rounded away from zero."""
    value = Decimal(str(marks_obtained / total_marks * 100))
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def resolve_field(row: dict[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        value = row.get(key)
        if not _is_blank(value):
            return value
    return None


def normalize_row(row: dict[str, Any]) -> dict[str, Any] | None:
    """Canonical record for one row, or None if the row cannot make one."""
    student_id = _to_text(resolve_field(row, "student_id"))
    student_name = _to_text(resolve_field(row, "student_name"))
    total_marks = _to_number(resolve_field(row, "total_marks"))
    marks_obtained = _to_number(resolve_field(row, "marks_obtained"))

    if not student_id or not student_name:
        return None
    if total_marks is None or marks_obtained is None or total_marks == 0:
        return None

    return {
        "student_id": student_id,
        "student_name": student_name,
        "total_marks": total_marks,
        "marks_obtained": marks_obtained,
        "percentage": compute_percentage(marks_obtained, total_marks),
    }


def normalize_rows(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    records = []
    rejected = []
    for number, row in enumerate(rows, start=1):
        record = normalize_row(row)
        if record is None:
            rejected.append(number)
        else:
            records.append(record)
    if rejected:
        logger.warning("Rejected %d row(s): %s", len(rejected), rejected)
        raise InvalidRowsError(rejected)
    if not records:
        raise ProcessingError("No student rows found in file")
    return records


def process_csv_file(data: bytes) -> list[dict[str, Any]]:
    return normalize_rows(read_csv_rows(data))


def process_excel_file(data: bytes) -> list[dict[str, Any]]:
    return normalize_rows(read_excel_rows(data))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _is_blank_row(row: dict[str, Any]) -> bool:
    return all(_is_blank(value) for key, value in row.items() if key is not None)


def _to_text(value: Any) -> str | None:
    if _is_blank(value):
        return None
    # Excel hands back numeric ids as floats, e.g. 1001.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _to_number(value: Any) -> float | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
