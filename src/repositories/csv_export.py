"""CSV projection of callback requests for spreadsheet tools."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from src.schemas.callback import CallbackRequest

CSV_HEADERS = [
    "ID",
    "Date",
    "Name",
    "Phone",
    "Email",
    "ProductType",
    "Comment",
    "Status",
    "FileName",
]

# Excel needs the BOM to read UTF-8 Cyrillic correctly
BOM = "\ufeff"


def format_ru_datetime(value: datetime, tz: ZoneInfo) -> str:
    """``DD.MM.YYYY, HH:MM:SS`` — the ru-RU locale rendering."""
    return value.astimezone(tz).strftime("%d.%m.%Y, %H:%M:%S")


def flatten_comment(comment: str) -> str:
    """Newlines become spaces and commas become semicolons."""
    return comment.replace("\r\n", " ").replace("\n", " ").replace(",", ";")


def render_callbacks_csv(
    records: Iterable[CallbackRequest], display_timezone: str = "Europe/Moscow"
) -> str:
    """Render records as a BOM-prefixed CSV document, every data cell quoted."""
    tz = ZoneInfo(display_timezone)
    rows = io.StringIO()
    writer = csv.writer(rows, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for record in records:
        writer.writerow([
            record.id,
            format_ru_datetime(record.date, tz),
            record.name,
            record.phone,
            record.email or "",
            record.product_type or "",
            flatten_comment(record.comment or ""),
            record.status.value if record.status else "new",
            record.file_name or "",
        ])

    lines = [",".join(CSV_HEADERS)]
    body = rows.getvalue()
    if body:
        lines.append(body[:-1])
    return BOM + "\n".join(lines)
