"""Flat-file exports of the record view.

Both formats are written for people, in Chinese, from an already filtered
and ordered view:

- CSV: UTF-8 with BOM so spreadsheet tools detect the encoding
- TXT: one labelled block per record
"""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

import recurrence
from config import settings
from schemas import Record

CSV_HEADERS = ['姓名/标题', '日期', '类型', '倒计时(天)', '备注']
TXT_TITLE = "=== 亲友纪念日清单 ==="
TXT_SEPARATOR = "------------------------"


@dataclass(frozen=True)
class ExportFile:
    """An export ready to be downloaded or written to disk."""
    filename: str
    content: str
    media_type: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


def export_filename(extension: str, today: Optional[date] = None) -> str:
    """``<prefix>_<ISO-date>.<extension>``"""
    today = today if today is not None else date.today()
    return f"{settings.EXPORT_FILENAME_PREFIX}_{today.isoformat()}.{extension}"


def to_csv(records: Iterable[Record], today: Optional[date] = None) -> ExportFile:
    """Export records as comma-separated text.

    Every data cell is double-quoted with embedded quotes doubled. Lines
    are separated by ``\\n`` with no newline after the last one.
    """
    today = today if today is not None else date.today()
    lines = [",".join(CSV_HEADERS)]

    for r in records:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="")
        writer.writerow([
            r.title,
            r.origin_date.isoformat(),
            recurrence.category_label(r.category),
            str(recurrence.days_until_next_occurrence(r.origin_date, today)),
            r.notes or '',
        ])
        lines.append(buffer.getvalue())

    return ExportFile(
        filename=export_filename("csv", today),
        content="\ufeff" + "\n".join(lines),
        media_type="text/csv; charset=utf-8",
    )


def to_txt(records: Iterable[Record], today: Optional[date] = None) -> ExportFile:
    """Export records as a plain-text list."""
    today = today if today is not None else date.today()
    lines = [TXT_TITLE, ""]

    for r in records:
        days = recurrence.days_until_next_occurrence(r.origin_date, today)
        lines.append(f"【{r.title}】 - {recurrence.category_label(r.category)}")
        lines.append(f"日期: {r.origin_date.isoformat()} (每年 {recurrence.format_month_day(r.origin_date)})")
        lines.append(f"状态: 还有 {days} 天")
        if r.notes:
            lines.append(f"备注: {r.notes}")
        lines.append(TXT_SEPARATOR)

    return ExportFile(
        filename=export_filename("txt", today),
        content="\n".join(lines) + "\n",
        media_type="text/plain; charset=utf-8",
    )


EXPORTERS = {
    "csv": to_csv,
    "txt": to_txt,
}
