from __future__ import annotations

import csv
import io
from typing import Iterable, List, Tuple

from safetyhalo.domain.models import LogEntry

CSV_HEADER = ("Timestamp", "ML State", "AI Assessment", "Sensor Snapshot")

CsvRow = Tuple[str, str, str, str]


def log_entry_row(entry: LogEntry) -> CsvRow:
    return (entry.timestamp, entry.ml_state.value, entry.status.value, entry.sensor_summary)


def export_log_csv(entries: Iterable[LogEntry]) -> str:
    """
    Render log entries as CSV text.

    Every field is double-quoted and embedded quotes are doubled.

    Parameters
    ----------
    entries
        Entries in the order they should appear (newest first for the log).

    Returns
    -------
    str
        Header line followed by one line per entry.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in entries:
        writer.writerow(log_entry_row(entry))
    return buf.getvalue()


def parse_log_csv(text: str) -> List[CsvRow]:
    """
    Parse CSV produced by :func:`export_log_csv` back into rows.

    Raises
    ------
    ValueError
        If the header does not match or a row has the wrong number of fields.
    """
    reader = csv.reader(io.StringIO(text))
    rows = list(reader)
    if not rows or tuple(rows[0]) != CSV_HEADER:
        raise ValueError("Missing or unexpected CSV header")

    out: List[CsvRow] = []
    for row in rows[1:]:
        if len(row) != len(CSV_HEADER):
            raise ValueError(f"Expected {len(CSV_HEADER)} fields, got {len(row)}")
        out.append((row[0], row[1], row[2], row[3]))
    return out
