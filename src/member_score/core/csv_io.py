"""CSV reading and writing for member score uploads and exports.

Upload format (header required, column order free, extra columns ignored):
    email, score
"""

from __future__ import annotations

import csv
import logging
from io import StringIO
from typing import Iterable

from pydantic import ValidationError

from .models import MemberScoreEntry

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("email", "score")


class CSVImportError(Exception):
    """Raised when an uploaded CSV cannot be read at all."""
    pass


def parse_member_rows(text: str) -> list[dict[str, str]]:
    """Read an uploaded CSV into row dicts keyed by lowercased header.

    Blank lines are dropped. Only the required columns are kept.

    Raises:
        CSVImportError: If the file is empty, malformed, or a required column
            is missing.
    """
    if not text or not text.strip():
        raise CSVImportError("Uploaded file is empty")

    try:
        return _read_rows(csv.reader(StringIO(text.lstrip("\ufeff"))))
    except csv.Error as exc:
        raise CSVImportError(f"Malformed CSV: {exc}") from exc


def _read_rows(reader) -> list[dict[str, str]]:
    try:
        header = next(reader)
    except StopIteration:
        raise CSVImportError("Uploaded file has no header row")

    columns = [h.strip().lower() for h in header]
    missing = [c for c in CSV_COLUMNS if c not in columns]
    if missing:
        raise CSVImportError(f"Missing required column(s): {', '.join(missing)}")

    positions = {c: columns.index(c) for c in CSV_COLUMNS}
    rows = []
    for record in reader:
        if not any(cell.strip() for cell in record):
            continue
        rows.append({
            c: record[i].strip() if i < len(record) else ""
            for c, i in positions.items()
        })
    return rows


def chunk_rows(rows: list[dict[str, str]], size: int) -> list[list[dict[str, str]]]:
    """Split rows into consecutive batches of at most `size` rows."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    return [rows[i:i + size] for i in range(0, len(rows), size)]


def to_entries(rows: Iterable[dict[str, str]]) -> tuple[list[MemberScoreEntry], int]:
    """Coerce row dicts into entries.

    Returns (entries, skipped) where skipped counts rows that did not coerce.
    """
    entries = []
    skipped = 0
    for row in rows:
        try:
            entries.append(MemberScoreEntry(email=row.get("email", ""), score=row.get("score", "")))
        except ValidationError as exc:
            skipped += 1
            logger.debug("Skipping row %r: %s", row, exc.errors()[0]["msg"])
    return entries, skipped


def write_member_csv(entries: Iterable[MemberScoreEntry]) -> str:
    """Render entries as CSV text with an email,score header."""
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for entry in entries:
        writer.writerow([entry.email, _format_score(entry.score)])
    return buffer.getvalue()


def _format_score(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else repr(float(score))
