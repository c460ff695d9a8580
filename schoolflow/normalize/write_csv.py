"""
CSV writer for normalized schools.

Provides helpers to render a list of `SchoolRecord` instances as CSV
text and to save that text to a `.csv` file.  The column order is
fixed by `SCHOOL_COLUMNS` rather than derived from whichever fields
happen to be present, every field is double-quoted, and absent
optional fields are written as "Not available".  Files are written in
UTF-8.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .schema import SCHOOL_COLUMNS, SchoolRecord

logger = logging.getLogger(__name__)

CSV_NOT_AVAILABLE = "Not available"
CSV_MIME_TYPE = "text/csv;charset=utf-8"

_LINE_TERMINATOR = "\n"


def to_csv(records: Iterable[SchoolRecord]) -> str:
    """Render records as CSV text with a header row.

    Args:
        records: Iterable of `SchoolRecord` objects.

    Returns:
        The CSV document, rows separated by newlines and without a
        trailing newline.  An empty string when there are no records.
    """
    rows: List[SchoolRecord] = list(records)
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator=_LINE_TERMINATOR)
    writer.writerow([label for _, _, label in SCHOOL_COLUMNS])
    for record in rows:
        values = []
        for attr, _, _ in SCHOOL_COLUMNS:
            value = getattr(record, attr)
            values.append(CSV_NOT_AVAILABLE if value is None else str(value))
        writer.writerow(values)
    return buffer.getvalue()[: -len(_LINE_TERMINATOR)]


def export_filename(address: str) -> str:
    """Default export name for a searched address."""
    return f"schools_near_{re.sub(r'[^a-zA-Z0-9]', '_', address)}.csv"


def download(
    filename: str,
    records: Iterable[SchoolRecord],
    directory: Union[str, Path, None] = None,
) -> Optional[Path]:
    """Write records to a CSV file.

    Nothing is written when there are no records; a warning is logged
    and `None` is returned.  A `.csv` suffix is appended to `filename`
    when missing.  Characters that are unsafe in file names are the
    caller's concern.

    Args:
        filename: Target file name (or path).
        records: Iterable of `SchoolRecord` objects.
        directory: Optional directory to place the file in.

    Returns:
        Path of the written file, or `None` when nothing was written.
    """
    csv_text = to_csv(records)
    if not csv_text:
        logger.warning("No data provided to export; skipping %s", filename)
        return None
    if not filename.endswith(".csv"):
        filename = f"{filename}.csv"
    path = Path(directory) / filename if directory is not None else Path(filename)
    with open(path, "w", newline="", encoding="utf-8") as csvfile:
        csvfile.write(csv_text)
    logger.info("Wrote %d bytes of %s to %s", len(csv_text.encode("utf-8")), CSV_MIME_TYPE, path)
    return path
