"""
Search session state.

Holds what one user interaction works with: the address last
searched, the records currently shown and the message of the last
error.  A new search discards the previous records before calling the
model, so an inconsistent table is never shown.  Export problems are
reported through `error` but leave the fetched records in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .errors import SchoolDataError
from .normalize.schema import SchoolRecord
from .normalize.write_csv import download, export_filename
from .search.fetch import fetch_schools_near_address
from .search.llm_providers import LLMProvider

logger = logging.getLogger(__name__)

NO_DATA_TO_EXPORT = "No school data available to export."


class SearchSession:
    """One user's search-and-export workflow."""

    def __init__(self, provider: LLMProvider, strict: bool = False, min_count: int = 10, max_count: int = 15) -> None:
        self.provider = provider
        self.strict = strict
        self.min_count = min_count
        self.max_count = max_count
        self.records: List[SchoolRecord] = []
        self.address: str = ""
        self.error: Optional[str] = None

    def search(self, address: str) -> List[SchoolRecord]:
        """Replace the current records with schools near `address`.

        On failure `records` is left empty and `error` holds the message.
        """
        self.records = []
        self.error = None
        if not address or not address.strip():
            self.address = ""
            self.error = "Please enter an address."
            return self.records
        self.address = address
        try:
            self.records = fetch_schools_near_address(
                address,
                self.provider,
                strict=self.strict,
                min_count=self.min_count,
                max_count=self.max_count,
            )
        except SchoolDataError as exc:
            logger.error("Search for %r failed: %s", address, exc)
            self.error = str(exc)
        return self.records

    def export(
        self,
        filename: Optional[str] = None,
        directory: Union[str, Path, None] = None,
    ) -> Optional[Path]:
        """Save the current records as CSV.

        Returns the written path, or `None` when there was nothing to
        export or the file could not be written.  In both cases `error`
        is set and `records` kept.
        """
        if not self.records:
            self.error = NO_DATA_TO_EXPORT
            return None
        try:
            path = download(filename or export_filename(self.address), self.records, directory)
        except OSError as exc:
            logger.error("CSV export error: %s", exc)
            self.error = f"Failed to export CSV. {exc}"
            return None
        self.error = None
        return path
