"""
Normalization subsystem for SchoolRadar.

This package converts raw generative-model replies into structured
`SchoolRecord` instances and writes them to CSV.  The record layout
and CSV column order are defined in `schema.py`.
"""

from .schema import SchoolRecord  # noqa: F401
from .parse_response import normalize, parse_schools  # noqa: F401
from .write_csv import download, to_csv  # noqa: F401
