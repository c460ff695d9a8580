# normalize/schema.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# (attribute, JSON key emitted by the model, CSV header label)
SCHOOL_COLUMNS: List[Tuple[str, str, str]] = [
    ("name", "name", "Name"),
    ("address", "address", "Address"),
    ("type", "type", "Type"),
    ("student_count", "studentCount", "Student Count"),
    ("phone_number", "phoneNumber", "Phone Number"),
    ("principal_name", "principalName", "Principal Name"),
    ("assistant_name", "assistantName", "Assistant Name"),
    ("manager_email", "managerEmail", "Manager Email"),
    ("assistant_email", "assistantEmail", "Assistant Email"),
]

REQUIRED_FIELDS = SCHOOL_COLUMNS[:4]
OPTIONAL_FIELDS = SCHOOL_COLUMNS[4:]


@dataclass(frozen=True)
class SchoolRecord:
    name: str
    address: str
    type: str                          # 'Elementary School' | 'High School' | ...
    student_count: int
    phone_number: Optional[str] = None
    principal_name: Optional[str] = None
    assistant_name: Optional[str] = None   # e.g. assistant principal
    manager_email: Optional[str] = None    # school office / manager
    assistant_email: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        """Return the camelCase JSON shape, omitting absent optional fields."""
        out: Dict[str, object] = {}
        for attr, key, _ in SCHOOL_COLUMNS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out
