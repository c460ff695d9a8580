"""Prompt construction for the school search."""

from __future__ import annotations

import json

EXAMPLE_SCHOOL = {
    "name": "Example School Name",
    "address": "123 Fictional Street, Anytown, USA",
    "type": "Example Type",
    "studentCount": 500,
    "phoneNumber": "555-010-0001",
    "principalName": "Ms. Eleanor Vance",
    "assistantName": "Mr. David Lee",
    "managerEmail": "admin@exampleschool.org",
    "assistantEmail": "d.lee@exampleschool.org",
}


def build_school_prompt(address: str, min_count: int = 10, max_count: int = 15) -> str:
    """Create the instruction asking for a JSON array of fictional schools."""
    example = json.dumps(EXAMPLE_SCHOOL, indent=2)
    return f"""
Given the address "{address}", please generate a list of around {min_count} to {max_count} fictional schools that could be located nearby.
For each school, provide the following details:
- name: The fictional name of the school (e.g., "Sunnyvale Elementary", "Northwood High Academy").
- address: A plausible fictional street address. It doesn't need to be hyper-local to the input address, just a general fictional address.
- type: The type of school (e.g., "Elementary School", "Middle School", "High School", "K-12 School", "Charter School").
- studentCount: A fictional number of students enrolled (e.g., between 100 and 3000).
- phoneNumber: A fictional phone number for the school (e.g., "555-123-4567"). If not available, omit or set to null.
- principalName: A fictional name for the school principal (e.g., "Dr. Jane Doe"). If not available, omit or set to null.
- assistantName: A fictional name for the assistant principal or key administrative staff (e.g., "Mr. John Smith"). If not available, omit or set to null.
- managerEmail: A fictional email address for the school office or manager (e.g., "office@exampleschool.edu"). If not available, omit or set to null.
- assistantEmail: A fictional email address for the assistant (e.g., "jsmith@exampleschool.edu"). If not available, omit or set to null.

Return the information as a JSON array of objects, where each object represents a school.
Example format for a single school object:
{example}

IMPORTANT: Return ONLY the JSON array, without any other text, comments, or explanations. The JSON must be strictly valid.
"""
