"""
ID generation utilities for QuickNotes.

Notes: note_<32 hex characters>
"""

from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is the full 32-character uuid4 hex
    """
    return f"note_{uuid4().hex}"
