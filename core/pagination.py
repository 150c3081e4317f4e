"""
Opaque pagination cursors.

A cursor is the urlsafe base64 encoding of the id of the last record on a
page. It carries no ordering information: the store re-resolves the record
and resumes right after its position in the query's own sort order.

Only the store boundary encodes and decodes cursors; callers pass them
through untouched.
"""

import base64
import binascii
from typing import NewType, Optional

Cursor = NewType("Cursor", str)


def encode_cursor(record_id: str) -> Cursor:
    """Encode a record id into an opaque cursor."""
    return Cursor(base64.urlsafe_b64encode(record_id.encode("utf-8")).decode("ascii"))


def decode_cursor(cursor: str) -> Optional[str]:
    """
    Decode a cursor back into a record id.

    Returns None for anything that is not a cursor we issued, so callers
    can treat garbage the same way as a cursor whose record is gone.
    """
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None
    return decoded or None
