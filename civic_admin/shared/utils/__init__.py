"""Shared utility functions."""

from civic_admin.shared.utils.datetime import (
    ensure_utc,
    to_datetime,
    utc_now,
)
from civic_admin.shared.utils.generators import new_document_id

__all__ = [
    "ensure_utc",
    "new_document_id",
    "to_datetime",
    "utc_now",
]
