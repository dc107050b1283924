"""General helper functions used across the application."""

from __future__ import annotations

import time
import uuid


def new_identifier() -> str:
    """Return a fresh random identifier in canonical 36 character form."""
    return str(uuid.uuid4())


def now_millis() -> int:
    """Return the current epoch time in milliseconds."""
    return int(time.time() * 1000)

