"""Helper utility functions."""

import re
from datetime import datetime, date

NUMBER_PATTERN = re.compile(r'(\d+(\.\d+)?)')


def extract_number(text: str) -> float:
    """Extract the first decimal number in a piece of text.

    Returns 0 when the text holds no number.
    """
    match = NUMBER_PATTERN.search(text or "")
    return float(match.group(1)) if match else 0.0


def today() -> date:
    """Current UTC calendar day."""
    return datetime.utcnow().date()
