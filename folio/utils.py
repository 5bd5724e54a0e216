# folio/utils.py
import math
import re
import unicodedata
from datetime import date, datetime
from typing import Union

# Reading Time (words per minute)
WORDS_PER_MINUTE = 200


def calculate_reading_time(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimate reading time in whole minutes (at least one)."""
    words = len(content.split())
    return max(1, math.ceil(words / words_per_minute))


def generate_slug(name: str) -> str:
    """Convert a title to URL-safe slug.

    Accented letters are folded to ASCII. Characters with no ASCII form are
    dropped, so the result may be empty.
    """
    slug = unicodedata.normalize('NFKD', name).encode('ascii', 'ignore').decode('ascii')
    slug = slug.lower().strip()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'[\s_]+', '-', slug)
    slug = re.sub(r'-{2,}', '-', slug)
    return slug.strip('-')


def format_date(value: Union[date, datetime], style: str = 'full') -> str:
    """Format a date for display: 'full' (January 15, 2024), 'short' (Jan 15, 2024) or 'month'."""
    if style == 'short':
        return f"{value.strftime('%b')} {value.day}, {value.year}"
    if style == 'month':
        return value.strftime('%B %Y')
    return f"{value.strftime('%B')} {value.day}, {value.year}"
