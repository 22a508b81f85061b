#!/usr/bin/env python3
"""
Date extraction from file paths

A date is looked up in every path segment, starting from the filename and
walking up towards the root. Each segment is tested against the matchers in
DATE_MATCHERS, in order; the first valid date wins.

Supported segment prefixes (the date must start the segment and be followed
by a single whitespace character or underscore):
- '2022-03-15 Trip'    -> 2022-03-15
- '2022-03_Holidays'   -> 2022-03-01
- '2022 Family'        -> 2022-01-01

Usage:
    parse_date_from_path('/photos/2022-03-15 trip/IMG_001.jpg')  # date(2022, 3, 15)
"""

import os
import re
import calendar
from datetime import date
from typing import Callable, List, Optional

MIN_YEAR = 1900
MAX_YEAR = 2100

FULL_DATE_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})[\s_]')
YEAR_MONTH_PATTERN = re.compile(r'^(\d{4})-(\d{2})[\s_]')
YEAR_PATTERN = re.compile(r'^(\d{4})[\s_]')


def is_valid_year(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Checks that year/month/day form a real calendar date within the supported year range"""
    if not is_valid_year(year):
        return False
    if month < 1 or month > 12:
        return False
    if day < 1 or day > calendar.monthrange(year, month)[1]:
        return False
    return True


def match_full_date(text: str) -> Optional[date]:
    """'YYYY-MM-DD ' or 'YYYY-MM-DD_' at the start of text"""
    match = FULL_DATE_PATTERN.match(text)
    if not match:
        return None
    year, month, day = (int(group) for group in match.groups())
    if not is_valid_date(year, month, day):
        return None
    return date(year, month, day)


def match_year_month(text: str) -> Optional[date]:
    """'YYYY-MM ' or 'YYYY-MM_' at the start of text, day defaults to 1"""
    match = YEAR_MONTH_PATTERN.match(text)
    if not match:
        return None
    year, month = (int(group) for group in match.groups())
    if not is_valid_date(year, month, 1):
        return None
    return date(year, month, 1)


def match_year(text: str) -> Optional[date]:
    """'YYYY ' or 'YYYY_' at the start of text, month and day default to 1"""
    match = YEAR_PATTERN.match(text)
    if not match:
        return None
    year = int(match.group(1))
    if not is_valid_year(year):
        return None
    return date(year, 1, 1)


# Most specific first; a matcher that fails validation falls through to the next one
DATE_MATCHERS: List[Callable[[str], Optional[date]]] = [
    match_full_date,
    match_year_month,
    match_year,
]


def parse_date_from_text(text: str) -> Optional[date]:
    """
    Extracts a date from the beginning of a single path segment

    Returns:
        date if one of DATE_MATCHERS succeeds, None otherwise
    """
    if not text or not text.strip():
        return None

    for matcher in DATE_MATCHERS:
        parsed = matcher(text)
        if parsed is not None:
            return parsed

    return None


def split_path_segments(file_path) -> List[str]:
    """Splits a path on '/' and on the platform's separators, keeping empty segments"""
    separators = {'/', os.sep}
    if os.altsep:
        separators.add(os.altsep)
    pattern = '|'.join(re.escape(sep) for sep in sorted(separators))
    return re.split(pattern, str(file_path))


def parse_date_from_path(file_path) -> Optional[date]:
    """
    Extract date from a file path, filename first, then parent directories up to the root

    Returns:
        date from the most specific segment that has one, None if no segment does
    """
    for segment in reversed(split_path_segments(file_path)):
        parsed = parse_date_from_text(segment)
        if parsed is not None:
            return parsed

    return None
