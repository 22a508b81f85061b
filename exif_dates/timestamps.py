#!/usr/bin/env python3
"""
Unique timestamp assignment for files sharing the same date

Files resolved to the same calendar date get consecutive timestamps:
midnight, midnight + 1s, midnight + 2s, ... in processing order. Only
deterministic if files are always fed in the same order
(see utils.sort_files_by_directory).
"""

from datetime import date, datetime, time, timedelta
from typing import Dict, Optional

SECOND_STEP = timedelta(seconds=1)
FALLBACK_STEP = timedelta(milliseconds=1)


class TimestampExhaustedError(Exception):
    """Raised when no timestamp is left within the day for another file"""
    pass


class TimestampAllocator:
    """Hands out a distinct timestamp per file within each date bucket"""

    def __init__(self, last_assigned: Optional[Dict[date, datetime]] = None, logger=None):
        # Bucket date -> last timestamp handed out for it during this run
        self.last_assigned = last_assigned if last_assigned is not None else {}
        self.logger = logger
        self._fallback_buckets = set()

    def assign(self, day: date) -> datetime:
        """
        Returns the next free timestamp for day and records it as the bucket's baseline

        Raises:
            TimestampExhaustedError: If even the millisecond step would leave the day
        """
        if isinstance(day, datetime):
            day = day.date()

        last_used = self.last_assigned.get(day)
        if last_used is None:
            timestamp = datetime.combine(day, time.min)
        else:
            timestamp = last_used + SECOND_STEP

            if timestamp.date() != day:
                # More than 86400 files on one date
                timestamp = last_used + FALLBACK_STEP
                if day not in self._fallback_buckets:
                    self._fallback_buckets.add(day)
                    if self.logger:
                        self.logger.warning(
                            f"TIMESTAMP_FALLBACK: {day} ran out of seconds, using millisecond steps"
                        )

            if timestamp.date() != day:
                raise TimestampExhaustedError(f"No free timestamp left on {day}")

        self.last_assigned[day] = timestamp
        return timestamp

    def bucket_count(self) -> int:
        return len(self.last_assigned)
