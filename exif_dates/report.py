#!/usr/bin/env python3
"""
Per-file outcomes and the end-of-run report
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from colorama import Fore, Style

DISPLAY_FORMAT = '%Y-%m-%d %H:%M:%S'


class OutcomeStatus(Enum):
    UPDATED = "updated"
    ALREADY_SET = "already set"
    EXPORTED = "exported"
    SKIPPED = "skipped"
    ERRORED = "errors"


@dataclass(frozen=True)
class FileOutcome:
    status: OutcomeStatus
    file_path: str
    timestamp: Optional[datetime] = None
    destination: Optional[str] = None
    reason: Optional[str] = None


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "N/A"
    text = value.strftime(DISPLAY_FORMAT)
    if value.microsecond:
        text += f".{value.microsecond // 1000:03d}"
    return text


def format_outcome_line(outcome: FileOutcome, index: int = None, total: int = None, dry_run: bool = False) -> str:
    """Renders one processed file as a coloured console line"""
    prefix = f"[{index}/{total}] " if index is not None and total is not None else ""
    dry = "[DRY RUN] " if dry_run else ""
    status = outcome.status

    if status == OutcomeStatus.UPDATED:
        verb = "Would set" if dry_run else "Set"
        return f"{Fore.GREEN}{prefix}{dry}✓ {verb} date {format_timestamp(outcome.timestamp)}: {outcome.file_path}{Style.RESET_ALL}"
    if status == OutcomeStatus.ALREADY_SET:
        return f"{Fore.BLUE}{prefix}= Already set {format_timestamp(outcome.timestamp)}: {outcome.file_path}{Style.RESET_ALL}"
    if status == OutcomeStatus.EXPORTED:
        return f"{Fore.GREEN}{prefix}{dry}✓ {outcome.file_path} -> {outcome.destination}{Style.RESET_ALL}"
    if status == OutcomeStatus.SKIPPED:
        return f"{Fore.YELLOW}{prefix}- Skipped ({outcome.reason}): {outcome.file_path}{Style.RESET_ALL}"
    return f"{Fore.RED}{prefix}✗ Error: {outcome.file_path}: {outcome.reason}{Style.RESET_ALL}"


class RunReport:
    """Accumulates outcomes of one run"""

    def __init__(self):
        self.counts: Dict[OutcomeStatus, int] = {status: 0 for status in OutcomeStatus}
        self.skipped_files: List[Tuple[str, str]] = []
        self.error_files: List[Tuple[str, str]] = []
        self.outcomes: List[FileOutcome] = []

    def add(self, outcome: FileOutcome) -> FileOutcome:
        self.outcomes.append(outcome)
        self.counts[outcome.status] += 1
        if outcome.status == OutcomeStatus.SKIPPED:
            self.skipped_files.append((outcome.file_path, outcome.reason or ""))
        elif outcome.status == OutcomeStatus.ERRORED:
            self.error_files.append((outcome.file_path, outcome.reason or ""))
        return outcome

    def count(self, status: OutcomeStatus) -> int:
        return self.counts[status]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    def summary_line(self, statuses) -> str:
        return "Summary: " + ", ".join(f"{self.counts[status]} {status.value}" for status in statuses)

    def render(self, statuses) -> List[str]:
        """Tally line followed by the itemized skipped and error listings"""
        lines = [self.summary_line(statuses)]

        if self.skipped_files:
            lines.append("")
            lines.append(f"{Fore.YELLOW}=== SKIPPED FILES ==={Style.RESET_ALL}")
            for file_path, reason in self.skipped_files:
                lines.append(f"  {file_path}")
                lines.append(f"    Reason: {reason}")

        if self.error_files:
            lines.append("")
            lines.append(f"{Fore.RED}=== ERROR FILES ==={Style.RESET_ALL}")
            for file_path, error in self.error_files:
                lines.append(f"  {file_path}")
                lines.append(f"    Error: {error}")

        return lines

    def print_summary(self, statuses):
        print()
        for line in self.render(statuses):
            print(line)


DATE_SUMMARY_STATUSES = (
    OutcomeStatus.UPDATED,
    OutcomeStatus.ALREADY_SET,
    OutcomeStatus.SKIPPED,
    OutcomeStatus.ERRORED,
)

EXPORT_SUMMARY_STATUSES = (
    OutcomeStatus.EXPORTED,
    OutcomeStatus.SKIPPED,
    OutcomeStatus.ERRORED,
)
