"""
Migration report.

Collects everything a reviewer should look at after a migration run: errors
that need a manual fix, warnings for auto-repairs, and content that was
removed because it could not be converted safely.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from mintport.schemas.migration import IssueKind, MigrationIssue

logger = logging.getLogger(__name__)

RULE = "=" * 80
SUB_RULE = "-" * 40


class MigrationReport:
    """Accumulates MigrationIssue entries attributed to the file being converted."""

    def __init__(self):
        self.errors: List[MigrationIssue] = []
        self.warnings: List[MigrationIssue] = []
        self.removals: List[MigrationIssue] = []
        self.current_file: Optional[str] = None

    def set_current_file(self, filepath: Optional[str]):
        self.current_file = filepath

    def _file(self, filepath: Optional[str]) -> str:
        return filepath or self.current_file or "unknown"

    def add_error(self, issue: str, line: Optional[int] = None, suggestion: Optional[str] = None,
                  original: Optional[str] = None, filepath: Optional[str] = None):
        entry = MigrationIssue(
            kind=IssueKind.ERROR, file=self._file(filepath), line=line,
            issue=issue, suggestion=suggestion, original=original,
        )
        self.errors.append(entry)
        logger.debug(f"{entry.file}:{line}: {issue}")

    def add_warning(self, issue: str, line: Optional[int] = None, fixed: Optional[str] = None,
                    original: Optional[str] = None, filepath: Optional[str] = None):
        self.warnings.append(MigrationIssue(
            kind=IssueKind.WARNING, file=self._file(filepath), line=line,
            issue=issue, fixed=fixed, original=original,
        ))

    def add_removal(self, message: str, details: str, filepath: Optional[str] = None):
        self.removals.append(MigrationIssue(
            kind=IssueKind.REMOVAL, file=self._file(filepath),
            issue=message, original=details,
        ))

    def mark(self) -> Tuple[int, int, int]:
        """Current sizes of the three lists, for issues_since."""
        return len(self.errors), len(self.warnings), len(self.removals)

    def issues_since(self, mark: Tuple[int, int, int]) -> List[MigrationIssue]:
        errors, warnings, removals = mark
        return self.errors[errors:] + self.warnings[warnings:] + self.removals[removals:]

    def replay(self, issues: List[MigrationIssue], filepath: Optional[str] = None):
        """Re-add issues recorded for identical content under another file."""
        targets = {
            IssueKind.ERROR: self.errors,
            IssueKind.WARNING: self.warnings,
            IssueKind.REMOVAL: self.removals,
        }
        for issue in issues:
            targets[issue.kind].append(issue.model_copy(update={"file": self._file(filepath)}))

    def reset(self):
        self.errors = []
        self.warnings = []
        self.removals = []
        self.current_file = None

    @staticmethod
    def _group(entries: List[MigrationIssue]) -> Dict[str, List[MigrationIssue]]:
        grouped: Dict[str, List[MigrationIssue]] = OrderedDict()
        for entry in entries:
            grouped.setdefault(entry.file, []).append(entry)
        return grouped

    def generate_report(self) -> str:
        """
        Render the report as plain text grouped by file.

        Returns:
            The report, or an empty string when there are no errors or warnings
        """
        if not self.errors and not self.warnings:
            return ""

        lines = ["", RULE, " MIGRATION REPORT", RULE, ""]

        if self.errors:
            lines.append(f" ERRORS ({len(self.errors)}) - These need manual fixes:")
            lines.append(SUB_RULE)
            for filepath, entries in self._group(self.errors).items():
                lines.append("")
                lines.append(f" {filepath}:")
                for entry in entries:
                    lines.append(f"  Line {entry.line}: {entry.issue}")
                    if entry.suggestion:
                        lines.append(f"     Suggestion: {entry.suggestion}")
            lines.append("")

        if self.warnings:
            lines.append(f" WARNINGS ({len(self.warnings)}) - Automatically handled but please verify:")
            lines.append(SUB_RULE)
            for filepath, entries in self._group(self.warnings).items():
                lines.append("")
                lines.append(f" {filepath}:")
                for entry in entries:
                    lines.append(f"  Line {entry.line}: {entry.issue}")
                    if entry.fixed:
                        lines.append(f"     Applied: {entry.fixed}")
            lines.append("")

        if self.removals:
            lines.append(f" REMOVED CONTENT ({len(self.removals)}) - Content that was removed:")
            lines.append(SUB_RULE)
            for filepath, entries in self._group(self.removals).items():
                lines.append("")
                lines.append(f" {filepath}:")
                for entry in entries:
                    lines.append(f"  {entry.issue}: {entry.original}")
            lines.append("")

        summary = f"Summary: {len(self.errors)} errors, {len(self.warnings)} warnings"
        if self.removals:
            summary += f", {len(self.removals)} removals"
        lines.extend(["", RULE, summary, RULE, ""])
        return "\n".join(lines)
