"""Report generation for integrity check results.

Supports:
- JSON for machine processing
- CSV for spreadsheet analysis
- Markdown for documentation
"""

from __future__ import annotations

import csv
import io
import json
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime
from pathlib import Path

import msgspec

from bibcheck.integrity.messages import IntegrityMessage


class IntegrityReport(msgspec.Struct, frozen=True, kw_only=True):
    """Messages from one integrity run plus what was checked."""

    messages: list[IntegrityMessage]
    total_entries: int
    mode: str = "bibtex"
    source: str | None = None
    timestamp: datetime = msgspec.field(default_factory=datetime.now)

    @property
    def has_issues(self) -> bool:
        return bool(self.messages)

    @property
    def entries_with_issues(self) -> list[str]:
        """Keys of entries with at least one message, in report order."""
        return list(dict.fromkeys(m.entry_key for m in self.messages))

    def by_entry(self) -> dict[str, list[IntegrityMessage]]:
        grouped: dict[str, list[IntegrityMessage]] = {}
        for message in self.messages:
            grouped.setdefault(message.entry_key, []).append(message)
        return grouped

    def summarize(self) -> dict[str, dict[str, int]]:
        """Counts of messages per field and per message text."""
        return {
            "fields": dict(Counter(m.field for m in self.messages).most_common()),
            "messages": dict(Counter(m.message for m in self.messages).most_common()),
        }


class ReportFormatter(ABC):
    """Abstract base class for report formatters."""

    @abstractmethod
    def format(self, report: IntegrityReport) -> str:
        """Format an integrity report.

        Args:
            report: Integrity report to format

        Returns:
            Formatted report as string
        """
        pass

    def save(self, report: IntegrityReport, path: Path) -> None:
        """Save formatted report to file.

        Args:
            report: Integrity report to save
            path: Output file path
        """
        content = self.format(report)
        path.write_text(content, encoding="utf-8")


class JSONReporter(ReportFormatter):
    """Generate JSON reports."""

    def __init__(self, indent: int = 2, include_summary: bool = True):
        """Initialize JSON reporter.

        Args:
            indent: Indentation level for pretty printing
            include_summary: Whether to include per-field and per-message counts
        """
        self.indent = indent
        self.include_summary = include_summary

    def format(self, report: IntegrityReport) -> str:
        """Format report as JSON."""
        data = {
            "timestamp": report.timestamp.isoformat(),
            "source": report.source,
            "mode": report.mode,
            "total_entries": report.total_entries,
            "entries_with_issues": len(report.entries_with_issues),
            "issues": [m.to_dict() for m in report.messages],
        }
        if self.include_summary:
            data["summary"] = report.summarize()

        return json.dumps(data, indent=self.indent, ensure_ascii=False)


class CSVReporter(ReportFormatter):
    """Generate CSV reports, one row per message."""

    def format(self, report: IntegrityReport) -> str:
        """Format report as CSV."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")

        writer.writerow(["entry_key", "field", "message"])
        for message in report.messages:
            writer.writerow(message.location)

        return output.getvalue()


class MarkdownReporter(ReportFormatter):
    """Generate Markdown reports."""

    def format(self, report: IntegrityReport) -> str:
        """Format report as Markdown."""
        lines = []

        lines.append("# Integrity Report")
        lines.append("")
        if report.source:
            lines.append(f"**Source:** {report.source}")
        lines.append(f"**Generated:** {report.timestamp.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append(f"**Mode:** {report.mode}")
        lines.append("")

        if not report.has_issues:
            lines.append("✅ **Status:** No issues found")
            lines.append("")
            return "\n".join(lines)

        lines.append(
            f"❌ **Status:** {len(report.messages)} issue(s) in "
            f"{len(report.entries_with_issues)} of {report.total_entries} entries"
        )
        lines.append("")

        summary = report.summarize()
        lines.append("## Most Common Issues")
        lines.append("")
        for text, count in list(summary["messages"].items())[:10]:
            lines.append(f"- {text}: {count}")
        lines.append("")

        lines.append("## Issues by Entry")
        lines.append("")
        for key, messages in report.by_entry().items():
            lines.append(f"### {key}")
            lines.append("")
            lines.append("| Field | Message |")
            lines.append("|-------|---------|")
            for message in messages:
                text = message.message.replace("|", "\\|")
                lines.append(f"| {message.field} | {text} |")
            lines.append("")

        return "\n".join(lines)


REPORTERS: dict[str, type[ReportFormatter]] = {
    "json": JSONReporter,
    "csv": CSVReporter,
    "markdown": MarkdownReporter,
}


def get_reporter(name: str) -> ReportFormatter:
    """Create a reporter by format name."""
    try:
        return REPORTERS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown report format: {name}") from None
