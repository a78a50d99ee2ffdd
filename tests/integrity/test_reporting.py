"""Tests for integrity report formatting."""

import csv
import io
import json

import pytest

from bibcheck.core.models import Entry
from bibcheck.integrity.messages import IntegrityMessage
from bibcheck.integrity.reporting import (
    CSVReporter,
    IntegrityReport,
    JSONReporter,
    MarkdownReporter,
    get_reporter,
)


@pytest.fixture
def report():
    doe = Entry(key="doe2024", type="article", fields={"year": "24", "url": "x"})
    roe = Entry(key="roe2023", type="misc", fields={"year": "23"})
    return IntegrityReport(
        messages=[
            IntegrityMessage("should contain a four digit number", doe, "year"),
            IntegrityMessage(
                "should contain a protocol: http[s]://, file://, ftp://, ...",
                doe,
                "url",
            ),
            IntegrityMessage("should contain a four digit number", roe, "year"),
        ],
        total_entries=3,
        source="refs.bib",
    )


class TestIntegrityReport:
    def test_entries_with_issues(self, report):
        assert report.has_issues
        assert report.entries_with_issues == ["doe2024", "roe2023"]

    def test_by_entry(self, report):
        grouped = report.by_entry()
        assert [m.field for m in grouped["doe2024"]] == ["year", "url"]
        assert len(grouped["roe2023"]) == 1

    def test_summarize(self, report):
        summary = report.summarize()
        assert summary["fields"] == {"year": 2, "url": 1}
        assert summary["messages"]["should contain a four digit number"] == 2

    def test_empty_report(self):
        empty = IntegrityReport(messages=[], total_entries=0)
        assert not empty.has_issues
        assert empty.entries_with_issues == []


class TestReporters:
    def test_json(self, report):
        data = json.loads(JSONReporter().format(report))

        assert data["total_entries"] == 3
        assert data["entries_with_issues"] == 2
        assert data["issues"][0] == {
            "entry_key": "doe2024",
            "field": "year",
            "message": "should contain a four digit number",
        }
        assert data["summary"]["fields"]["year"] == 2

    def test_json_without_summary(self, report):
        data = json.loads(JSONReporter(include_summary=False).format(report))
        assert "summary" not in data

    def test_csv(self, report):
        rows = list(csv.reader(io.StringIO(CSVReporter().format(report))))

        assert rows[0] == ["entry_key", "field", "message"]
        assert len(rows) == 4
        assert rows[2][0] == "doe2024"
        assert rows[2][2].startswith("should contain a protocol")

    def test_markdown(self, report):
        text = MarkdownReporter().format(report)

        assert "# Integrity Report" in text
        assert "3 issue(s) in 2 of 3 entries" in text
        assert "### doe2024" in text
        assert "| year | should contain a four digit number |" in text

    def test_markdown_no_issues(self):
        text = MarkdownReporter().format(IntegrityReport(messages=[], total_entries=2))
        assert "No issues found" in text

    def test_save(self, report, tmp_path):
        path = tmp_path / "report.json"
        JSONReporter().save(report, path)

        assert json.loads(path.read_text(encoding="utf-8"))["total_entries"] == 3

    def test_get_reporter(self):
        assert isinstance(get_reporter("CSV"), CSVReporter)
        with pytest.raises(ValueError):
            get_reporter("html")
