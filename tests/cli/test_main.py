"""Tests for the command line interface.

Machine-readable reports are written with ``--output`` and read back from
disk, so log lines on the terminal never interfere with parsing.
"""

import json

from bibcheck import __version__


def read_report(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestCLIEntryPoint:
    def test_help(self, cli_runner, workdir):
        result = cli_runner.invoke(["--help"])

        assert result.exit_code == 0
        assert "Bibliography integrity checker" in result.output
        assert "check" in result.output

    def test_version(self, cli_runner, workdir):
        result = cli_runner.invoke(["--version"])

        assert result.exit_code == 0
        assert f"bibcheck version {__version__}" in result.output

    def test_invalid_config_file(self, cli_runner, workdir, clean_bib):
        bad = workdir / "bad.yaml"
        bad.write_text("mode: [unclosed")

        result = cli_runner.invoke(["--config", str(bad), "check", str(clean_bib)])

        assert result.exit_code == 2
        assert "Error loading configuration" in result.output

    def test_invalid_config_value(self, cli_runner, workdir, clean_bib):
        config = workdir / "config.yaml"
        config.write_text("mode: ris\n")

        result = cli_runner.invoke(["-c", str(config), "check", str(clean_bib)])

        assert result.exit_code == 2
        assert "Unknown database mode" in result.output


class TestCheckCommand:
    def test_clean_file(self, cli_runner, clean_bib):
        result = cli_runner.invoke(["check", str(clean_bib)])

        assert result.exit_code == 0
        assert "No issues found in 1 entries" in result.output

    def test_issues_table(self, cli_runner, broken_bib):
        result = cli_runner.invoke(["check", str(broken_bib)])

        assert result.exit_code == 1
        assert "doe2024" in result.output
        assert "should contain a four digit number" in result.output
        assert "Summary: 2 issue(s) in 1 of 2 entries" in result.output

    def test_json_report(self, cli_runner, workdir, broken_bib):
        output = workdir / "report.json"

        result = cli_runner.invoke(
            ["check", str(broken_bib), "--format", "json", "-o", str(output)]
        )

        assert result.exit_code == 1
        assert "Report written to" in result.output
        report = read_report(output)
        assert report["mode"] == "bibtex"
        assert report["total_entries"] == 2
        assert [(i["entry_key"], i["field"]) for i in report["issues"]] == [
            ("doe2024", "pages"),
            ("doe2024", "year"),
        ]

    def test_csv_to_stdout(self, cli_runner, broken_bib):
        result = cli_runner.invoke(["check", str(broken_bib), "--format", "csv"])

        assert result.exit_code == 1
        assert "entry_key,field,message" in result.output
        assert "doe2024,year,should contain a four digit number" in result.output

    def test_table_output_saved_as_markdown(self, cli_runner, workdir, broken_bib):
        output = workdir / "report.md"

        result = cli_runner.invoke(["check", str(broken_bib), "-o", str(output)])

        assert result.exit_code == 1
        assert output.read_text(encoding="utf-8").startswith("# Integrity Report")

    def test_biblatex_flag(self, cli_runner, workdir, broken_bib):
        output = workdir / "report.json"

        result = cli_runner.invoke(
            [
                "check",
                str(broken_bib),
                "--biblatex",
                "--format",
                "json",
                "-o",
                str(output),
            ]
        )

        assert result.exit_code == 1
        report = read_report(output)
        assert report["mode"] == "biblatex"
        assert [i["field"] for i in report["issues"]] == ["year"]

    def test_mode_from_file_metadata(self, cli_runner, workdir, write_bib):
        bib = write_bib(
            "@misc{k, pages = {7-33}, year = {2020}}\n"
            "@comment{jabref-meta: databaseType:biblatex;}\n"
        )
        output = workdir / "report.json"

        result = cli_runner.invoke(
            ["check", str(bib), "--format", "json", "-o", str(output)]
        )

        assert result.exit_code == 0
        assert read_report(output)["mode"] == "biblatex"

    def test_bibtex_flag_overrides_metadata(self, cli_runner, workdir, write_bib):
        bib = write_bib(
            "@misc{k, pages = {7-33}, year = {2020}}\n"
            "@comment{jabref-meta: databaseType:biblatex;}\n"
        )

        result = cli_runner.invoke(["check", str(bib), "--bibtex", "--format", "csv"])

        assert result.exit_code == 1
        assert "k,pages,should contain a valid page number range" in result.output

    def test_mode_from_environment(self, cli_runner, workdir, broken_bib, monkeypatch):
        monkeypatch.setenv("BIBCHECK_MODE", "biblatex")
        output = workdir / "report.json"

        cli_runner.invoke(
            ["check", str(broken_bib), "--format", "json", "-o", str(output)]
        )

        assert read_report(output)["mode"] == "biblatex"

    def test_linked_files(self, cli_runner, workdir, write_bib):
        bib = write_bib(
            "@misc{k, year = {2020},"
            r" file = {:paper.pdf:PDF;:https\://x.org/a.pdf:PDF}}"
        )
        papers = workdir / "papers"
        papers.mkdir()
        (papers / "paper.pdf").write_text("pdf")

        missing = cli_runner.invoke(["check", str(bib), "--format", "csv"])
        found = cli_runner.invoke(
            ["check", str(bib), "--file-dir", str(papers), "--format", "csv"]
        )

        assert missing.exit_code == 1
        assert "link should refer to a correct file path" in missing.output
        assert found.exit_code == 0

    def test_malformed_entry_reported_and_skipped(self, cli_runner, write_bib):
        bib = write_bib("@article{bad, title = }\n@misc{good, year = {2020}}\n")

        result = cli_runner.invoke(["check", str(bib)])

        assert result.exit_code == 0
        assert "Expected a field value" in result.output
        assert "No issues found in 1 entries" in result.output

    def test_parallel_workers(self, cli_runner, workdir, broken_bib):
        output = workdir / "report.json"

        result = cli_runner.invoke(
            [
                "check",
                str(broken_bib),
                "--workers",
                "4",
                "--format",
                "json",
                "-o",
                str(output),
            ]
        )

        assert result.exit_code == 1
        assert len(read_report(output)["issues"]) == 2

    def test_missing_file(self, cli_runner, workdir):
        result = cli_runner.invoke(["check", "absent.bib"])
        assert result.exit_code == 2


class TestCheckersCommand:
    def test_bibtex_checkers(self, cli_runner, workdir):
        result = cli_runner.invoke(["checkers"])

        assert result.exit_code == 0
        assert "AuthorNameChecker" in result.output
        assert "TitleChecker" in result.output
        assert "BiblatexPagesChecker" not in result.output

    def test_biblatex_checkers(self, cli_runner, workdir):
        result = cli_runner.invoke(["checkers", "--biblatex"])

        assert result.exit_code == 0
        assert "BiblatexPagesChecker" in result.output
        assert "TitleChecker" not in result.output
