"""Pytest configuration and fixtures for CLI tests."""

from pathlib import Path

import pytest
from click.testing import CliRunner

CLEAN_BIB = """\
@book{knuth1984,
  author = {Knuth, Donald},
  title  = {The {TeX}book},
  year   = {1984},
  isbn   = {0-201-13447-0},
}
"""

BROKEN_BIB = """\
@article{doe2024,
  author  = {Doe, John},
  title   = {{Deep} learning},
  year    = {24},
  pages   = {7-33},
}

@misc{roe2023,
  author = {Roe, Jane},
  year   = {2023},
}
"""


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Run each CLI test from an empty directory so no project config applies."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Click CLI test runner bound to the bibcheck command group."""

    class BibcheckCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore
            from bibcheck.cli.main import cli

            if isinstance(args, list):
                return super().invoke(cli, args, **kwargs)
            return super().invoke(args, **kwargs)

    return BibcheckCliRunner()


@pytest.fixture
def write_bib(workdir):
    """Write a .bib file into the working directory and return its path."""

    def factory(content: str, name: str = "refs.bib") -> Path:
        path = workdir / name
        path.write_text(content, encoding="utf-8")
        return path

    return factory


@pytest.fixture
def clean_bib(write_bib) -> Path:
    return write_bib(CLEAN_BIB, "clean.bib")


@pytest.fixture
def broken_bib(write_bib) -> Path:
    return write_bib(BROKEN_BIB, "broken.bib")
