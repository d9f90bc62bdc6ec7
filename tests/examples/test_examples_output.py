"""Run every example's ``main()`` and compare stdout with its ``# =>`` markers."""

from __future__ import annotations

import re
import runpy
from pathlib import Path

import pytest

EXAMPLES_ROOT = Path(__file__).resolve().parents[2] / "examples"
EXPECTED_MARKER = re.compile(r"#\s*=>\s?(.*)$")

EXAMPLE_PATHS = sorted(EXAMPLES_ROOT.glob("ex_*/01_*.py"))


def _expected_output(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [match.group(1).rstrip() for line in lines if (match := EXPECTED_MARKER.search(line))]


def test_every_example_topic_has_one_runnable_file() -> None:
    topics = sorted(path for path in EXAMPLES_ROOT.glob("ex_*") if path.is_dir())

    assert topics
    assert [path.parent for path in EXAMPLE_PATHS] == topics


@pytest.mark.parametrize("path", EXAMPLE_PATHS, ids=lambda path: path.parent.name)
def test_example_prints_documented_output(
    path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    expected = _expected_output(path)
    assert expected, f"{path.name} documents no output"

    runpy.run_path(str(path), run_name="__main__")

    assert capsys.readouterr().out.splitlines() == expected
