#!/usr/bin/env python3
"""Fail when requirements.txt drifts from the pyproject runtime profile."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from generate_requirements import ROOT, SYNC_EXTRAS, collect_requirements  # noqa: E402


def _pinned(line: str) -> str:
    return line.split("#", 1)[0].strip()


def main() -> None:
    """Compare pyproject-derived requirements with requirements.txt."""
    expected = set(collect_requirements())
    lines = (ROOT / "requirements.txt").read_text(encoding="utf-8").splitlines()
    actual = {entry for entry in map(_pinned, lines) if entry}

    missing = sorted(expected - actual)
    unexpected = sorted(actual - expected)
    if not missing and not unexpected:
        print(f"Dependency sync check passed (extras: {','.join(SYNC_EXTRAS)}).")
        return

    report = [
        "requirements.txt is out of sync with pyproject.toml.",
        "Run: uv run python scripts/generate_requirements.py",
    ]
    report += [f"- missing: {entry}" for entry in missing]
    report += [f"- unexpected: {entry}" for entry in unexpected]
    raise SystemExit("\n".join(report))


if __name__ == "__main__":
    main()
