#!/usr/bin/env python3
"""Write requirements.txt from the base dependencies plus runtime extras."""

from __future__ import annotations

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
# Installed in the service image; the test extra stays out.
SYNC_EXTRAS = ("cli", "server")


def collect_requirements() -> list[str]:
    """Return sorted, de-duplicated requirement strings."""
    project = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    deps = set(project.get("dependencies", []))
    for extra in SYNC_EXTRAS:
        deps.update(project.get("optional-dependencies", {}).get(extra, []))
    return sorted(dep.strip() for dep in deps if dep.strip())


def main() -> None:
    reqs = collect_requirements()
    header = [
        f"# Generated from pyproject.toml (base + extras: {','.join(SYNC_EXTRAS)})",
        "# Do not edit manually; run: uv run python scripts/generate_requirements.py",
        "",
    ]
    (ROOT / "requirements.txt").write_text(
        "\n".join(header) + "\n".join(reqs) + "\n", encoding="utf-8"
    )
    print(f"Wrote {len(reqs)} requirements to requirements.txt")


if __name__ == "__main__":
    main()
