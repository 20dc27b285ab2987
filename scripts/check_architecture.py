#!/usr/bin/env python3
"""Layering checks for the conversion package."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/wav_converter"

# Layer directory -> import prefixes it must not reference.
BANNED = {
    "application": ["typer", "fastapi", "uvicorn", "boto3", "botocore", "subprocess"],
    "cli": ["boto3", "botocore", "fastapi", "uvicorn"],
    "adapters": ["typer", "fastapi", "uvicorn"],
}


def _imported_modules(path: Path) -> list[str]:
    modules: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("import "):
            modules.append(stripped.split()[1].split(".")[0])
        elif stripped.startswith("from "):
            modules.append(stripped.split()[1].split(".")[0])
    return modules


def main() -> None:
    """Fail when a layer imports a library reserved for another layer."""
    violations: list[str] = []
    for layer, banned in BANNED.items():
        for path in sorted((PACKAGE / layer).glob("*.py")):
            for module in _imported_modules(path):
                if module in banned:
                    violations.append(f"{path.relative_to(ROOT)}: imports '{module}'")
    if violations:
        raise SystemExit(
            "Architecture violations:\n" + "\n".join(f"- {v}" for v in violations)
        )
    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
