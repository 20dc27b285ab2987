#!/usr/bin/env python3
"""Keep pipeline stage functions small and free of transport concerns."""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGET = ROOT / "src/wav_converter/application/use_cases.py"
MAX_STATEMENTS = 25
MAX_BRANCHES = 6


def _measure(node: ast.FunctionDef) -> tuple[int, int]:
    statements = 0
    branches = 0
    for child in ast.walk(node):
        if child is node:
            continue
        if isinstance(child, ast.stmt):
            statements += 1
        if isinstance(child, (ast.If, ast.For, ast.While, ast.Try, ast.With)):
            branches += 1
    return statements, branches


def main() -> None:
    """Fail when a use-case function grows past the thresholds."""
    tree = ast.parse(TARGET.read_text(encoding="utf-8"))
    violations: list[str] = []
    for node in tree.body:
        if not isinstance(node, ast.FunctionDef):
            continue
        statements, branches = _measure(node)
        if statements > MAX_STATEMENTS:
            violations.append(f"{node.name}: {statements} statements")
        if branches > MAX_BRANCHES:
            violations.append(f"{node.name}: {branches} branches")
    if violations:
        raise SystemExit(
            "Use-case complexity threshold exceeded:\n"
            + "\n".join(f"- {v}" for v in violations)
        )
    print("Orchestrator complexity check passed.")


if __name__ == "__main__":
    main()
