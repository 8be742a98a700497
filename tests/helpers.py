"""Helpers shared by the test modules."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ctverify.engine.results import SuiteResult


def shape(result: SuiteResult) -> list[Any]:
    """
    Reduce a SuiteResult to error classes, ignoring names and timing.

    Each test becomes (error class or None, [case error class or None, ...]).
    """
    return [
        (
            type(t.error) if t.error is not None else None,
            [type(c.error) if c.error is not None else None for c in t.case_results],
        )
        for t in result.test_results
    ]


def write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
