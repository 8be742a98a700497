"""Verify command implementation."""

from __future__ import annotations

import importlib
import json
import re
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..client.client import ClientFactory
from ..client.local import new_local_client
from ..engine.results import CaseResult, SuiteResult, TestResult
from ..engine.runner import Runner
from ..fs import DirectoryFileProvider
from ..suite.filter import Filter
from ..suite.load import read_suites
from ..suite.schema import Suite


def load_client_factory(ref: str) -> ClientFactory:
    """
    Resolve a "module:callable" reference to a client factory.

    Raises:
        ValueError: if the reference is malformed or does not resolve
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"client factory must look like 'module:callable', got {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"cannot import {module_name!r}: {e}") from e
    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ValueError(f"{ref!r} is not callable")
    return factory


def run_verify(
    paths: list[Path],
    *,
    recursive: bool = False,
    run: str | None = None,
    output_json: bool = False,
    verbose: bool = False,
    client_factory: ClientFactory | None = None,
) -> int:
    """Run suites found under `paths`.

    Args:
        paths: Suite files or directories containing suites
        recursive: Descend into subdirectories when discovering suites
        run: Filter in "tests//cases" form
        output_json: Output results as JSON instead of human-readable
        verbose: Also list passing cases
        client_factory: Rule client factory (defaults to the local client)

    Returns:
        Exit code (0 = all passed, 1 = failures found, 2 = bad input)
    """
    err = Console(stderr=True)

    try:
        filter = Filter.parse(run)
    except re.error as e:
        err.print(f"Invalid --run filter {run!r}: {e}", style="bold red")
        return 2

    suites: list[tuple[Path, Suite]] = []
    for path in paths:
        try:
            suites.extend(read_suites(path, recursive=recursive))
        except (OSError, ValueError, yaml.YAMLError) as e:
            err.print(f"Cannot read suites from {path}: {e}", style="bold red")
            return 2

    if not suites:
        err.print("No suites found.", style="yellow")
        return 2

    results: list[tuple[Path, SuiteResult]] = []
    for suite_path, suite in suites:
        runner = Runner(DirectoryFileProvider(suite_path.parent), client_factory or new_local_client)
        results.append((suite_path, runner.run(suite, filter=filter)))

    if output_json:
        _output_json(results)
    else:
        _print_human_output(Console(), results, verbose=verbose)

    return 0 if all(r.passed for _, r in results) else 1


def _error_to_dict(error: BaseException | None) -> dict[str, Any] | None:
    if error is None:
        return None
    return {"type": type(error).__name__, "message": str(error)}


def _case_to_dict(result: CaseResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "passed": result.passed,
        "error": _error_to_dict(result.error),
        "runtime": round(result.runtime, 6),
    }


def _test_to_dict(result: TestResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "passed": result.passed,
        "error": _error_to_dict(result.error),
        "runtime": round(result.runtime, 6),
        "cases": [_case_to_dict(c) for c in result.case_results],
    }


def _output_json(results: list[tuple[Path, SuiteResult]]) -> None:
    output = {
        "suites": [
            {
                "path": str(path),
                "name": result.name,
                "passed": result.passed,
                "runtime": round(result.runtime, 6),
                "tests": [_test_to_dict(t) for t in result.test_results],
            }
            for path, result in results
        ],
        "summary": _counts(results),
    }
    print(json.dumps(output, indent=2))


def _counts(results: list[tuple[Path, SuiteResult]]) -> dict[str, int]:
    counts = {"tests": 0, "tests_failed": 0, "cases": 0, "cases_failed": 0}
    for _, suite in results:
        for test in suite.test_results:
            counts["tests"] += 1
            if not test.passed:
                counts["tests_failed"] += 1
            for case in test.case_results:
                counts["cases"] += 1
                if not case.passed:
                    counts["cases_failed"] += 1
    return counts


def _detail(error: BaseException | None) -> Text:
    return Text(f"{type(error).__name__}: {error}")


def _label(name: str, index: int) -> Text:
    return Text(name or f"#{index + 1}")


def _print_human_output(console: Console, results: list[tuple[Path, SuiteResult]], *, verbose: bool) -> None:
    for path, suite in results:
        table = Table(title=f"{suite.name or path.name} ({path})")
        table.add_column("test", style="cyan")
        table.add_column("case")
        table.add_column("status")
        table.add_column("detail", style="dim")

        for ti, test in enumerate(suite.test_results):
            test_label = _label(test.name, ti)
            if test.error is not None:
                table.add_row(test_label, "", "[bold red]FAIL[/]", _detail(test.error))
                continue

            status = "[green]ok[/]" if test.passed else "[bold red]FAIL[/]"
            table.add_row(test_label, "", status, f"{test.runtime:.3f}s")
            for ci, case in enumerate(test.case_results):
                if case.passed and not verbose:
                    continue
                if case.passed:
                    table.add_row("", _label(case.name, ci), "[green]ok[/]", f"{case.runtime:.3f}s")
                else:
                    table.add_row(
                        "",
                        _label(case.name, ci),
                        "[bold red]FAIL[/]",
                        _detail(case.error),
                    )

        console.print(table)

    counts = _counts(results)
    style = "bold green" if counts["tests_failed"] == 0 else "bold red"
    console.print(
        f"Tests: {counts['tests'] - counts['tests_failed']}/{counts['tests']} passed, "
        f"Cases: {counts['cases'] - counts['cases_failed']}/{counts['cases']} passed",
        style=style,
    )
