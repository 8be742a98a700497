"""
Suite runner.

Orchestrates: client factory → per Test (template → constraint) → per
Case (object → review → assertions) → nested results.

Failures are recorded at the narrowest level that detected them and
never stop sibling Tests or Cases. run() itself does not raise for
suite content problems.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from ..client.client import Client, ClientError, ClientFactory
from ..client.local import new_local_client
from ..errors import (
    CreatingClientError,
    InvalidCaseError,
    InvalidSuiteError,
    RunCancelledError,
    VerifyError,
)
from ..fs import FileProvider, join
from ..suite.filter import Filter
from ..suite.schema import Case, Suite, Test
from .evaluate import review_object
from .loader import read_constraint, read_object, read_template
from .matcher import check_assertions
from .results import CaseResult, SuiteResult, TestResult

logger = logging.getLogger(__name__)

# Errors recorded on a result instead of propagating.
RECORDED_ERRORS = (VerifyError, ClientError, OSError)


class Runner:
    """
    Run suites against a file provider with a fresh rule client per run.

    Args:
        filesystem: Source of template, constraint and object files
        new_client: Factory for the rule client (called once per run)
    """

    def __init__(self, filesystem: FileProvider, new_client: ClientFactory = new_local_client):
        self.filesystem = filesystem
        self.new_client = new_client

    def run(
        self,
        suite: Suite,
        *,
        filter: Filter | None = None,
        base_dir: str = "",
        cancel: threading.Event | None = None,
    ) -> SuiteResult:
        """
        Run every selected Test of `suite`.

        Args:
            suite: Suite to run (not modified)
            filter: Selects Tests/Cases by name; None runs everything
            base_dir: Directory the suite's paths are relative to
            cancel: Checked before each Test and Case; once set, the
                remaining ones are reported with RunCancelledError

        Returns:
            SuiteResult mirroring the selected part of the suite
        """
        filter = filter or Filter()
        start = time.perf_counter()
        tests = [t for t in suite.tests if filter.matches_test(t)]

        try:
            client = self.new_client()
        except Exception as e:
            logger.warning("creating rule client failed: %s", e)
            return SuiteResult(
                name=suite.name,
                test_results=[TestResult(name=t.name, error=_creating_client_error(e)) for t in tests],
                runtime=time.perf_counter() - start,
            )

        results = [self._run_test(client, t, filter, base_dir, cancel) for t in tests]
        return SuiteResult(name=suite.name, test_results=results, runtime=time.perf_counter() - start)

    def _run_test(
        self,
        client: Client,
        test: Test,
        filter: Filter,
        base_dir: str,
        cancel: threading.Event | None,
    ) -> TestResult:
        start = time.perf_counter()
        result = TestResult(name=test.name)

        if cancel is not None and cancel.is_set():
            result.error = RunCancelledError("run cancelled")
            return result

        logger.debug("test %r: template=%s constraint=%s", test.name, test.template, test.constraint)
        try:
            constraint = self._load_policy(client, test, base_dir)
        except RECORDED_ERRORS as e:
            logger.debug("test %r failed: %s", test.name, e)
            result.error = e
            result.runtime = time.perf_counter() - start
            return result

        for case in test.cases:
            if not filter.matches_case(case):
                continue
            result.case_results.append(self._run_case(client, constraint, case, base_dir, cancel))

        result.runtime = time.perf_counter() - start
        return result

    def _load_policy(self, client: Client, test: Test, base_dir: str) -> dict[str, Any]:
        if not test.template:
            raise InvalidSuiteError(f"test {test.name!r} has no template")
        if not test.constraint:
            raise InvalidSuiteError(f"test {test.name!r} has no constraint")

        kind = read_template(self.filesystem, join(base_dir, test.template), client)
        return read_constraint(self.filesystem, join(base_dir, test.constraint), client, kind)

    def _run_case(
        self,
        client: Client,
        constraint: dict[str, Any],
        case: Case,
        base_dir: str,
        cancel: threading.Event | None,
    ) -> CaseResult:
        start = time.perf_counter()
        result = CaseResult(name=case.name)

        if cancel is not None and cancel.is_set():
            result.error = RunCancelledError("run cancelled")
            return result

        try:
            if not case.object:
                raise InvalidCaseError(f"case {case.name!r} has no object")
            obj = read_object(self.filesystem, join(base_dir, case.object))
            violations = review_object(client, constraint, obj)
            check_assertions(case.assertions, violations)
        except RECORDED_ERRORS as e:
            result.error = e

        logger.debug("case %r: %s", case.name, "ok" if result.error is None else result.error)
        result.runtime = time.perf_counter() - start
        return result


def _creating_client_error(cause: Exception) -> CreatingClientError:
    try:
        raise CreatingClientError(f"creating rule client: {cause}") from cause
    except CreatingClientError as e:
        return e
