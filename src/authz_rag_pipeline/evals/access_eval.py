"""
Access-Control Eval Gate

Runs every golden access case through a permission-aware filter and checks
that the principal gets back EXACTLY the expected documents.

WHAT THIS CATCHES:
------------------
- Leaks: a document the principal has no relationship to shows up
- Over-filtering: a permitted, matching document goes missing
- Identity-mapping regressions (metadata key or reference format changes)
- Schema/permission rule changes in the authorization service

A case whose query fails (permission check error) counts as failed, with
the error message kept on the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from authz_rag_pipeline.core import AuthorizationError
from authz_rag_pipeline.filtering import PermissionAwareFilter, new_filter
from authz_rag_pipeline.golden_sets import AccessCase, get_all_access_cases
from authz_rag_pipeline.observability import (
    EVAL_CASE_ID,
    EVAL_CASE_PASSED,
    EVAL_GATE_NAME,
    EVAL_GATE_STATUS,
    get_tracer,
)


@dataclass
class AccessEvalResult:
    """Result of access eval for a single case."""
    case_id: str
    passed: bool
    expected_doc_ids: list[str]
    actual_doc_ids: list[str]
    error: str | None = None

    @property
    def leaked_doc_ids(self) -> list[str]:
        """Returned but not expected."""
        return [doc_id for doc_id in self.actual_doc_ids if doc_id not in self.expected_doc_ids]

    @property
    def missing_doc_ids(self) -> list[str]:
        """Expected but not returned."""
        return [doc_id for doc_id in self.expected_doc_ids if doc_id not in self.actual_doc_ids]


@dataclass
class AccessEvalReport:
    """Aggregate access eval results."""
    results: list[AccessEvalResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    @property
    def pass_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.passed / self.total


def evaluate_case(rag_filter: PermissionAwareFilter, case: AccessCase) -> AccessEvalResult:
    """Run one golden case through the filter."""
    try:
        docs = rag_filter.query(case.principal, case.query)
    except AuthorizationError as e:
        return AccessEvalResult(
            case_id=case.id,
            passed=False,
            expected_doc_ids=list(case.expected_doc_ids),
            actual_doc_ids=[],
            error=str(e),
        )

    actual = [doc.id for doc in docs]
    return AccessEvalResult(
        case_id=case.id,
        passed=set(actual) == set(case.expected_doc_ids) and len(actual) == len(set(actual)),
        expected_doc_ids=list(case.expected_doc_ids),
        actual_doc_ids=actual,
    )


def run_access_eval(
    rag_filter: PermissionAwareFilter | None = None,
    cases: list[AccessCase] | None = None,
    verbose: bool = False,
) -> AccessEvalReport:
    """
    Run the access-control eval gate.

    Args:
        rag_filter: Filter under test. Defaults to the reference documents
                    checked by get_permission_checker() (in-memory unless
                    USE_SPICEDB=true).
        cases: Cases to evaluate. Defaults to all golden cases.
        verbose: Print progress.

    Returns:
        AccessEvalReport with one result per case
    """
    if rag_filter is None:
        from authz_rag_pipeline.authz import get_permission_checker
        from authz_rag_pipeline.retrieval import get_reference_documents

        rag_filter = new_filter(get_permission_checker(), "read", get_reference_documents())

    cases = cases if cases is not None else get_all_access_cases()
    report = AccessEvalReport()

    tracer = get_tracer()
    with tracer.start_span("eval.access_control", attributes={EVAL_GATE_NAME: "access_control"}) as gate_span:
        for case in cases:
            if verbose:
                print(f"Running access eval: {case.id}...")

            with tracer.start_span("eval.case", attributes={EVAL_CASE_ID: case.id}) as case_span:
                result = evaluate_case(rag_filter, case)
                case_span.set_attribute(EVAL_CASE_PASSED, result.passed)

            report.results.append(result)

        gate_span.set_attribute(EVAL_GATE_STATUS, "passed" if report.all_passed else "failed")

    return report


def run_access_eval_cli(quiet: bool = False) -> int:
    """Print the access eval report and return an exit code."""
    print("=" * 60)
    print("ACCESS CONTROL EVAL")
    print("=" * 60)

    report = run_access_eval(verbose=not quiet)

    if not quiet:
        for result in report.results:
            status = "PASS" if result.passed else "FAIL"
            print(f"  [{status}] {result.case_id} -> {result.actual_doc_ids}")
            if result.error:
                print(f"        Error: {result.error}")
            if result.leaked_doc_ids:
                print(f"        Leaked: {result.leaked_doc_ids}")
            if result.missing_doc_ids:
                print(f"        Missing: {result.missing_doc_ids}")

    print(f"\nPass rate: {report.pass_rate:.1%}")
    print(f"Total: {report.passed}/{report.total}")

    if report.all_passed:
        print("\n>>> ACCESS EVAL GATE: PASSED <<<")
        return 0
    else:
        print("\n>>> ACCESS EVAL GATE: FAILED <<<")
        return 1
