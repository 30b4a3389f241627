"""
Evaluation gates module.

- access_eval: every golden principal/query pair returns exactly the
  documents that principal is allowed to read
"""

from authz_rag_pipeline.evals.access_eval import (
    AccessEvalResult,
    AccessEvalReport,
    evaluate_case,
    run_access_eval,
    run_access_eval_cli,
)

__all__ = [
    "AccessEvalResult",
    "AccessEvalReport",
    "evaluate_case",
    "run_access_eval",
    "run_access_eval_cli",
]
