"""
CLI module - unified command-line interface.

Provides entry points for:
- Running a single permission-aware query
- Running the access-control eval gate
"""

from authz_rag_pipeline.cli.commands import (
    main,
    run_query_cli,
    run_eval_cli,
)

__all__ = [
    "main",
    "run_query_cli",
    "run_eval_cli",
]
