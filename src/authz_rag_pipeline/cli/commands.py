"""
CLI commands - entry points for querying and evaluating the filter.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment
3. Build the filter
4. Print results
5. Return exit code

CLI commands are thin wrappers: argument parsing and output formatting
live here, the query algorithm lives in authz_rag_pipeline.filtering.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import replace

from dotenv import load_dotenv

from authz_rag_pipeline.core import AuthorizationError, PermissionChecker

# Exit code when a permission check fails mid-query
EXIT_AUTHZ_ERROR = 2


def _load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_checker_and_documents(dataset_path: str | None) -> tuple[PermissionChecker, list]:
    """
    Pick the checker and documents for a CLI query.

    With USE_SPICEDB=true, checks go to SpiceDB and the dataset file (if
    any) only supplies documents. Otherwise the dataset file, or the
    reference dataset, also supplies the in-memory relationships.
    """
    from authz_rag_pipeline.authz import get_permission_checker
    from authz_rag_pipeline.retrieval import get_reference_documents
    from authz_rag_pipeline.schemas import load_dataset

    use_spicedb = os.environ.get("USE_SPICEDB", "false").lower() in ("true", "1", "yes")

    if dataset_path is None:
        return get_permission_checker(use_spicedb=use_spicedb), get_reference_documents()

    dataset = load_dataset(dataset_path)
    if use_spicedb:
        return get_permission_checker(use_spicedb=True), dataset.to_documents()
    return dataset.to_checker(), dataset.to_documents()


def run_query_cli() -> int:
    """CLI entry point for a single filtered query."""
    from authz_rag_pipeline.filtering import FilterConfig, PermissionAwareFilter
    from authz_rag_pipeline.observability import init_tracing, shutdown_tracing

    _load_env()

    parser = argparse.ArgumentParser(description="Run a permission-aware query")
    parser.add_argument("text", nargs="?", default="", help="Query text (empty matches everything)")
    parser.add_argument("--user", required=True, help="Principal the query runs as")
    parser.add_argument("--dataset", help="JSON dataset file (default: reference dataset)")
    parser.add_argument("--permission", help="Permission to check (default: AUTHZ_PERMISSION or read)")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of text")
    args = parser.parse_args()

    config = FilterConfig.from_env()
    if args.permission:
        config = replace(config, permission=args.permission)

    checker, documents = _build_checker_and_documents(args.dataset)
    rag_filter = PermissionAwareFilter(checker, documents, config)

    init_tracing()
    try:
        results = rag_filter.query(args.user, args.text)
    except AuthorizationError as e:
        print(f"Query failed: {e}", file=sys.stderr)
        return EXIT_AUTHZ_ERROR
    finally:
        shutdown_tracing()

    if args.json:
        print(json.dumps([doc.to_dict() for doc in results], indent=2))
        return 0

    print(f"{len(results)} document(s) visible to {args.user!r} for {args.text!r}")
    for doc in results:
        print(f"  [{doc.id}] {doc.text}")
    return 0


def run_eval_cli() -> int:
    """CLI entry point for the access-control eval gate."""
    from authz_rag_pipeline.evals import run_access_eval_cli
    from authz_rag_pipeline.observability import init_tracing, shutdown_tracing

    _load_env()

    parser = argparse.ArgumentParser(description="Run access-control eval")
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    args = parser.parse_args()

    init_tracing()
    try:
        return run_access_eval_cli(quiet=args.quiet)
    finally:
        shutdown_tracing()


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        authz-rag query --user emilia roadmap   # Filtered query
        authz-rag eval                          # Run access eval gate
    """
    _load_env()
    _configure_logging()

    parser = argparse.ArgumentParser(
        description="Permission-aware retrieval filter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  query       Run one query as a user and print the visible documents
  eval        Run the access-control eval over the golden cases

Examples:
  authz-rag query --user charlie public
  authz-rag query --user emilia --dataset docs.json --json roadmap
  USE_SPICEDB=true authz-rag eval
        """,
    )

    parser.add_argument(
        "command",
        choices=["query", "eval"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "query": run_query_cli,
        "eval": run_eval_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
