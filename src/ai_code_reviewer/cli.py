#!/usr/bin/env python3
"""Command-line entry point.

Usage:
    git diff main | ai-code-review --diff -
    ai-code-review --git staged --fail-on-critical
    ai-code-review --full src/ lib/ --format json --output review.json
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import structlog

from .config import ReviewerSettings
from .errors import ReviewerError
from .formatter import format_review_comment, format_short_summary
from .providers import create_review_client
from .review.models import ReviewMode, ReviewResult, RunMode
from .review.pipeline import CodeReviewPipeline, count_critical_issues
from .review.sources import GitDiffSource, collect_files_for_review

logger = structlog.get_logger(__name__)

EXIT_CRITICAL = 1
EXIT_ERROR = 2


def configure_logging(verbose: bool = False) -> None:
    """Send structured logs to stderr; stdout carries the review."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-code-review",
        description="Review code changes with a language model",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--diff", metavar="FILE", help="Unified diff file ('-' for stdin)")
    source.add_argument(
        "--git",
        choices=[m.value for m in ReviewMode],
        help="Review changes in the local git repository",
    )
    source.add_argument("--full", nargs="+", metavar="PATH", help="Review source files under PATHs")
    parser.add_argument("--base", default="main", help="Base branch for --git branch")
    parser.add_argument("--repo", default=None, help="Repository path (default: cwd)")
    parser.add_argument("--config", default=None, help="Review config YAML file")
    parser.add_argument("--model", default=None, help="Model name (selects the provider)")
    parser.add_argument("--format", choices=["markdown", "json"], default="markdown")
    parser.add_argument("--output", default=None, help="Write the review to a file")
    parser.add_argument(
        "--fail-on-critical",
        action="store_true",
        default=None,
        help="Exit non-zero when critical issues are found",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def _settings_from_args(args: argparse.Namespace) -> ReviewerSettings:
    settings = ReviewerSettings.from_env()
    overrides: dict = {}
    if args.model:
        overrides["model"] = args.model
    if args.config:
        overrides["config_path"] = args.config
    if args.fail_on_critical is not None:
        overrides["fail_on_critical"] = args.fail_on_critical
    if args.full:
        overrides["mode"] = RunMode.FULL
        overrides["paths"] = args.full
    elif args.diff or args.git:
        overrides["mode"] = RunMode.PR
    return replace(settings, **overrides)


async def _read_diff(args: argparse.Namespace) -> str:
    if args.diff == "-":
        return sys.stdin.read()
    if args.diff:
        return Path(args.diff).read_text(encoding="utf-8", errors="replace")
    mode = ReviewMode(args.git or ReviewMode.AUTO.value)
    return await GitDiffSource(args.repo).get_diff(mode, args.base)


async def run(args: argparse.Namespace, settings: ReviewerSettings) -> ReviewResult | None:
    """Run one review and return its result (None when there is nothing to review)."""
    config = settings.review_config()
    provider = settings.provider()
    logger.info("Using provider", provider=provider.kind, model=settings.model, mode=settings.mode.value)

    pipeline = CodeReviewPipeline(create_review_client(provider, settings.model, config), config)

    if settings.mode == RunMode.FULL:
        code = collect_files_for_review(settings.paths, args.repo)
        if not code.strip():
            logger.warning("No files found to review")
            return None
        return await pipeline.review_code(code)

    diff = await _read_diff(args)
    if not diff.strip():
        logger.info("No diff content found, skipping review")
        return None
    return await pipeline.review_diff(diff)


def _render(result: ReviewResult, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    return format_review_comment(result)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    settings = _settings_from_args(args)

    try:
        result = asyncio.run(run(args, settings))
    except (ReviewerError, OSError, UnicodeError) as e:
        logger.error("Review failed", error=str(e))
        return EXIT_ERROR

    if result is None:
        return 0

    rendered = _render(result, args.format)
    if args.output:
        Path(args.output).write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)

    logger.info("Review complete", summary=format_short_summary(result))

    critical = count_critical_issues(result)
    if settings.fail_on_critical and critical:
        logger.error("Critical issues found", critical=critical)
        return EXIT_CRITICAL
    return 0


if __name__ == "__main__":
    sys.exit(main())
