"""
Review Pipeline

Runs a review end to end:
1. Parse the diff and filter/limit the files (no LLM)
2. Partition into chunks and review each chunk with the provider
3. Merge the chunk results into one review

Chunks are reviewed one at a time and merged in chunk order. A failed chunk
is folded into the review as a warning instead of aborting it.
"""

import time

import structlog

from ..config import ReviewConfig
from ..providers.base import ReviewClient
from .chunker import DiffChunker, calculate_diff_size
from .file_filter import FileFilter, limit_files
from .git_diff import files_to_diff_string, parse_diff
from .merger import empty_result, error_result, merge_review_results
from .models import DiffChunk, IssueSeverity, ReviewResult

logger = structlog.get_logger(__name__)

FULL_REVIEW_CHUNK_CHARS = 10000

FULL_REVIEW_PROMPT = (
    "Review all the code provided and identify any issues.\n"
    'Each file is marked with "=== FILE: path ===" header.'
)


class CodeReviewPipeline:
    """Diff → chunks → provider reviews → merged result."""

    def __init__(self, client: ReviewClient, config: ReviewConfig | None = None):
        """
        Initialize the pipeline.

        Args:
            client: Provider client used for each chunk
            config: Review config (filters, file and chunk limits)
        """
        self.client = client
        self.config = config or ReviewConfig()
        self.file_filter = FileFilter.from_config(self.config)
        self.chunker = DiffChunker(
            max_lines=self.config.max_diff_size,
            max_chars=FULL_REVIEW_CHUNK_CHARS,
        )

    async def review_diff(self, raw_diff: str) -> ReviewResult:
        """Review unified diff text."""
        start_time = time.time()

        files = parse_diff(raw_diff)
        logger.info("Parsed diff", files=len(files))

        files = self.file_filter.filter(files)
        logger.info("Applied file filters", files=len(files))

        if not files:
            return empty_result("No files to review after applying filters")

        if len(files) > self.config.max_files:
            logger.warning(
                "Too many files, limiting", files=len(files), max_files=self.config.max_files
            )
            files = limit_files(files, self.config.max_files)

        chunks = self.chunker.chunk_files(files)
        logger.info("Split into chunks", chunks=len(chunks), lines=calculate_diff_size(files))

        results: list[ReviewResult] = []
        for index, chunk in enumerate(chunks):
            logger.info(
                "Processing chunk",
                chunk=index + 1,
                total=len(chunks),
                lines=chunk.total_lines,
            )
            results.append(await self._review_chunk(chunk, index, len(chunks)))

        merged = merge_review_results(results)
        logger.info(
            "Review complete",
            issues=len(merged.issues),
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return merged

    async def review_code(self, code_content: str) -> ReviewResult:
        """Review collected source files (full-repository mode)."""
        if not code_content or not code_content.strip():
            return empty_result("No code to review")

        chunks = self.chunker.chunk_code(code_content)
        logger.info("Split code into chunks", chunks=len(chunks))

        results: list[ReviewResult] = []
        for index, chunk in enumerate(chunks):
            logger.info("Processing chunk", chunk=index + 1, total=len(chunks), chars=len(chunk))
            if len(chunks) > 1:
                prompt = f"This is part {index + 1} of {len(chunks)} of a full repository code review.\n"
            else:
                prompt = "This is a full repository code review (not a PR diff).\n"

            try:
                result = await self.client.review(chunk, prompt + FULL_REVIEW_PROMPT)
            except Exception as e:
                logger.error("Failed to review chunk", chunk=index + 1, error=str(e))
                result = error_result(
                    summary=f"Failed to review chunk {index + 1}: {e}",
                    description=f"Failed to get AI review for chunk {index + 1}: {e}",
                )
            else:
                logger.info("Chunk complete", chunk=index + 1, issues=len(result.issues))
            results.append(result)

        merged = merge_review_results(results)
        logger.info("Full review complete", issues=len(merged.issues))
        return merged

    async def _review_chunk(self, chunk: DiffChunk, index: int, total: int) -> ReviewResult:
        """Review one chunk, turning provider failures into an error result."""
        diff_text = files_to_diff_string(chunk.files)

        custom_prompt = None
        if total > 1:
            custom_prompt = (
                f"This is part {index + 1} of {total} of the code changes. "
                f"Review this part independently. Files in this chunk: {', '.join(chunk.paths)}"
            )

        try:
            return await self.client.review(diff_text, custom_prompt)
        except Exception as e:
            logger.error("Failed to process chunk", chunk=index + 1, error=str(e))
            return error_result(
                summary=f"Failed to review chunk {index + 1}",
                description=f"Failed to get AI review for this chunk: {e}",
                file=chunk.files[0].path if chunk.files else "",
            )


async def perform_review(
    client: ReviewClient, config: ReviewConfig, raw_diff: str
) -> ReviewResult:
    """Review unified diff text with the given client."""
    return await CodeReviewPipeline(client, config).review_diff(raw_diff)


async def perform_full_review(
    client: ReviewClient, code_content: str, config: ReviewConfig | None = None
) -> ReviewResult:
    """Review collected source code with the given client."""
    return await CodeReviewPipeline(client, config).review_code(code_content)


def count_critical_issues(result: ReviewResult) -> int:
    """Number of critical issues in a review."""
    return result.count(IssueSeverity.CRITICAL)
