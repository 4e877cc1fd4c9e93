"""
Tests for the review pipeline.

The provider client is mocked; everything else runs for real.
"""

import pytest

from ai_code_reviewer.config import ReviewConfig
from ai_code_reviewer.review.models import Assessment, IssueSeverity, ReviewResult
from ai_code_reviewer.review.pipeline import (
    CodeReviewPipeline,
    count_critical_issues,
    perform_full_review,
    perform_review,
)


def make_diff(*files: tuple[str, int]) -> str:
    """Build a diff with one hunk per file adding ``n`` lines."""
    parts = []
    for path, added in files:
        parts.append(f"diff --git a/{path} b/{path}")
        parts.append(f"--- a/{path}")
        parts.append(f"+++ b/{path}")
        parts.append(f"@@ -1,0 +1,{added} @@")
        parts.extend(f"+line {i}" for i in range(added))
    return "\n".join(parts) + "\n"


# =============================================================================
# UNIT TESTS: review_diff()
# =============================================================================

class TestReviewDiff:
    """Tests for diff reviews."""

    @pytest.mark.asyncio
    async def test_single_chunk_has_no_part_prompt(self, mock_client):
        result = await perform_review(mock_client, ReviewConfig(), make_diff(("a.py", 3)))

        assert result.overall_assessment == Assessment.APPROVE
        mock_client.review.assert_awaited_once()
        diff_text, custom_prompt = mock_client.review.await_args.args
        assert diff_text.startswith("diff --git a/a.py b/a.py")
        assert "+line 2" in diff_text
        assert custom_prompt is None

    @pytest.mark.asyncio
    async def test_everything_filtered_out(self, mock_client):
        result = await perform_review(
            mock_client, ReviewConfig(), make_diff(("package-lock.json", 10))
        )

        assert result.summary == "No files to review after applying filters"
        assert result.overall_assessment == Assessment.APPROVE
        mock_client.review.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_diff(self, mock_client):
        result = await perform_review(mock_client, ReviewConfig(), "")

        assert result.overall_assessment == Assessment.APPROVE
        mock_client.review.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_chunks_reviewed_in_order_with_part_prompt(self, mock_client):
        config = ReviewConfig(max_diff_size=5)
        mock_client.review.side_effect = [
            ReviewResult(summary="One.", overall_assessment=Assessment.APPROVE),
            ReviewResult(summary="Two.", overall_assessment=Assessment.COMMENT),
        ]

        result = await perform_review(mock_client, config, make_diff(("a.py", 4), ("b.py", 4)))

        assert result.summary == "One. Two."
        assert result.overall_assessment == Assessment.COMMENT
        prompts = [call.args[1] for call in mock_client.review.await_args_list]
        assert prompts[0].startswith("This is part 1 of 2 of the code changes.")
        assert prompts[0].endswith("Files in this chunk: a.py")
        assert prompts[1].endswith("Files in this chunk: b.py")

    @pytest.mark.asyncio
    async def test_failed_chunk_becomes_warning(self, mock_client):
        config = ReviewConfig(max_diff_size=5)
        mock_client.review.side_effect = [
            RuntimeError("rate limited"),
            ReviewResult(summary="Fine.", overall_assessment=Assessment.APPROVE),
        ]

        result = await perform_review(mock_client, config, make_diff(("a.py", 4), ("b.py", 4)))

        assert result.summary == "Failed to review chunk 1 Fine."
        assert result.overall_assessment == Assessment.COMMENT
        assert len(result.issues) == 1
        failure = result.issues[0]
        assert failure.severity == IssueSeverity.WARNING
        assert failure.title == "Review Error"
        assert failure.file == "a.py"
        assert "rate limited" in failure.description

    @pytest.mark.asyncio
    async def test_file_limit_keeps_largest(self, mock_client):
        config = ReviewConfig(max_files=2)

        await perform_review(
            mock_client, config, make_diff(("small.py", 1), ("big.py", 9), ("mid.py", 5))
        )

        diff_text = mock_client.review.await_args.args[0]
        assert "a/big.py" in diff_text
        assert "a/mid.py" in diff_text
        assert "small.py" not in diff_text

    def test_chunk_budget_comes_from_config(self, mock_client):
        pipeline = CodeReviewPipeline(mock_client, ReviewConfig(max_diff_size=123))

        assert pipeline.chunker.max_lines == 123


# =============================================================================
# UNIT TESTS: review_code()
# =============================================================================

class TestReviewCode:
    """Tests for full-repository reviews."""

    @pytest.mark.asyncio
    async def test_blank_code(self, mock_client):
        result = await perform_full_review(mock_client, "   \n")

        assert result.summary == "No code to review"
        mock_client.review.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_single_chunk_prompt(self, mock_client):
        code = "\n=== FILE: a.py ===\nprint('hi')\n"

        await perform_full_review(mock_client, code)

        sent, prompt = mock_client.review.await_args.args
        assert sent == code
        assert prompt.startswith("This is a full repository code review")

    @pytest.mark.asyncio
    async def test_failed_chunk_becomes_warning(self, mock_client):
        mock_client.review.side_effect = RuntimeError("boom")

        result = await perform_full_review(mock_client, "\n=== FILE: a.py ===\nx = 1\n")

        assert result.issues[0].title == "Review Error"
        assert "boom" in result.issues[0].description


def test_count_critical_issues(sample_result):
    assert count_critical_issues(sample_result) == 1
    assert count_critical_issues(ReviewResult(summary="clean")) == 0
