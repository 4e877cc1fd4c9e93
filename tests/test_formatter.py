"""Tests for markdown rendering of reviews."""

from ai_code_reviewer.formatter import (
    format_issue,
    format_review_comment,
    format_short_summary,
    issues_to_inline_comments,
)
from ai_code_reviewer.review.models import (
    Assessment,
    IssueCategory,
    IssueSeverity,
    ReviewIssue,
    ReviewResult,
)


class TestFormatReviewComment:
    """Tests for the full review comment."""

    def test_with_issues(self, sample_result):
        comment = format_review_comment(sample_result)

        assert comment.startswith("## 🤖 AI Code Review")
        assert "| 🔴 Critical | 1 |" in comment
        assert "<summary><strong>🔴 Critical Issues (1)</strong></summary>" in comment
        assert "### 👍 What's Good\n\n- Clear naming" in comment
        assert comment.endswith("**Overall: ❌ Changes Requested**")

    def test_without_issues(self):
        comment = format_review_comment(
            ReviewResult(summary="Tidy.", overall_assessment=Assessment.APPROVE)
        )

        assert "### ✅ No Issues Found" in comment
        assert "Overview" not in comment
        assert comment.endswith("**Overall: ✅ Approved**")

    def test_suggestions_collapsed(self):
        suggestion = ReviewIssue(
            severity=IssueSeverity.SUGGESTION, category=IssueCategory.STYLE, title="Rename"
        )

        comment = format_review_comment(ReviewResult(summary="s", issues=[suggestion]))

        assert "<details>\n<summary><strong>🟢 Suggestions (1)" in comment


class TestFormatIssue:
    """Tests for single issue rendering."""

    def test_location_and_suggestion(self, sample_issue):
        text = format_issue(sample_issue)

        assert text.startswith("### 🔴 SQL injection")
        assert "📍 `src/db.py:42`" in text
        assert "💡 **Suggestion:** Use parameterized queries." in text

    def test_file_without_line(self, sample_issue):
        issue = sample_issue.model_copy(update={"line": 0, "suggestion": None})

        text = format_issue(issue)

        assert "📍 `src/db.py`\n" in text
        assert "Suggestion" not in text


def test_short_summary(sample_result):
    warning = ReviewIssue(severity=IssueSeverity.WARNING, category=IssueCategory.LOGIC)
    result = sample_result.model_copy(update={"issues": sample_result.issues + [warning, warning]})

    assert format_short_summary(result) == "Found: 1 critical, 2 warnings"
    assert format_short_summary(ReviewResult(summary="s")) == "No issues found"


def test_inline_comments_need_a_line(sample_issue):
    unanchored = sample_issue.model_copy(update={"line": 0})

    comments = issues_to_inline_comments([sample_issue, unanchored])

    assert len(comments) == 1
    assert comments[0].path == "src/db.py"
    assert comments[0].line == 42
    assert comments[0].body.startswith("🔴 **SQL injection**")
