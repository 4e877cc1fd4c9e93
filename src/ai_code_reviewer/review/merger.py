"""
Result Merger

Combines per-chunk review results into one review. Results must be passed
in chunk submission order; summaries and issues keep that order.
"""

from .models import (
    Assessment,
    IssueCategory,
    IssueSeverity,
    ReviewIssue,
    ReviewResult,
)

REVIEW_ERROR_TITLE = "Review Error"


def empty_result(summary: str = "No files to review") -> ReviewResult:
    """An approving result for a change set with nothing to review."""
    return ReviewResult(summary=summary, overall_assessment=Assessment.APPROVE)


def error_result(summary: str, description: str, file: str = "") -> ReviewResult:
    """Stand-in result for a chunk whose provider call failed."""
    return ReviewResult(
        summary=summary,
        issues=[
            ReviewIssue(
                severity=IssueSeverity.WARNING,
                category=IssueCategory.DOCUMENTATION,
                file=file,
                line=0,
                title=REVIEW_ERROR_TITLE,
                description=description,
            )
        ],
        overall_assessment=Assessment.COMMENT,
    )


def merge_assessments(results: list[ReviewResult]) -> Assessment:
    """Most severe verdict wins: request_changes > comment > approve."""
    overall = Assessment.APPROVE
    for result in results:
        if result.overall_assessment == Assessment.REQUEST_CHANGES:
            return Assessment.REQUEST_CHANGES
        if result.overall_assessment == Assessment.COMMENT:
            overall = Assessment.COMMENT
    return overall


def merge_review_results(results: list[ReviewResult]) -> ReviewResult:
    """Merge chunk results into a single review."""
    if not results:
        return empty_result()

    if len(results) == 1:
        return results[0]

    positives: dict[str, None] = {}
    for result in results:
        positives.update(dict.fromkeys(result.positives))

    return ReviewResult(
        summary=" ".join(r.summary for r in results),
        issues=[issue for r in results for issue in r.issues],
        positives=list(positives),
        overall_assessment=merge_assessments(results),
    )
