"""Markdown rendering of review results."""

from dataclasses import dataclass

from .review.models import Assessment, IssueSeverity, ReviewIssue, ReviewResult

SEVERITY_EMOJI = {
    IssueSeverity.CRITICAL: "🔴",
    IssueSeverity.WARNING: "🟡",
    IssueSeverity.SUGGESTION: "🟢",
}

ASSESSMENT_LABELS = {
    Assessment.APPROVE: "✅ Approved",
    Assessment.REQUEST_CHANGES: "❌ Changes Requested",
    Assessment.COMMENT: "💬 Comment",
}

# (severity, section title, expanded by default)
SECTIONS = [
    (IssueSeverity.CRITICAL, "Critical Issues", True),
    (IssueSeverity.WARNING, "Warnings", True),
    (IssueSeverity.SUGGESTION, "Suggestions", False),
]


@dataclass
class InlineComment:
    """A review comment anchored to a file line."""

    path: str
    line: int
    body: str


def format_issue(issue: ReviewIssue) -> str:
    """Render a single issue as a markdown block."""
    emoji = SEVERITY_EMOJI.get(issue.severity, "💬")
    if issue.file and issue.line > 0:
        location = f"`{issue.file}:{issue.line}`"
    elif issue.file:
        location = f"`{issue.file}`"
    else:
        location = ""

    formatted = f"### {emoji} {issue.title}\n\n"
    if location:
        formatted += f"📍 {location}\n\n"
    formatted += f"{issue.description}\n"
    if issue.suggestion:
        formatted += f"\n💡 **Suggestion:** {issue.suggestion}\n"
    return formatted


def format_review_comment(result: ReviewResult) -> str:
    """Render the full review as a markdown comment."""
    lines: list[str] = ["## 🤖 AI Code Review\n", "### Summary\n", result.summary, ""]

    if result.issues:
        lines.append("### 📊 Overview\n")
        lines.append("| Severity | Count |")
        lines.append("|----------|-------|")
        for severity, _, _ in SECTIONS:
            count = result.count(severity)
            if count:
                lines.append(f"| {SEVERITY_EMOJI[severity]} {severity.value.title()} | {count} |")
        lines.append("")

        lines.append("### 🔍 Issues Found\n")
        for severity, title, expanded in SECTIONS:
            grouped = [i for i in result.issues if i.severity == severity]
            if not grouped:
                continue
            lines.append("<details open>" if expanded else "<details>")
            lines.append(
                f"<summary><strong>{SEVERITY_EMOJI[severity]} {title} ({len(grouped)})"
                "</strong></summary>\n"
            )
            lines.extend(format_issue(issue) for issue in grouped)
            lines.append("</details>\n")
    else:
        lines.append("### ✅ No Issues Found\n")
        lines.append("The code looks good! No significant issues were detected.\n")

    if result.positives:
        lines.append("### 👍 What's Good\n")
        lines.extend(f"- {positive}" for positive in result.positives)
        lines.append("")

    lines.append("---\n")
    lines.append(f"**Overall: {ASSESSMENT_LABELS[result.overall_assessment]}**")
    return "\n".join(lines)


def format_short_summary(result: ReviewResult) -> str:
    """One-line issue count summary."""
    parts: list[str] = []
    critical = result.count(IssueSeverity.CRITICAL)
    warnings = result.count(IssueSeverity.WARNING)
    suggestions = result.count(IssueSeverity.SUGGESTION)

    if critical:
        parts.append(f"{critical} critical")
    if warnings:
        parts.append(f"{warnings} warnings")
    if suggestions:
        parts.append(f"{suggestions} suggestions")

    if not parts:
        return "No issues found"
    return f"Found: {', '.join(parts)}"


def issues_to_inline_comments(issues: list[ReviewIssue]) -> list[InlineComment]:
    """Issues that point at a concrete line, rendered as inline comments."""
    comments: list[InlineComment] = []
    for issue in issues:
        if not issue.file or issue.line <= 0:
            continue
        body = f"{SEVERITY_EMOJI.get(issue.severity, '💬')} **{issue.title}**\n\n{issue.description}"
        if issue.suggestion:
            body += f"\n\n💡 **Suggestion:** {issue.suggestion}"
        comments.append(InlineComment(path=issue.file, line=issue.line, body=body))
    return comments
