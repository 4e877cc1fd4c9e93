"""
Data models for the review pipeline.

Diff records (hunks, files, chunks) are plain dataclasses produced by the
parser. Review results are pydantic models because they are validated from
provider JSON.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ReviewMode(str, Enum):
    """Which local changes to review."""

    STAGED = "staged"  # git diff --cached
    UNSTAGED = "unstaged"  # git diff
    BRANCH = "branch"  # git diff main..HEAD
    AUTO = "auto"  # Auto-detect best mode


class RunMode(str, Enum):
    """Review a diff or a whole set of source files."""

    PR = "pr"
    FULL = "full"


class IssueSeverity(str, Enum):
    """How severe is the issue."""

    CRITICAL = "critical"  # Must fix
    WARNING = "warning"  # Should fix
    SUGGESTION = "suggestion"  # Nice to have


class IssueCategory(str, Enum):
    """What kind of problem the issue describes."""

    SECURITY = "security"
    PERFORMANCE = "performance"
    LOGIC = "logic"
    STYLE = "style"
    BEST_PRACTICE = "best-practice"
    DOCUMENTATION = "documentation"


class Assessment(str, Enum):
    """Overall verdict on a change set."""

    APPROVE = "approve"
    REQUEST_CHANGES = "request_changes"
    COMMENT = "comment"


@dataclass(frozen=True)
class DiffHunk:
    """A single hunk within a diff."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    content: str  # header line included


@dataclass
class FileChange:
    """Diff for a single file."""

    path: str
    additions: int = 0
    deletions: int = 0
    hunks: list[DiffHunk] = field(default_factory=list)

    @property
    def total_lines_changed(self) -> int:
        """Total lines affected."""
        return self.additions + self.deletions


@dataclass
class DiffChunk:
    """A batch of files destined for one review call."""

    files: list[FileChange] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        return sum(f.total_lines_changed for f in self.files)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]


class ReviewIssue(BaseModel):
    """A single issue found during review."""

    severity: IssueSeverity
    category: IssueCategory
    file: str = ""
    line: int = 0
    title: str = ""
    description: str = ""
    suggestion: str | None = None

    @field_validator("line", mode="before")
    @classmethod
    def _line_or_zero(cls, value: Any) -> Any:
        # Providers send null when an issue is not tied to a line
        return 0 if value is None else value


class ReviewResult(BaseModel):
    """Complete review output for one chunk or for the merged review."""

    summary: str
    issues: list[ReviewIssue] = Field(default_factory=list)
    positives: list[str] = Field(default_factory=list)
    overall_assessment: Assessment = Assessment.COMMENT

    def count(self, severity: IssueSeverity) -> int:
        """Number of issues with the given severity."""
        return sum(1 for issue in self.issues if issue.severity == severity)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return self.model_dump(mode="json", exclude_none=True)
