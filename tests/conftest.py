"""Pytest configuration and shared fixtures for reviewer tests."""

import subprocess
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock

import pytest

from ai_code_reviewer.review.models import (
    Assessment,
    IssueCategory,
    IssueSeverity,
    ReviewIssue,
    ReviewResult,
)


# =============================================================================
# REVIEW FIXTURES
# =============================================================================

@pytest.fixture
def sample_issue() -> ReviewIssue:
    """A critical security issue tied to a line."""
    return ReviewIssue(
        severity=IssueSeverity.CRITICAL,
        category=IssueCategory.SECURITY,
        file="src/db.py",
        line=42,
        title="SQL injection",
        description="User input is interpolated into the query.",
        suggestion="Use parameterized queries.",
    )


@pytest.fixture
def sample_result(sample_issue: ReviewIssue) -> ReviewResult:
    """A review result that requests changes."""
    return ReviewResult(
        summary="Adds a user lookup endpoint.",
        issues=[sample_issue],
        positives=["Clear naming"],
        overall_assessment=Assessment.REQUEST_CHANGES,
    )


@pytest.fixture
def mock_client() -> AsyncMock:
    """Provider client whose review() always approves."""
    client = AsyncMock()
    client.review.return_value = ReviewResult(
        summary="Looks fine.",
        overall_assessment=Assessment.APPROVE,
    )
    return client


# =============================================================================
# GIT REPOSITORY FIXTURES
# =============================================================================

def _git(repo_path: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo_path, check=True, capture_output=True)


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Create a minimal temporary git repository on branch ``main``.

    Yields:
        Path to the initialized git repository
    """
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()

    _git(repo_path, "init")
    _git(repo_path, "config", "user.email", "test@test.com")
    _git(repo_path, "config", "user.name", "Test User")
    _git(repo_path, "symbolic-ref", "HEAD", "refs/heads/main")

    (repo_path / "initial.py").write_text("# Initial file\n")
    _git(repo_path, "add", ".")
    _git(repo_path, "commit", "-m", "Initial commit")

    yield repo_path
