"""
Diff Review Core

Parses unified diffs, filters and batches the changed files, and merges
per-batch review results. Everything here is synchronous and never raises
on malformed input.
"""

from .chunker import DiffChunker, calculate_diff_size, split_code_into_chunks, split_into_chunks
from .file_filter import FileFilter, compile_glob, filter_files, limit_files, should_ignore_file
from .git_diff import files_to_diff_string, get_line_number, parse_diff
from .merger import error_result, merge_review_results
from .models import (
    Assessment,
    DiffChunk,
    DiffHunk,
    FileChange,
    IssueCategory,
    IssueSeverity,
    ReviewIssue,
    ReviewMode,
    ReviewResult,
    RunMode,
)

__all__ = [
    "Assessment",
    "DiffChunk",
    "DiffChunker",
    "DiffHunk",
    "FileChange",
    "FileFilter",
    "IssueCategory",
    "IssueSeverity",
    "ReviewIssue",
    "ReviewMode",
    "ReviewResult",
    "RunMode",
    "calculate_diff_size",
    "compile_glob",
    "error_result",
    "files_to_diff_string",
    "filter_files",
    "get_line_number",
    "limit_files",
    "merge_review_results",
    "parse_diff",
    "should_ignore_file",
    "split_code_into_chunks",
    "split_into_chunks",
]
