"""
Review Sources

Where review input comes from: a local git repository (diff text) or a set
of source paths (full-repository review).
"""

import asyncio
import os
from pathlib import Path

import structlog

from ..errors import GitError
from .models import ReviewMode

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = {
    ".js", ".ts", ".jsx", ".tsx", ".mjs", ".cjs",
    ".py", ".pyw",
    ".go",
    ".rs",
    ".java", ".kt", ".kts",
    ".c", ".cpp", ".cc", ".h", ".hpp",
    ".cs",
    ".rb",
    ".php",
    ".swift",
    ".scala",
    ".vue", ".svelte",
}

IGNORED_DIRS = {"node_modules", ".git", "dist", "build", "__pycache__", "vendor", ".venv", "venv"}

MAX_COLLECTED_FILES = 50
MAX_COLLECTED_FILE_BYTES = 100_000


class GitDiffSource:
    """Read diff text from a local git repository."""

    def __init__(self, repo_path: str | Path | None = None):
        """Initialize with optional repo path (defaults to cwd)."""
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()

    async def get_diff(self, mode: ReviewMode, base_branch: str = "main") -> str:
        """Get raw diff based on mode."""
        if mode == ReviewMode.AUTO:
            mode = await self.detect_mode()

        logger.debug("Reading git diff", mode=mode.value, repo=str(self.repo_path))
        return await self._run_git(self._build_diff_command(mode, base_branch))

    async def get_file_list(self, mode: ReviewMode, base_branch: str = "main") -> list[str]:
        """Get list of changed files only."""
        if mode == ReviewMode.AUTO:
            mode = await self.detect_mode()

        cmd = self._build_diff_command(mode, base_branch) + ["--name-only"]
        output = await self._run_git(cmd)
        return [f.strip() for f in output.split("\n") if f.strip()]

    async def detect_mode(self) -> ReviewMode:
        """Staged changes first, then unstaged, then the branch."""
        if await self.get_file_list(ReviewMode.STAGED):
            return ReviewMode.STAGED

        if await self.get_file_list(ReviewMode.UNSTAGED):
            return ReviewMode.UNSTAGED

        return ReviewMode.BRANCH

    def _build_diff_command(self, mode: ReviewMode, base_branch: str = "main") -> list[str]:
        """Build git diff command for mode."""
        if mode == ReviewMode.STAGED:
            return ["diff", "--cached"]
        if mode == ReviewMode.BRANCH:
            return ["diff", f"{base_branch}..HEAD"]
        return ["diff"]

    async def _run_git(self, args: list[str]) -> str:
        """Run git command and return output."""
        cmd = ["git", "-C", str(self.repo_path)] + args

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()

        if proc.returncode != 0:
            error_msg = stderr.decode(errors="replace").strip()
            # Don't raise for empty diffs
            if "fatal" not in error_msg.lower():
                logger.debug("git returned non-zero", args=args, error=error_msg)
                return ""
            raise GitError(f"Git command failed: {error_msg}")

        return stdout.decode(errors="replace")


def _read_source(path: Path) -> str | None:
    try:
        size = path.stat().st_size
        if size > MAX_COLLECTED_FILE_BYTES:
            logger.warning("File too large, skipping", path=str(path), size=size)
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read file", path=str(path), error=str(e))
        return None


def _walk_sources(directory: Path) -> list[Path]:
    found: list[Path] = []
    for current, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIRS)
        for name in sorted(files):
            if Path(name).suffix.lower() in SUPPORTED_EXTENSIONS:
                found.append(Path(current) / name)
    return found


def collect_files_for_review(paths: list[str], root: str | Path | None = None) -> str:
    """
    Concatenate source files under ``paths`` for a full-repository review.

    Each file becomes a ``=== FILE: <path> ===`` section. Unsupported
    extensions, vendored/build directories and files over 100 KB are
    skipped; at most 50 files are collected.
    """
    base = Path(root) if root else Path.cwd()
    sections: list[str] = []

    for search_path in paths:
        full_path = (base / search_path).resolve()

        if not full_path.exists():
            logger.warning("Path not found", path=search_path)
            continue

        if full_path.is_file():
            candidates = [full_path] if full_path.suffix.lower() in SUPPORTED_EXTENSIONS else []
        else:
            candidates = _walk_sources(full_path)

        for candidate in candidates:
            if len(sections) >= MAX_COLLECTED_FILES:
                logger.warning("Reached maximum file limit, some files skipped", limit=MAX_COLLECTED_FILES)
                break
            content = _read_source(candidate)
            if content:
                try:
                    label = candidate.relative_to(base.resolve()).as_posix()
                except ValueError:
                    label = candidate.as_posix()
                sections.append(f"\n=== FILE: {label} ===\n{content}\n")

    logger.info("Collected files for review", count=len(sections))
    return "".join(sections)
