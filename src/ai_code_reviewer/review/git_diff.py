"""
Unified Diff Parser

Parses unified diff text into structured FileChange records and renders
records back into diff text for a review call.

The parser is a small state machine. Each state is immutable and ``step``
is a pure transition that returns the next state plus any file record the
line completed; ``finish`` flushes whatever is still open at end of input.
Malformed input never raises: unmatched headers degrade to empty paths or
skipped hunks.
"""

import re
from dataclasses import dataclass, replace

from .models import DiffHunk, FileChange

# Regex patterns for parsing diff output
FILE_HEADER = re.compile(r"^diff --git a/(.*) b/(.*)")
HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

# File metadata that carries nothing for the data model
METADATA_PREFIXES = (
    "index ",
    "---",
    "+++",
    "new file",
    "deleted file",
    "similarity index",
    "rename from",
    "rename to",
    "Binary files",
)


@dataclass(frozen=True, eq=False)
class _OpenHunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    # Cons list (previous, line), newest first; appending shares the tail
    tail: tuple | None

    def append(self, line: str) -> "_OpenHunk":
        return replace(self, tail=(self.tail, line))

    @property
    def lines(self) -> tuple[str, ...]:
        collected: list[str] = []
        node = self.tail
        while node is not None:
            node, line = node
            collected.append(line)
        return tuple(reversed(collected))

    def build(self) -> DiffHunk:
        return DiffHunk(
            old_start=self.old_start,
            old_lines=self.old_lines,
            new_start=self.new_start,
            new_lines=self.new_lines,
            content="\n".join(self.lines),
        )


@dataclass(frozen=True)
class _OpenFile:
    path: str
    hunks: tuple[DiffHunk, ...] = ()
    additions: int = 0
    deletions: int = 0

    def with_hunk(self, hunk: _OpenHunk) -> "_OpenFile":
        return replace(self, hunks=self.hunks + (hunk.build(),))

    def build(self) -> FileChange:
        return FileChange(
            path=self.path,
            additions=self.additions,
            deletions=self.deletions,
            hunks=list(self.hunks),
        )


@dataclass(frozen=True)
class BeforeFile:
    """No file header seen yet."""


@dataclass(frozen=True)
class InFile:
    """Inside a file, outside any hunk."""

    file: _OpenFile


@dataclass(frozen=True)
class InHunk:
    """Inside a hunk of the current file."""

    file: _OpenFile
    hunk: _OpenHunk


ParserState = BeforeFile | InFile | InHunk


def _open_hunk(header: str) -> _OpenHunk | None:
    match = HUNK_HEADER.match(header)
    if not match:
        return None
    return _OpenHunk(
        old_start=int(match.group(1)),
        old_lines=int(match.group(2) or "1"),
        new_start=int(match.group(3)),
        new_lines=int(match.group(4) or "1"),
        tail=(None, header),
    )


def _close_hunk(state: InFile | InHunk) -> _OpenFile:
    if isinstance(state, InHunk):
        return state.file.with_hunk(state.hunk)
    return state.file


def finish(state: ParserState) -> FileChange | None:
    """Flush the open file (and its open hunk) at a file boundary or end of input."""
    if isinstance(state, BeforeFile):
        return None
    return _close_hunk(state).build()


def step(state: ParserState, line: str) -> tuple[ParserState, FileChange | None]:
    """Advance the parser by one line.

    Returns:
        Tuple of (next_state, completed_file). ``completed_file`` is only set
        when ``line`` starts a new file and a previous file was open.
    """
    if line.startswith("diff --git"):
        match = FILE_HEADER.match(line)
        path = match.group(2) if match else ""
        return InFile(_OpenFile(path=path)), finish(state)

    if line.startswith(METADATA_PREFIXES) or isinstance(state, BeforeFile):
        return state, None

    if line.startswith("@@"):
        file = _close_hunk(state)
        hunk = _open_hunk(line)
        if hunk is None:
            return InFile(file), None
        return InHunk(file, hunk), None

    if isinstance(state, InFile):
        # Content outside a hunk is not attributed to anything
        return state, None

    file = state.file
    if line.startswith("+"):
        file = replace(file, additions=file.additions + 1)
    elif line.startswith("-"):
        file = replace(file, deletions=file.deletions + 1)
    return InHunk(file, state.hunk.append(line)), None


def parse_diff(diff_output: str) -> list[FileChange]:
    """Parse unified diff text into FileChange records, in input order."""
    files: list[FileChange] = []
    state: ParserState = BeforeFile()

    for line in diff_output.split("\n"):
        state, completed = step(state, line)
        if completed is not None:
            files.append(completed)

    last = finish(state)
    if last is not None:
        files.append(last)

    return files


def files_to_diff_string(files: list[FileChange]) -> str:
    """Render files back to unified diff text.

    Index hashes, modes and rename metadata are not reconstructed; the
    output is meant as review context, not as an applicable patch.
    """
    parts: list[str] = []

    for file in files:
        parts.append(f"diff --git a/{file.path} b/{file.path}")
        parts.append(f"--- a/{file.path}")
        parts.append(f"+++ b/{file.path}")
        parts.extend(hunk.content for hunk in file.hunks)

    return "\n".join(parts)


def get_line_number(hunk: DiffHunk, change_index: int) -> int:
    """New-side line number of the ``change_index``-th line after the hunk header.

    Removed lines do not exist on the new side and do not advance the count.
    """
    lines = hunk.content.split("\n")
    line_number = hunk.new_start

    for line in lines[1 : change_index + 1]:
        if not line.startswith("-"):
            line_number += 1

    return line_number
