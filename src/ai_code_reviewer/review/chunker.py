"""
Diff Chunker

Splits a change set into batches small enough for one provider call.
Files are never split: a single file larger than the budget gets a chunk
of its own.
"""

import re

from .models import DiffChunk, FileChange

# Section marker written by the full-repository file collector
FILE_MARKER = re.compile(r"\n?=== FILE: .+? ===")


def calculate_diff_size(files: list[FileChange]) -> int:
    """Total lines changed across files."""
    return sum(f.total_lines_changed for f in files)


class DiffChunker:
    """Group files (or file sections) into size-bounded chunks."""

    def __init__(self, max_lines: int = 3000, max_chars: int = 10000):
        """
        Initialize chunker.

        Args:
            max_lines: Line budget (additions + deletions) per diff chunk
            max_chars: Character budget per chunk of raw source code
        """
        self.max_lines = max_lines
        self.max_chars = max_chars

    def chunk_files(self, files: list[FileChange]) -> list[DiffChunk]:
        """
        Greedy bin-packing in input order.

        Every file lands in exactly one chunk and order is preserved across
        chunks. A chunk with several files never exceeds ``max_lines``.
        """
        chunks: list[DiffChunk] = []
        current: list[FileChange] = []
        current_size = 0

        for file in files:
            file_size = file.total_lines_changed

            # Oversized file goes alone
            if file_size > self.max_lines:
                if current:
                    chunks.append(DiffChunk(files=current))
                    current = []
                    current_size = 0
                chunks.append(DiffChunk(files=[file]))
                continue

            if current_size + file_size > self.max_lines and current:
                chunks.append(DiffChunk(files=current))
                current = []
                current_size = 0

            current.append(file)
            current_size += file_size

        if current:
            chunks.append(DiffChunk(files=current))

        return chunks

    def chunk_code(self, code_content: str) -> list[str]:
        """
        Split collected source files into chunks of at most ``max_chars``.

        Sections start at ``=== FILE: <path> ===`` markers and are never
        split. Content without any marker is returned as one chunk.
        """
        markers = list(FILE_MARKER.finditer(code_content))
        if not markers:
            return [code_content]

        sections: list[str] = []
        for i, marker in enumerate(markers):
            end = markers[i + 1].start() if i + 1 < len(markers) else len(code_content)
            section = code_content[marker.start() : end]
            if section.strip():
                sections.append(section)

        chunks: list[str] = []
        current = ""

        for section in sections:
            if len(current) + len(section) > self.max_chars and current:
                chunks.append(current)
                current = section
            else:
                current += section

        if current.strip():
            chunks.append(current)

        return chunks


def split_into_chunks(files: list[FileChange], max_chunk_size: int = 3000) -> list[DiffChunk]:
    """Partition files into chunks of at most ``max_chunk_size`` changed lines."""
    return DiffChunker(max_lines=max_chunk_size).chunk_files(files)


def split_code_into_chunks(code_content: str, max_chunk_size: int = 10000) -> list[str]:
    """Partition collected source code into chunks of at most ``max_chunk_size`` characters."""
    return DiffChunker(max_chars=max_chunk_size).chunk_code(code_content)
