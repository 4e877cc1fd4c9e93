"""
Unit tests for diff and source-code chunking.
"""

import pytest

from ai_code_reviewer.review.chunker import (
    calculate_diff_size,
    split_code_into_chunks,
    split_into_chunks,
)
from ai_code_reviewer.review.models import FileChange


def sized(path: str, lines: int) -> FileChange:
    return FileChange(path=path, additions=lines)


# =============================================================================
# UNIT TESTS: chunk_files()
# =============================================================================

class TestChunkFiles:
    """Tests for greedy file partitioning."""

    def test_oversized_file_gets_own_chunk(self):
        """A file above the budget is isolated; the rest still fit."""
        files = [sized("a.py", 150), sized("b.py", 300), sized("c.py", 225)]

        chunks = split_into_chunks(files, max_chunk_size=200)

        assert len(chunks) >= 2
        assert [c.paths for c in chunks] == [["a.py"], ["b.py"], ["c.py"]]

    def test_packs_small_files_together(self):
        files = [sized("a.py", 50), sized("b.py", 50), sized("c.py", 50)]

        chunks = split_into_chunks(files, max_chunk_size=100)

        assert [c.paths for c in chunks] == [["a.py", "b.py"], ["c.py"]]
        assert [c.total_lines for c in chunks] == [100, 50]

    @pytest.mark.parametrize("budget", [1, 10, 100, 1000])
    def test_coverage_order_and_bound(self, budget):
        """Every file appears once, in order; multi-file chunks fit the budget."""
        files = [sized(f"f{i}.py", size) for i, size in enumerate([5, 90, 12, 400, 0, 33, 7, 250])]

        chunks = split_into_chunks(files, max_chunk_size=budget)

        assert [p for c in chunks for p in c.paths] == [f.path for f in files]
        for chunk in chunks:
            assert chunk.files
            if len(chunk.files) > 1:
                assert chunk.total_lines <= budget

    def test_empty_input(self):
        assert split_into_chunks([]) == []

    def test_calculate_diff_size(self):
        files = [FileChange(path="a.py", additions=3, deletions=2), sized("b.py", 10)]

        assert calculate_diff_size(files) == 15


# =============================================================================
# UNIT TESTS: chunk_code()
# =============================================================================

class TestChunkCode:
    """Tests for splitting collected source files."""

    def _section(self, path: str, size: int) -> str:
        return f"\n=== FILE: {path} ===\n{'x' * size}\n"

    def test_small_content_is_one_chunk(self):
        code = self._section("a.py", 10) + self._section("b.py", 10)

        assert split_code_into_chunks(code, max_chunk_size=1000) == [code]

    def test_splits_on_file_markers(self):
        first, second, third = (self._section(p, 40) for p in ("a.py", "b.py", "c.py"))

        chunks = split_code_into_chunks(first + second + third, max_chunk_size=130)

        assert "".join(chunks) == first + second + third
        assert len(chunks) == 2
        assert chunks[0] == first + second
        assert chunks[1] == third

    def test_sections_are_never_split(self):
        big = self._section("big.py", 500)

        chunks = split_code_into_chunks(big + self._section("a.py", 5), max_chunk_size=100)

        assert chunks[0] == big

    def test_content_without_markers(self):
        assert split_code_into_chunks("print('hi')\n", max_chunk_size=3) == ["print('hi')\n"]
