"""Tests for text chunking."""

import pytest

from milestone_search.core.chunking import (
    chunk_text,
    prepare_text_for_chunking,
    validate_chunking_options,
)
from milestone_search.core.errors import ChunkingError
from milestone_search.core.models.content import ChunkingOptions

LOREM = (
    "Incremental backups copy only the blocks that changed since the previous run. "
    "Encryption at rest protects the snapshots stored in the object bucket, while "
    "transport encryption covers replication traffic between regions. Retention "
    "policies decide how long each generation of snapshots is kept before pruning. "
) * 8


class TestShortText:
    def test_returns_text_unchanged(self):
        assert chunk_text("short text", ChunkingOptions(1000, 100)) == ["short text"]

    def test_exactly_chunk_size(self):
        text = "x" * 50
        assert chunk_text(text, ChunkingOptions(50, 10)) == [text]

    def test_surrounding_whitespace_kept(self):
        assert chunk_text("  padded  ", ChunkingOptions(100, 10)) == ["  padded  "]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_yields_nothing(self, text: str):
        assert chunk_text(text, ChunkingOptions(100, 10)) == []


class TestWindows:
    def test_repeated_words_scenario(self):
        text = "a " * 600
        chunks = chunk_text(text, ChunkingOptions(chunk_size=500, chunk_overlap=50))

        assert len(chunks) == 3
        assert [len(c) for c in chunks] == [499, 497, 301]
        for chunk in chunks:
            assert chunk.startswith("a") and chunk.endswith("a")

    def test_breaks_at_word_boundary_past_midpoint(self):
        text = "aaaa bbbb cccc dddd eeee"
        chunks = chunk_text(text, ChunkingOptions(chunk_size=12, chunk_overlap=0))

        assert chunks == ["aaaa bbbb", "cccc dddd", "eeee"]

    def test_hard_cut_without_spaces(self):
        text = "x" * 25
        chunks = chunk_text(text, ChunkingOptions(chunk_size=10, chunk_overlap=0))

        assert chunks == ["x" * 10, "x" * 10, "x" * 5]

    def test_hard_cut_when_space_before_midpoint(self):
        text = "ab cdefghijklmnop"
        chunks = chunk_text(text, ChunkingOptions(chunk_size=10, chunk_overlap=0))

        assert chunks[0] == "ab cdefghi"

    def test_overlap_on_hard_cuts(self):
        text = "abcdefghij" * 3
        chunks = chunk_text(text, ChunkingOptions(chunk_size=10, chunk_overlap=3))

        assert chunks == [text[0:10], text[7:17], text[14:24], text[21:30]]

    def test_chunks_cover_text(self):
        options = ChunkingOptions(chunk_size=200, chunk_overlap=40)
        chunks = chunk_text(LOREM, options)

        assert len(chunks) > 1
        position = 0
        for chunk in chunks:
            assert chunk
            assert len(chunk) <= options.chunk_size
            found = LOREM.find(chunk, max(0, position - options.chunk_overlap - 1))
            assert found != -1
            # No gap between consecutive chunks beyond stripped whitespace
            assert LOREM[position:found].strip() == ""
            position = found + len(chunk)
        assert LOREM[position:].strip() == ""


class TestValidation:
    @pytest.mark.parametrize(
        ("size", "overlap"),
        [(0, 0), (-5, 0), (10, -1), (10, 10), (10, 12)],
    )
    def test_invalid_options(self, size: int, overlap: int):
        with pytest.raises(ChunkingError):
            validate_chunking_options(ChunkingOptions(size, overlap))

    def test_invalid_options_rejected_for_short_text(self):
        with pytest.raises(ChunkingError):
            chunk_text("tiny", ChunkingOptions(10, 10))

    def test_non_advancing_window_raises(self):
        # Word break at 6 leaves a 6 char chunk with overlap 8
        text = "aaaaaa bbbbbbbbbbbbb"
        with pytest.raises(ChunkingError, match="does not advance"):
            chunk_text(text, ChunkingOptions(chunk_size=10, chunk_overlap=8))


def test_prepare_text_for_chunking():
    assert prepare_text_for_chunking("  a \n\n b\t c  ") == "a b c"
