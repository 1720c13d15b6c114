"""Text chunking for embedding."""

import logging
import re

from .errors import ChunkingError
from .models.content import ChunkingOptions

logger = logging.getLogger(__name__)

# A word-boundary cut is only taken past this fraction of the window
MIN_BREAK_RATIO = 0.5


def validate_chunking_options(options: ChunkingOptions) -> None:
    """Reject options the chunker cannot make progress with.

    Raises:
        ChunkingError: If size is not positive, overlap is negative,
            or overlap is not smaller than size.
    """
    if options.chunk_size <= 0:
        raise ChunkingError(f"Chunk size must be positive, got {options.chunk_size}")
    if options.chunk_overlap < 0:
        raise ChunkingError(
            f"Chunk overlap must be non-negative, got {options.chunk_overlap}"
        )
    if options.chunk_overlap >= options.chunk_size:
        raise ChunkingError(
            f"Chunk overlap ({options.chunk_overlap}) must be less than "
            f"chunk size ({options.chunk_size})"
        )


def chunk_text(text: str, options: ChunkingOptions) -> list[str]:
    """Split text into overlapping chunks of at most ``chunk_size`` chars.

    Windows are cut at the last space when that space lies past the window
    midpoint. The next window starts ``chunk_overlap`` characters before the
    end of the emitted (possibly shortened) chunk.

    Args:
        text: Text to chunk.
        options: Chunk size and overlap.

    Returns:
        Non-empty, stripped chunks in document order. Text that fits in one
        window is returned unchanged.

    Raises:
        ChunkingError: On invalid options or when a window would not advance.
    """
    validate_chunking_options(options)
    chunk_size = options.chunk_size
    chunk_overlap = options.chunk_overlap

    if not text.strip():
        return []

    if len(text) <= chunk_size:
        return [text]

    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunk = text[start:end]

        if end < len(text):
            last_space = chunk.rfind(" ")
            if last_space > chunk_size * MIN_BREAK_RATIO:
                chunk = chunk[:last_space]

        chunks.append(chunk.strip())

        if end == len(text):
            break

        advance = len(chunk) - chunk_overlap
        if advance <= 0:
            raise ChunkingError(
                f"Chunking stalled at offset {start}: chunk of {len(chunk)} chars "
                f"with overlap {chunk_overlap} does not advance"
            )
        start += advance

    result = [c for c in chunks if c]
    logger.debug(f"Chunked {len(text)} chars into {len(result)} chunks")
    return result


def prepare_text_for_chunking(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"\n\s*\n", "\n", text)
    return text.strip()
