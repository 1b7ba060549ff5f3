"""Sentence-aware text chunking.

Splits extracted text into chunks no longer than ``max_chunk_size``
characters without breaking a sentence, so every chunk embeds a complete
thought.  Sentences are found with a deliberately simple heuristic: a run of
non-terminator characters followed by one or more of ``.``, ``!`` or ``?``.
Text after the last terminator is one more token, so every character of
the input lands in some chunk.

Known limitations of the heuristic:

- Decimal numbers and abbreviations split early ("3.14", "Mr. Smith").
- A single sentence longer than ``max_chunk_size`` is emitted whole.
"""

from __future__ import annotations

import re

import structlog

from sharepoint_indexer.models.document import TextChunk

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_CHUNK_SIZE = 2000

_SENTENCE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+")


class SentenceChunker:
    """Greedy sentence accumulator.

    Parameters
    ----------
    max_chunk_size:
        Upper bound, in characters, on a chunk built from more than one
        sentence (default 2000).
    """

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> None:
        if max_chunk_size < 1:
            raise ValueError("max_chunk_size must be positive")
        self._max_chunk_size = max_chunk_size

    @property
    def max_chunk_size(self) -> int:
        return self._max_chunk_size

    def chunk(self, text: str) -> list[str]:
        """Split *text* into trimmed, non-empty chunks in source order."""
        if not text:
            return []

        chunks: list[str] = []
        buffer = ""
        for token in _SENTENCE.findall(text):
            if buffer and len(buffer) + len(token) > self._max_chunk_size:
                chunks.append(buffer.strip())
                buffer = ""
            buffer += token

        if buffer.strip():
            chunks.append(buffer.strip())

        # A whitespace-only buffer can be flushed mid-stream; keep chunks non-empty.
        chunks = [chunk for chunk in chunks if chunk]

        if chunks:
            logger.info(
                "chunking_complete",
                characters=len(text),
                total_chunks=len(chunks),
                average_chunk_size=round(sum(len(c) for c in chunks) / len(chunks)),
                max_chunk_size=self._max_chunk_size,
            )
        else:
            logger.info("chunking_produced_no_chunks", characters=len(text))
        return chunks

    @staticmethod
    def to_text_chunks(chunks: list[str]) -> list[TextChunk]:
        """Wrap chunk strings into 1-based :class:`TextChunk` records."""
        total = len(chunks)
        return [
            TextChunk(index=position, total_chunks=total, content=content)
            for position, content in enumerate(chunks, start=1)
        ]
