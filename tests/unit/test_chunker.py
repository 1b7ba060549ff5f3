"""Unit tests for the sentence-aware chunker."""

from __future__ import annotations

import pytest

from sharepoint_indexer.models.document import TextChunk
from sharepoint_indexer.services.chunker import SentenceChunker
from tests.conftest import sentence_text


class TestSentenceChunker:
    @pytest.fixture()
    def chunker(self) -> SentenceChunker:
        return SentenceChunker()

    def test_default_max_chunk_size(self, chunker: SentenceChunker) -> None:
        assert chunker.max_chunk_size == 2000

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            SentenceChunker(max_chunk_size=0)

    def test_empty_text_yields_no_chunks(self, chunker: SentenceChunker) -> None:
        assert chunker.chunk("") == []
        assert chunker.chunk("   \n\t ") == []

    def test_short_text_is_one_trimmed_chunk(self, chunker: SentenceChunker) -> None:
        assert chunker.chunk("  Hello world. How are you?  ") == ["Hello world. How are you?"]

    def test_5000_chars_split_into_three_bounded_chunks(self, chunker: SentenceChunker) -> None:
        text = sentence_text(5000)
        chunks = chunker.chunk(text)
        assert len(chunks) == 3
        assert all(0 < len(chunk) <= 2000 for chunk in chunks)
        assert [len(chunk) for chunk in chunks] == [2000, 1999, 999]

    def test_chunks_reassemble_to_the_original_sentences(self, chunker: SentenceChunker) -> None:
        text = sentence_text(5000)
        chunks = chunker.chunk(text)
        assert " ".join(chunks) == text

    def test_sentences_are_never_split(self) -> None:
        chunker = SentenceChunker(max_chunk_size=25)
        chunks = chunker.chunk("One short line. Two short lines! Three? Four.")
        assert chunks == ["One short line.", "Two short lines! Three?", "Four."]

    def test_oversized_sentence_is_emitted_whole(self) -> None:
        chunker = SentenceChunker(max_chunk_size=10)
        long_sentence = "This sentence is far longer than ten characters."
        assert chunker.chunk(f"Hi. {long_sentence}") == ["Hi.", long_sentence]

    def test_text_without_terminator_is_one_chunk(self, chunker: SentenceChunker) -> None:
        assert chunker.chunk("Hello world") == ["Hello world"]
        assert chunker.chunk("  Hello world  ") == ["Hello world"]

    def test_unterminated_tail_is_kept(self, chunker: SentenceChunker) -> None:
        text = "First sentence. Trailing heading without period"
        assert chunker.chunk(text) == [text]

    @pytest.mark.parametrize(
        "text",
        [
            "First sentence. Trailing heading without period",
            "Name Region Revenue\nContoso EMEA 1200\nFabrikam APAC 900",
            "... leading ellipsis! Then a question? and a tail",
            sentence_text(3000) + " tail without a stop",
        ],
    )
    def test_chunks_cover_every_character(self, text: str) -> None:
        chunks = SentenceChunker(max_chunk_size=40).chunk(text)
        assert "".join("".join(chunks).split()) == "".join(text.split())

    def test_decimal_numbers_split_early(self) -> None:
        chunker = SentenceChunker(max_chunk_size=5)
        assert chunker.chunk("Pi is 3.14 exactly.") == ["Pi is 3.", "14 exactly."]


class TestToTextChunks:
    def test_wraps_with_one_based_indices(self) -> None:
        chunks = SentenceChunker.to_text_chunks(["a.", "b.", "c."])
        assert chunks == [
            TextChunk(index=1, total_chunks=3, content="a."),
            TextChunk(index=2, total_chunks=3, content="b."),
            TextChunk(index=3, total_chunks=3, content="c."),
        ]

    def test_empty_list(self) -> None:
        assert SentenceChunker.to_text_chunks([]) == []
