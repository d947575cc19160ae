"""
Unit tests for learning_ai/utils/text_utils.py

Sentence chunking, keyword ranking, study-time estimation and the long
lesson digest used by the remote prompts.
"""

from learning_ai.utils.text_utils import (
    collapse_whitespace,
    estimate_study_minutes,
    extract_keywords,
    limit_text,
    prepare_lesson_context,
    sentence_chunks,
    split_sentences,
    unique_in_order,
)


# ---------------------------------------------------------------------------
# Small helpers
# ---------------------------------------------------------------------------

class TestHelpers:

    def test_unique_in_order(self):
        assert unique_in_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_collapse_whitespace(self):
        assert collapse_whitespace("  a \n\t b   c ") == "a b c"
        assert collapse_whitespace(None) == ""

    def test_limit_text(self):
        assert limit_text("  abcdef  ", 3) == "abc"
        assert limit_text("", 10) == ""


# ---------------------------------------------------------------------------
# Sentences
# ---------------------------------------------------------------------------

class TestSentences:

    def test_split_on_terminal_punctuation(self):
        assert split_sentences("One. Two! Three? Four") == ["One.", "Two!", "Three?", "Four"]

    def test_no_split_without_following_whitespace(self):
        assert split_sentences("Version 2.5 is out.") == ["Version 2.5 is out."]

    def test_chunks_drop_short_fragments(self):
        chunks = sentence_chunks("Too short. This sentence is long enough to keep.")
        assert chunks == ["This sentence is long enough to keep."]

    def test_fragment_of_exactly_twelve_chars_is_dropped(self):
        assert sentence_chunks("abcdefghijk.") == []
        assert sentence_chunks("abcdefghijkl.") == ["abcdefghijkl."]

    def test_chunks_truncate_to_120_chars(self):
        chunks = sentence_chunks("x" * 300)
        assert chunks == ["x" * 120]

    def test_chunks_dedupe_in_order(self):
        text = "Cells divide by mitosis. Plants need light. Cells divide by mitosis."
        assert sentence_chunks(text) == ["Cells divide by mitosis.", "Plants need light."]

    def test_empty_text(self):
        assert sentence_chunks("") == []
        assert sentence_chunks("   ") == []


# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------

class TestExtractKeywords:

    def test_ranks_by_frequency(self):
        text = "energy energy energy plant plant water"
        assert extract_keywords(text, 3) == ["energy", "plant", "water"]

    def test_ties_keep_first_seen_order(self):
        assert extract_keywords("zebra apple mango", 3) == ["zebra", "apple", "mango"]

    def test_drops_stop_words_and_short_tokens(self):
        keywords = extract_keywords("This lesson is about the cell and its nucleus")
        assert "this" not in keywords
        assert "lesson" not in keywords
        assert "about" not in keywords
        assert "the" not in keywords
        assert "cell" in keywords
        assert "nucleus" in keywords

    def test_lowercases_and_keeps_hyphens(self):
        assert extract_keywords("Light-Dependent LIGHT-dependent", 5) == ["light-dependent"]

    def test_limit(self):
        assert len(extract_keywords("alpha bravo charlie delta echo foxtrot", 2)) == 2

    def test_empty(self):
        assert extract_keywords("") == []


# ---------------------------------------------------------------------------
# Study minutes
# ---------------------------------------------------------------------------

class TestEstimateStudyMinutes:

    def _estimate(self, length):
        return estimate_study_minutes(length, minimum=20, maximum=120, chars_per_minute=240, min_chars=300)

    def test_short_text_hits_minimum(self):
        assert self._estimate(0) == 20

    def test_mid_length(self):
        # ceil(7200 / 240) = 30
        assert self._estimate(7200) == 30
        assert self._estimate(7201) == 31

    def test_long_text_hits_maximum(self):
        assert self._estimate(1_000_000) == 120


# ---------------------------------------------------------------------------
# Lesson context digest
# ---------------------------------------------------------------------------

class TestPrepareLessonContext:

    def test_short_text_passes_through_collapsed(self):
        assert prepare_lesson_context("Plants   need\nlight.") == "Plants need light."

    def test_long_text_becomes_chunk_digest(self):
        paragraph = "Mitochondria produce energy for the cell. Ribosomes build proteins quickly. "
        text = paragraph * 300

        context = prepare_lesson_context(text, max_chars=15000, chunk_size=5000)

        assert len(context) <= 15000
        lines = context.split("\n")
        assert lines[0].startswith("Chunk 1: Mitochondria produce energy for the cell.")
        assert "Keywords:" in lines[0]
        assert any(line.startswith("Chunk 2:") for line in lines)

    def test_digest_respects_smaller_budget(self):
        text = "Word " * 10000
        assert len(prepare_lesson_context(text, max_chars=500, chunk_size=1000)) <= 500
