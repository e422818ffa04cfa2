"""Unit tests for the pure text helpers."""

import re

import pytest

from wordplay.core.domain.text_ops import (
    analyze_document,
    count_words,
    extract_structure,
    grep_text,
    replace_text,
    split_paragraphs,
)

SAMPLE = "# Title\n\nThe weather is beutiful today.\n\nI want to go swiming. The lake is warm!"


class TestCounting:
    def test_count_words_ignores_extra_whitespace(self):
        assert count_words("  one   two\nthree ") == 3
        assert count_words("") == 0

    def test_split_paragraphs_drops_blank_blocks(self):
        assert split_paragraphs("a\n\n\n\nb\n  \nc") == ["a", "b", "c"]


class TestGrepAndReplace:
    def test_grep_is_case_insensitive_by_default(self):
        result = grep_text(SAMPLE, r"the")
        assert result["count"] == 3

    def test_grep_case_sensitive(self):
        result = grep_text(SAMPLE, r"The", case_sensitive=True)
        assert result == {"matches": ["The", "The"], "count": 2}

    def test_replace_all_reports_count(self):
        result = replace_text(SAMPLE, r"beutiful", "beautiful")
        assert result["count"] == 1
        assert "beautiful" in result["result"]

    def test_replace_first_only(self):
        result = replace_text("a a a", "a", "b", replace_all=False)
        assert result == {"result": "b a a", "count": 1}

    def test_invalid_pattern_raises(self):
        with pytest.raises(re.error):
            grep_text("text", "(")


class TestStructure:
    def test_extract_structure(self):
        structure = extract_structure(SAMPLE)
        assert structure["title"] == "# Title"
        assert structure["headings"] == ["Title"]
        assert structure["paragraph_count"] == 3
        assert structure["paragraphs"][1] == {"id": 1, "text": "The weather is beutiful today."}

    def test_extract_structure_of_empty_text(self):
        structure = extract_structure("")
        assert structure["title"] == "Untitled Document"
        assert structure["paragraph_count"] == 0

    def test_analyze_document(self):
        stats = analyze_document(SAMPLE)
        assert stats["word_count"] == 16
        assert stats["sentence_count"] == 3
        assert stats["paragraph_count"] == 3
        assert stats["estimated_reading_time"] == 1
