"""
Text Operations

Pure grep/sed-style helpers used by the text-processing and editor tools.
"""

import math
import re
from typing import Any


def count_words(content: str) -> int:
    return len(content.split())


def split_paragraphs(content: str) -> list[str]:
    return [p.strip() for p in re.split(r"\n\s*\n", content) if p.strip()]


def _compile(pattern: str, case_sensitive: bool) -> re.Pattern[str]:
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


def grep_text(content: str, pattern: str, case_sensitive: bool = False) -> dict[str, Any]:
    """
    Find all matches of a regular expression.

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    regex = _compile(pattern, case_sensitive)
    matches = [m.group(0) for m in regex.finditer(content)]
    return {"matches": matches, "count": len(matches)}


def replace_text(
    content: str,
    pattern: str,
    replacement: str,
    case_sensitive: bool = False,
    replace_all: bool = True,
) -> dict[str, Any]:
    """
    Replace regex matches and report how many substitutions were made.

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    regex = _compile(pattern, case_sensitive)
    result, count = regex.subn(replacement, content, count=0 if replace_all else 1)
    return {"result": result, "count": count}


def extract_structure(content: str) -> dict[str, Any]:
    paragraphs = split_paragraphs(content)
    title = paragraphs[0] if paragraphs else "Untitled Document"
    headings = [
        line.lstrip("#").strip()
        for line in content.splitlines()
        if line.lstrip().startswith("#")
    ]
    return {
        "title": title,
        "headings": headings,
        "paragraphs": [{"id": i, "text": text} for i, text in enumerate(paragraphs)],
        "paragraph_count": len(paragraphs),
    }


def analyze_document(content: str) -> dict[str, Any]:
    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]
    word_count = count_words(content)
    return {
        "word_count": word_count,
        "character_count": len(content),
        "paragraph_count": len(split_paragraphs(content)),
        "sentence_count": len(sentences),
        # ~225 words per minute
        "estimated_reading_time": math.ceil(word_count / 225),
    }
