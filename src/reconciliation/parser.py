"""Response parser: markdown proposals to structured code segments.

Models answer in free-form markdown. This module pulls fenced code blocks
out of that text, decides which of them are unified diffs, infers a
language when the fence has no tag and finds filename hints written as
comments. None of these functions raise on malformed text; unterminated
fences are simply not blocks.
"""

from __future__ import annotations

import re

from src.reconciliation.models import CodeSegment


# =============================================================================
# Constants
# =============================================================================

_FENCE_PATTERN = re.compile(r"```(\w*(?::\S+)?)\s*\n(.*?)```", re.DOTALL)
# Any fence, whatever its tag, including one-line fences.
_ANY_FENCE_PATTERN = re.compile(r"```.*?```", re.DOTALL)
_EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")

_DIFF_LANGUAGE = "diff"
_DIFF_FILE_HEADER_PATTERN = re.compile(r"^(---|\+\+\+)", re.MULTILINE)
_DIFF_HUNK_PATTERN = re.compile(r"^@@", re.MULTILINE)

_FILENAME_HINT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"//\s*filename:\s*(\S+)", re.IGNORECASE),
    re.compile(r"//\s*file:\s*(\S+)", re.IGNORECASE),
    re.compile(r"#\s*filename:\s*(\S+)", re.IGNORECASE),
    re.compile(r"/\*\s*filename:\s*(\S+?)\s*\*/", re.IGNORECASE),
)
_HINT_SCAN_LINES = 5

DEFAULT_LANGUAGE = "text"

# Ordered: the first matching heuristic decides.
_LANGUAGE_HEURISTICS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("tsx", re.compile(r"import\s+React|from\s+['\"]react['\"]|<\w+[^>]*/>")),
    ("typescript", re.compile(r"export\s+(default|const|function|interface|type)\b")),
    ("python", re.compile(r"^\s*(def|class)\s+\w+.*:\s*$|^\s*(import|from)\s+\w+", re.MULTILINE)),
    ("cpp", re.compile(r"#include\s*[<\"]|\bint\s+main\s*\(")),
    ("go", re.compile(r"^package\s+\w+|\bfunc\s+\w+\s*\(", re.MULTILINE)),
    ("rust", re.compile(r"\bfn\s+\w+\s*\(|\blet\s+mut\b")),
    ("java", re.compile(r"\bpublic\s+(static\s+)?(class|void)\b")),
    ("bash", re.compile(r"^#!.*\b(ba)?sh\b", re.MULTILINE)),
)


# =============================================================================
# Public API
# =============================================================================


def extract_code_segments(markdown: str) -> list[CodeSegment]:
    """Extract every fenced code block from a proposal, in document order.

    The fence tag is split on ``:``: the first part is the language, the
    rest (re-joined) is the filename. An empty tag gets an inferred language.

    Args:
        markdown: Raw proposal text

    Returns:
        List of CodeSegment, empty when the text has no complete fence
    """
    segments: list[CodeSegment] = []
    for match in _FENCE_PATTERN.finditer(markdown):
        tag, body = match.group(1), match.group(2)
        language, _, filename = tag.partition(":")
        code = body.rstrip()
        if not language:
            language = infer_language(code)
        segments.append(
            CodeSegment(
                language=language,
                code=code,
                filename=filename or None,
                is_diff=detect_diff(code, language),
            )
        )
    return segments


def extract_explanation(markdown: str) -> str:
    """Return the prose of a proposal with every fenced block removed."""
    without_code = _ANY_FENCE_PATTERN.sub("", markdown)
    return _EXCESS_NEWLINES_PATTERN.sub("\n\n", without_code).strip()


def extract_filename_hint(code: str) -> str | None:
    """Find a filename written as a comment near the top of a code segment.

    Recognised forms (case-insensitive)::

        // filename: src/app.ts
        // file: src/app.ts
        # filename: app.py
        /* filename: style.css */

    Returns:
        The first hinted filename, or None
    """
    head = "\n".join(code.splitlines()[:_HINT_SCAN_LINES])
    for pattern in _FILENAME_HINT_PATTERNS:
        match = pattern.search(head)
        if match:
            return match.group(1)
    return None


def detect_diff(code: str, language: str) -> bool:
    """Whether a segment is a unified diff.

    A ``diff`` language tag is sufficient on its own; otherwise the body
    must contain both a file header line and a hunk header line.
    """
    if language == _DIFF_LANGUAGE:
        return True
    return bool(_DIFF_FILE_HEADER_PATTERN.search(code) and _DIFF_HUNK_PATTERN.search(code))


def infer_language(code: str) -> str:
    """Guess a language for an untagged block; never raises."""
    for language, pattern in _LANGUAGE_HEURISTICS:
        if pattern.search(code):
            return language
    return DEFAULT_LANGUAGE
