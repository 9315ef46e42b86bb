"""Patch engine: code segments to range-addressed edits.

A diff segment becomes one ``replace`` edit per hunk. Any other segment
becomes a whole-file edit whose target is resolved in this order: the
fence-tag filename, a filename hint comment, the current file. A target
other than the current file is a ``create``; otherwise a supplied
selection turns the segment into a ``replace`` of that selection, and
without one it replaces the whole file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from src.reconciliation.models import CodeSegment, Edit, EditAction, TextRange
from src.reconciliation.parser import extract_filename_hint


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

_HUNK_HEADER_PATTERN = re.compile(r"^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@")
_NEW_FILE_HEADER = "+++ "
_TARGET_PREFIX = "b/"


# =============================================================================
# Public API
# =============================================================================


def build_edits(
    segments: Iterable[CodeSegment],
    current_file: str,
    selection_range: TextRange | None = None,
) -> list[Edit]:
    """Turn parsed segments into edits, preserving segment order.

    Args:
        segments: Segments of the final proposal
        current_file: File the request was made from
        selection_range: Editor selection, if the user had one

    Returns:
        List of Edit; a segment that resolves to no file yields nothing
    """
    edits: list[Edit] = []
    for segment in segments:
        if segment.is_diff:
            edits.extend(parse_unified_diff(segment.code, current_file))
            continue

        target = segment.filename or extract_filename_hint(segment.code) or current_file
        if not target:
            logger.debug("Skipping %s segment with no resolvable file", segment.language)
            continue

        if target != current_file:
            edits.append(Edit(file=target, new_text=segment.code, action=EditAction.CREATE))
        elif selection_range is not None:
            edits.append(
                Edit(
                    file=target,
                    new_text=segment.code,
                    action=EditAction.REPLACE,
                    range=selection_range,
                )
            )
        else:
            edits.append(Edit(file=target, new_text=segment.code, action=EditAction.FULL))
    return edits


def parse_unified_diff(code: str, fallback_file: str) -> list[Edit]:
    """Convert a unified diff into one ``replace`` edit per hunk.

    Removed lines consume old lines, added lines contribute new text,
    context lines do both. The edit range starts at the hunk's old start
    (made zero-based) and spans the header's old count. Lines that are
    none of these (``\\ No newline at end of file``) are ignored.

    Args:
        code: Diff body
        fallback_file: Target used when the diff has no ``+++`` header

    Returns:
        List of Edit, empty when the diff has no hunk header
    """
    lines = code.split("\n")
    target = _find_target_file(lines) or fallback_file
    if not target:
        logger.debug("Skipping diff with no resolvable target file")
        return []

    edits: list[Edit] = []
    header: re.Match[str] | None = None
    new_lines: list[str] = []

    for line in lines:
        match = _HUNK_HEADER_PATTERN.match(line)
        if match:
            if header is not None:
                edits.append(_hunk_edit(target, header, new_lines))
            header, new_lines = match, []
            continue
        if header is None:
            continue
        if line.startswith(("+", " ")):
            new_lines.append(line[1:])
        elif line == "":
            new_lines.append(line)

    if header is not None:
        edits.append(_hunk_edit(target, header, new_lines))
    return edits


# =============================================================================
# Helpers
# =============================================================================


def _find_target_file(lines: list[str]) -> str | None:
    for line in lines:
        if _HUNK_HEADER_PATTERN.match(line):
            break
        if line.startswith(_NEW_FILE_HEADER):
            path = line[len(_NEW_FILE_HEADER):].strip()
            if path.startswith(_TARGET_PREFIX):
                path = path[len(_TARGET_PREFIX):]
            return path or None
    return None


def _hunk_edit(target: str, header: re.Match[str], new_lines: list[str]) -> Edit:
    old_start = int(header.group(1))
    old_count = int(header.group(2)) if header.group(2) is not None else 1
    # New-file hunks are "-0,0"; clamp so the range stays in the document.
    start_line = max(old_start - 1, 0)
    return Edit(
        file=target,
        new_text="\n".join(new_lines),
        action=EditAction.REPLACE,
        range=TextRange(
            start_line=start_line,
            start_char=0,
            end_line=start_line + old_count,
            end_char=0,
        ),
    )
