"""Prompt builders for proposal, critique and judge rounds.

All builders are deterministic: the same input always produces the same
text. Oversized code, selection and project-tree sections are cut at a
fixed character limit and marked with a ``... (truncated)`` line.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


# =============================================================================
# Module Constants
# =============================================================================

MAX_CODE_CHARS = 12_000
MAX_PROJECT_TREE_CHARS = 4_000
MAX_OPEN_FILES = 20
TRUNCATION_MARKER = "\n... (truncated)"

_PROPOSAL_PREAMBLE = (
    "You are one of several AI coding experts collaborating on a task.",
    "Produce your best solution. Use fenced code blocks.",
    "Respond with either: an explanation, a unified diff, or full file content.",
)

_CRITIQUE_CHECKLIST = (
    "1. Bugs or correctness issues",
    "2. Missing edge cases",
    "3. Style/readability concerns",
    "4. Suggested improvements",
    "5. Score 1-10 for overall quality",
)


@dataclass(frozen=True, slots=True)
class PromptInput:
    """Everything a proposal prompt is assembled from."""

    instruction: str
    filename: str | None = None
    code: str | None = None
    selected_text: str | None = None
    open_files: Sequence[str] = field(default_factory=tuple)
    project_tree: str | None = None


def truncate(text: str, max_chars: int) -> str:
    """Cut ``text`` at ``max_chars`` and append the truncation marker."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_proposal_prompt(prompt_input: PromptInput) -> str:
    """Assemble the prompt every participant receives.

    Sections, in order and only when present: preamble, INSTRUCTION, FILE,
    CODE, SELECTED TEXT, OPEN FILES (first 20), PROJECT.
    """
    parts: list[str] = [*_PROPOSAL_PREAMBLE, ""]

    if prompt_input.instruction:
        parts += [f"INSTRUCTION:\n{prompt_input.instruction}", ""]
    if prompt_input.filename:
        parts += [f"FILE: {prompt_input.filename}", ""]
    if prompt_input.code:
        parts += [f"CODE:\n```\n{truncate(prompt_input.code, MAX_CODE_CHARS)}\n```", ""]
    if prompt_input.selected_text:
        selected = truncate(prompt_input.selected_text, MAX_CODE_CHARS)
        parts += [f"SELECTED TEXT:\n```\n{selected}\n```", ""]
    if prompt_input.open_files:
        listed = "\n".join(list(prompt_input.open_files)[:MAX_OPEN_FILES])
        parts += [f"OPEN FILES:\n{listed}", ""]
    if prompt_input.project_tree:
        parts.append(f"PROJECT:\n{truncate(prompt_input.project_tree, MAX_PROJECT_TREE_CHARS)}")

    return "\n".join(parts)


def build_critique_prompt(instruction: str, participant: str, proposal: str) -> str:
    """Ask one participant to review another's proposal."""
    return "\n".join(
        [
            "You are reviewing another AI's code solution. Find flaws, bugs, and improvements.",
            "",
            f"ORIGINAL TASK:\n{instruction}",
            "",
            f"PROPOSAL BY {participant.upper()}:",
            proposal,
            "",
            "Provide:",
            *_CRITIQUE_CHECKLIST,
        ]
    )


def build_judge_prompt(instruction: str, proposals: Sequence[tuple[str, str]]) -> str:
    """Ask a judge to merge several proposals.

    Args:
        instruction: Original task
        proposals: (participant, proposal text) pairs, in presentation order
    """
    parts = [
        "You are the final judge. Merge the best aspects of these solutions into one optimal result.",
        "Use fenced code blocks for your final answer.",
        "",
        f"TASK:\n{instruction}",
        "",
    ]
    for participant, proposal in proposals:
        parts += [f"---- {participant.upper()} PROPOSAL ----", proposal, ""]
    parts.append("Produce the single best merged solution.")
    return "\n".join(parts)
