"""
Telegram MarkdownV2 helpers.

Escaping is not idempotent: escape raw text exactly once.
"""

import re
from typing import Iterable, List

from eteon.domain.models.artifacts import CodeSnippet, SourceRef

TRUNCATION_MARKER = "…"

_MARKDOWN_V2_RESERVED = re.compile(r"([\\_*\[\]()~`>#+\-=|{}.!])")
_SENTENCE_BOUNDARY = re.compile(r"[.?!\n]+")


def escape_markdown_v2(text: str) -> str:
    """Backslash-escape every MarkdownV2 reserved character"""
    return _MARKDOWN_V2_RESERVED.sub(r"\\\1", text)


def escape_code(text: str) -> str:
    """Escape text for use inside a fenced code block"""
    return text.replace("\\", "\\\\").replace("`", "\\`")


def summarize_thoughts(thoughts: Iterable[str], limit: int) -> List[str]:
    """Split reasoning fragments into short sentence-like steps"""

    steps: List[str] = []
    for thought in thoughts:
        for chunk in _SENTENCE_BOUNDARY.split(thought):
            chunk = chunk.strip()
            if chunk:
                steps.append(chunk)

    if len(steps) > limit:
        steps = steps[:limit] + [TRUNCATION_MARKER]
    return steps


def format_thoughts_summary(steps: List[str]) -> str:
    lines = ["Reasoning summary:"]
    lines.extend(f"- {step}" for step in steps)
    return "\n".join(lines)


def format_sources(sources: List[SourceRef]) -> str:
    lines = ["Sources:"]
    for index, source in enumerate(sources, start=1):
        lines.append(f"{index}. {source.title or 'Untitled'} - {source.uri}")
    return "\n".join(lines)


def format_code_snippet(index: int, snippet: CodeSnippet) -> str:
    """Render one executed-code step with its outcome and output"""

    language = snippet.language.strip().lower() or "text"

    parts = [
        f"Code snippet {index}:\n",
        f"```{language}\n{escape_code(snippet.code)}\n```",
    ]
    if snippet.outcome:
        parts.append(f"\nOutcome: {snippet.outcome}")
    if snippet.output.strip():
        parts.append(f"\nOutput:\n```{language}\n{escape_code(snippet.output)}\n```")
    return "".join(parts)
