from __future__ import annotations

from google.genai import types

from eteon.domain.models.artifacts import SourceRef
from eteon.domain.orchestration.core.response_renderer import (
    block_reason,
    collect_sources,
    render_response,
    strip_thoughts,
)
from tests.utils import response_with_parts


def test_render_text_and_code_execution_result():
    response = response_with_parts([
        types.Part(text="4"),
        types.Part(code_execution_result=types.CodeExecutionResult(
            outcome=types.Outcome.OUTCOME_OK, output="4\n"
        )),
    ])

    rendered = render_response(response)

    assert rendered.reply == "4\n\nResult:\n4"
    assert len(rendered.artifacts.code_snippets) == 1
    snippet = rendered.artifacts.code_snippets[0]
    assert snippet.outcome == "OUTCOME_OK"
    assert snippet.output == "4\n"
    assert rendered.artifacts.sources == []


def test_result_is_attached_to_preceding_code():
    response = response_with_parts([
        types.Part(text="Computing."),
        types.Part(executable_code=types.ExecutableCode(
            language=types.Language.PYTHON, code="print(6 * 7)"
        )),
        types.Part(code_execution_result=types.CodeExecutionResult(
            outcome=types.Outcome.OUTCOME_OK, output="42\n"
        )),
        types.Part(text="The answer is 42."),
    ])

    rendered = render_response(response)

    assert rendered.reply == "Computing.\n\nResult:\n42\n\nThe answer is 42."
    [snippet] = rendered.artifacts.code_snippets
    assert snippet.language == "PYTHON"
    assert snippet.code == "print(6 * 7)"
    assert snippet.output == "42\n"


def test_thought_parts_are_kept_out_of_reply():
    response = response_with_parts([
        types.Part(text="Let me think. Then answer.", thought=True),
        types.Part(text="  Hello  "),
        types.Part(text="   ", thought=True),
    ])

    rendered = render_response(response)

    assert rendered.reply == "Hello"
    assert rendered.artifacts.thoughts == ["Let me think. Then answer."]


def test_render_without_candidates():
    rendered = render_response(types.GenerateContentResponse())
    assert rendered.reply == ""
    assert rendered.artifacts.thoughts == []


def test_sources_deduplicated_citations_first():
    candidate = types.Candidate(
        citation_metadata=types.CitationMetadata(citations=[
            types.Citation(title="A", uri="u1"),
            types.Citation(title="", uri=" "),
        ]),
        grounding_metadata=types.GroundingMetadata(grounding_chunks=[
            types.GroundingChunk(web=types.GroundingChunkWeb(title="B", uri="u2")),
            types.GroundingChunk(web=types.GroundingChunkWeb(title="C", uri="u1")),
            types.GroundingChunk(),
        ]),
    )

    assert collect_sources(candidate) == [SourceRef(title="A", uri="u1"), SourceRef(title="B", uri="u2")]


def test_strip_thoughts():
    content = types.Content(role="model", parts=[
        types.Part(text="secret", thought=True),
        types.Part(text="visible"),
    ])

    cleaned = strip_thoughts(content)

    assert cleaned.role == "model"
    assert [part.text for part in cleaned.parts] == ["visible"]
    assert strip_thoughts(types.Content(role="model", parts=[types.Part(text="x", thought=True)])) is None
    assert strip_thoughts(None) is None


def test_block_reason():
    blocked = types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.SAFETY
        )
    )
    unspecified = types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(
            block_reason=types.BlockedReason.BLOCKED_REASON_UNSPECIFIED
        )
    )

    assert block_reason(blocked) == "SAFETY"
    assert block_reason(unspecified) is None
    assert block_reason(types.GenerateContentResponse()) is None
