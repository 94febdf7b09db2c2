"""
Turns a completion response into reply text plus an artifact bundle.

Reasoning parts never reach the reply or the stored history; they only live
in the artifact bundle.
"""

from typing import Any, List, Optional, Set
from pydantic import BaseModel

from google.genai import types

from eteon.domain.models.artifacts import ArtifactBundle, CodeSnippet, SourceRef


class RenderedResponse(BaseModel):
    """Display text and artifacts of one response"""
    reply: str
    artifacts: ArtifactBundle


def first_candidate(response: Optional[types.GenerateContentResponse]) -> Optional[types.Candidate]:
    if response is None or not response.candidates:
        return None
    return response.candidates[0]


def block_reason(response: types.GenerateContentResponse) -> Optional[str]:
    """Return the prompt block reason, or None when the prompt was accepted"""

    feedback = response.prompt_feedback
    if feedback is None or feedback.block_reason is None:
        return None
    if feedback.block_reason == types.BlockedReason.BLOCKED_REASON_UNSPECIFIED:
        return None
    return _enum_text(feedback.block_reason)


def render_response(response: Optional[types.GenerateContentResponse]) -> RenderedResponse:
    """Split response parts into reply segments, thoughts and code snippets"""

    candidate = first_candidate(response)
    if candidate is None or candidate.content is None:
        return RenderedResponse(reply="", artifacts=ArtifactBundle())

    segments: List[str] = []
    thoughts: List[str] = []
    snippets: List[CodeSnippet] = []

    for part in candidate.content.parts or []:
        if part is None:
            continue

        text = (part.text or "").strip()
        if part.thought:
            if text:
                thoughts.append(text)
            continue

        if text:
            segments.append(text)

        if part.executable_code is not None:
            snippets.append(CodeSnippet(
                language=_enum_text(part.executable_code.language),
                code=part.executable_code.code or "",
            ))

        if part.code_execution_result is not None:
            result = part.code_execution_result
            output = result.output or ""
            if output.strip():
                segments.append(f"Result:\n{output.strip()}")

            # Attach to the latest snippet still waiting for its result
            pending = next((s for s in reversed(snippets) if not s.has_result), None)
            if pending is None:
                pending = CodeSnippet()
                snippets.append(pending)
            pending.outcome = _enum_text(result.outcome)
            pending.output = output

    return RenderedResponse(
        reply="\n\n".join(segments).strip(),
        artifacts=ArtifactBundle(
            thoughts=thoughts,
            sources=collect_sources(candidate),
            code_snippets=snippets,
        ),
    )


def collect_sources(candidate: Optional[types.Candidate]) -> List[SourceRef]:
    """Gather citations then grounding web chunks, unique by URI"""

    sources: List[SourceRef] = []
    if candidate is None:
        return sources
    seen: Set[str] = set()

    def _add(title: Optional[str], uri: Optional[str]):
        uri = (uri or "").strip()
        if not uri or uri in seen:
            return
        seen.add(uri)
        sources.append(SourceRef(title=(title or "").strip(), uri=uri))

    if candidate.citation_metadata is not None:
        for citation in candidate.citation_metadata.citations or []:
            if citation is not None:
                _add(citation.title, citation.uri)

    if candidate.grounding_metadata is not None:
        for chunk in candidate.grounding_metadata.grounding_chunks or []:
            if chunk is None or chunk.web is None:
                continue
            _add(chunk.web.title, chunk.web.uri)

    return sources


def strip_thoughts(content: Optional[types.Content]) -> Optional[types.Content]:
    """Copy a model turn without its reasoning parts; None if nothing remains"""

    if content is None:
        return None
    parts = [part for part in content.parts or [] if part is not None and not part.thought]
    if not parts:
        return None
    return types.Content(role="model", parts=parts)


def _enum_text(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value))
