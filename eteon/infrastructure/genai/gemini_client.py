"""
Gemini completion service backed by the official google-genai SDK.

Every request carries the same system instruction and tool set; only the
conversation and the thinking budget vary per call.
"""

import asyncio
from typing import List, Optional

import structlog
from google import genai
from google.genai import types

from eteon.domain.errors import UpstreamServiceError
from eteon.domain.models.session_state import ThinkingLevel
from eteon.domain.orchestration.channel.base_channel import CompletionService

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-pro"
DEFAULT_TIMEOUT_SECONDS = 120.0

SYSTEM_INSTRUCTION = " ".join([
    "You are Eteon, a concise assistant powered by Gemini 2.5 Pro.",
    "Always provide focused, high-signal answers and respect the user's language.",
    "When information may be outdated or needs verification, use the available web grounding search before responding.",
    "Run calculations and data transformations through the code execution tool whenever computation is involved, and use its results in the final answer.",
    "Load any user-provided URLs via the URL context tool to ground your responses in those sources.",
    "Handle multimodal inputs such as images, audio, and video without asking the user to reformat them.",
    "Produce replies that comply with Telegram MarkdownV2 formatting rules.",
])


def build_tools() -> List[types.Tool]:
    """Search grounding, URL context and code execution"""
    return [
        types.Tool(google_search=types.GoogleSearch()),
        types.Tool(url_context=types.UrlContext()),
        types.Tool(code_execution=types.ToolCodeExecution()),
    ]


def build_generate_config(level: ThinkingLevel) -> types.GenerateContentConfig:
    """Generation config for one request at the given thinking level"""

    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        tools=build_tools(),
        thinking_config=types.ThinkingConfig(
            include_thoughts=True,
            thinking_budget=level.budget,
        ),
    )


class GeminiCompletionService(CompletionService):
    """CompletionService that calls Gemini through the async SDK client"""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[genai.Client] = None
    ):
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.client = client or genai.Client(api_key=api_key)

    async def generate(
        self,
        contents: List[types.Content],
        thinking_level: ThinkingLevel
    ) -> types.GenerateContentResponse:
        """Run one completion bounded by the request timeout"""

        config = build_generate_config(thinking_level)
        try:
            return await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamServiceError(
                f"gemini request timed out after {self.timeout_seconds:g}s"
            ) from e
        except Exception as e:
            raise UpstreamServiceError(f"gemini request failed: {e}") from e
