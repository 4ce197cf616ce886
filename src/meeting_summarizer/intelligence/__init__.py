"""LLM-powered summarization."""

from .llm import (
    ChatCompletionsClient,
    LLMClient,
    LLMError,
    OllamaClient,
    build_llm_client,
)
from .prompts import SYSTEM_PROMPT, build_summary_prompt
from .summarizer import SummarizationService

__all__ = [
    "ChatCompletionsClient",
    "LLMClient",
    "LLMError",
    "OllamaClient",
    "SYSTEM_PROMPT",
    "SummarizationService",
    "build_llm_client",
    "build_summary_prompt",
]
