"""LLM provider abstraction used for parameter extraction.

Supports Anthropic and any OpenAI-compatible endpoint through a common set
of data structures and a routing layer.
"""

from xdc_agent_plugin.llm.base import BaseLLMProvider, LLMMessage, LLMResponse
from xdc_agent_plugin.llm.router import LLMRouter

__all__ = [
    "BaseLLMProvider",
    "LLMMessage",
    "LLMResponse",
    "LLMRouter",
]
