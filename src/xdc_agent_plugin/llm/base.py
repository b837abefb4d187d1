"""Common data structures and the abstract provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass
class LLMMessage:
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class LLMResponse:
    content: str
    usage: dict[str, int] | None = None
    stop_reason: str | None = None
    raw: Any = field(default=None, repr=False)


class BaseLLMProvider(ABC):
    """A chat-completion backend.

    Parameters are passed through from :class:`~xdc_agent_plugin.config.LLMProviderConfig`.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        max_tokens: int = 1024,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.max_tokens = max_tokens

    @abstractmethod
    async def complete(self, messages: list[LLMMessage]) -> LLMResponse:
        """Return the model's reply to *messages*."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"
