"""Agent runtime contract and a minimal standalone implementation.

Actions only rely on the :class:`AgentRuntime` protocol: settings lookup,
conversation state, and structured-object generation from a prompt. Any agent
framework that provides those can host the plugin. :class:`PluginRuntime` is
the implementation used by the CLI; it keeps recent messages in memory and
asks the configured LLM to fill in the extraction templates.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol, Union

from xdc_agent_plugin.config import PluginConfig
from xdc_agent_plugin.llm.base import BaseLLMProvider, LLMMessage
from xdc_agent_plugin.llm.router import LLMRouter

logger = logging.getLogger("xdc_agent_plugin.runtime")

State = dict[str, Any]
HandlerCallback = Callable[[dict[str, Any]], Union[Awaitable[Any], Any]]


@dataclass
class Memory:
    """A single chat message."""

    user: str
    text: str
    content: dict[str, Any] = field(default_factory=dict)


class AgentRuntime(Protocol):
    def get_setting(self, key: str) -> Any: ...

    async def compose_state(self, message: Memory) -> State: ...

    async def update_recent_message_state(self, state: State) -> State: ...

    async def generate_object(self, context: str) -> Any: ...


# ---------------------------------------------------------------------------
# Prompt helpers
# ---------------------------------------------------------------------------

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def compose_context(state: State, template: str) -> str:
    """Fill ``{{key}}`` placeholders in *template* from *state*.

    Missing keys and ``None`` values render as an empty string.
    """

    def _replace(match: re.Match) -> str:
        value = state.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def parse_json_block(text: str) -> dict[str, Any] | None:
    """Pull a JSON object out of a model reply.

    Prefers a fenced ```json block and falls back to the outermost braces.
    Returns ``None`` if nothing parses to an object.
    """
    if not text:
        return None

    candidates = [m.strip() for m in _JSON_FENCE_RE.findall(text)]
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


async def extract_params(runtime: AgentRuntime, template: str, state: State) -> dict[str, Any]:
    """Ask the runtime to fill *template* and return the raw field mapping.

    The result is untrusted: anything that is not a JSON object becomes ``{}``.
    """
    context = compose_context(state, template)
    result = await runtime.generate_object(context)
    if not isinstance(result, dict):
        logger.warning(f"Parameter extraction returned {type(result).__name__}, ignoring")
        return {}
    return result


# ---------------------------------------------------------------------------
# Standalone runtime
# ---------------------------------------------------------------------------

_EXTRACTION_SYSTEM_PROMPT = (
    "You extract structured parameters for blockchain wallet actions. "
    "Reply with a single JSON markdown block and nothing else."
)


class PluginRuntime:
    """In-memory :class:`AgentRuntime` backed by :class:`PluginConfig`.

    Parameters
    ----------
    config:
        Plugin configuration; supplies settings and the LLM section.
    llm:
        Provider override. When omitted the provider is created lazily from
        ``config.llm`` on first extraction.
    recent_message_count:
        How many past messages are rendered into ``{{recentMessages}}``.
    """

    def __init__(
        self,
        config: PluginConfig | None = None,
        llm: BaseLLMProvider | None = None,
        recent_message_count: int = 10,
    ):
        self.config = config or PluginConfig()
        self._llm = llm
        self.recent_message_count = recent_message_count
        self._messages: list[Memory] = []

    @property
    def agent_name(self) -> str:
        return self.config.agent_name

    @property
    def llm(self) -> BaseLLMProvider:
        if self._llm is None:
            self._llm = LLMRouter(self.config.llm).get_provider()
        return self._llm

    def get_setting(self, key: str) -> Any:
        return self.config.get_setting(key)

    def remember(self, message: Memory) -> None:
        self._messages.append(message)

    def _format_recent_messages(self) -> str:
        recent = self._messages[-self.recent_message_count :]
        return "\n".join(f"{m.user}: {m.text}" for m in recent)

    async def compose_state(self, message: Memory) -> State:
        self.remember(message)
        return {
            "agentName": self.agent_name,
            "senderName": message.user,
            "recentMessages": self._format_recent_messages(),
        }

    async def update_recent_message_state(self, state: State) -> State:
        updated = dict(state)
        updated["recentMessages"] = self._format_recent_messages()
        return updated

    async def generate_object(self, context: str) -> dict[str, Any] | None:
        response = await self.llm.complete(
            [
                LLMMessage(role="system", content=_EXTRACTION_SYSTEM_PROMPT),
                LLMMessage(role="user", content=context),
            ]
        )
        parsed = parse_json_block(response.content)
        if parsed is None:
            logger.warning("Model reply did not contain a JSON object")
        return parsed
