import pytest

from xdc_agent_plugin.config import LLMConfig, LLMProviderConfig, PluginConfig
from xdc_agent_plugin.llm.base import BaseLLMProvider, LLMResponse
from xdc_agent_plugin.llm.router import LLMRouter
from xdc_agent_plugin.runtime import (
    Memory,
    PluginRuntime,
    compose_context,
    extract_params,
    parse_json_block,
)


class ScriptedLLM(BaseLLMProvider):
    def __init__(self, reply: str):
        super().__init__(api_key="test", model="scripted")
        self.reply = reply
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        return LLMResponse(content=self.reply)


def test_compose_context_fills_placeholders():
    template = "{{agentName}} sees:\n{{recentMessages}}\n{{missing}}!"
    assert compose_context({"agentName": "Bot", "recentMessages": "hi"}, template) == (
        "Bot sees:\nhi\n!"
    )


def test_parse_json_block_prefers_fence():
    text = 'Sure.\n```json\n{"amount": "1", "token": null}\n```\nanything {else}'
    assert parse_json_block(text) == {"amount": "1", "token": None}


def test_parse_json_block_falls_back_to_braces():
    assert parse_json_block('here you go {"chain": "xdc"} done') == {"chain": "xdc"}


@pytest.mark.parametrize("text", ["", "no json here", "```json\n[1, 2]\n```", "{broken"])
def test_parse_json_block_returns_none(text):
    assert parse_json_block(text) is None


class _Runtime:
    def __init__(self, result):
        self.result = result

    async def generate_object(self, context):
        return self.result


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [None, "text", ["a"], 5])
async def test_extract_params_ignores_non_objects(result):
    assert await extract_params(_Runtime(result), "{{x}}", {}) == {}


@pytest.mark.asyncio
async def test_plugin_runtime_state_and_extraction():
    llm = ScriptedLLM('```json\n{"recipient": "0xabc", "amount": "2"}\n```')
    runtime = PluginRuntime(PluginConfig(agent_name="Xena"), llm=llm, recent_message_count=2)

    runtime.remember(Memory(user="bob", text="old message"))
    runtime.remember(Memory(user="bob", text="hello"))
    state = await runtime.compose_state(Memory(user="carol", text="send 2 XDC"))

    assert state["agentName"] == "Xena"
    assert state["senderName"] == "carol"
    assert state["recentMessages"] == "bob: hello\ncarol: send 2 XDC"

    result = await runtime.generate_object("extract please")
    assert result == {"recipient": "0xabc", "amount": "2"}
    system, user = llm.calls[0]
    assert system.role == "system"
    assert user.content == "extract please"


@pytest.mark.asyncio
async def test_plugin_runtime_unparseable_reply():
    runtime = PluginRuntime(llm=ScriptedLLM("I cannot help with that"))
    assert await runtime.generate_object("ctx") is None


def test_router_requires_configured_provider():
    with pytest.raises(ValueError, match="not configured"):
        LLMRouter(LLMConfig()).get_provider()
    with pytest.raises(ValueError, match="Unknown provider"):
        LLMRouter(LLMConfig()).get_provider("mistral")


def test_router_rejects_empty_api_key():
    config = LLMConfig(anthropic=LLMProviderConfig(api_key="", model="m"))
    with pytest.raises(ValueError, match="API key"):
        LLMRouter(config).get_provider()
