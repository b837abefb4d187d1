"""Action contract shared by the transfer, balance and portfolio actions."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from xdc_agent_plugin.providers.wallet import xdc_wallet_provider
from xdc_agent_plugin.runtime import AgentRuntime, HandlerCallback, Memory, State
from xdc_agent_plugin.wallet.address import normalize_address
from xdc_agent_plugin.wallet.chains import SupportedChain, resolve_chain_name
from xdc_agent_plugin.wallet.client import WalletClient
from xdc_agent_plugin.wallet.identity import is_valid_private_key

logger = logging.getLogger("xdc_agent_plugin.actions")

# handler(runtime, message, state, options, callback) -> success
ActionHandler = Callable[..., Awaitable[bool]]
ActionValidator = Callable[[AgentRuntime], Awaitable[bool]]


@dataclass
class Action:
    """A conversational action the agent runtime can dispatch to."""

    name: str
    description: str
    handler: ActionHandler
    validate: ActionValidator
    similes: list[str] = field(default_factory=list)
    examples: list[list[dict[str, Any]]] = field(default_factory=list)

    def matches(self, name: str) -> bool:
        key = name.strip().upper().replace("-", "_")
        return key == self.name.upper() or key in self.similes


async def validate_private_key(runtime: AgentRuntime) -> bool:
    """An action is only offered when ``XDC_PRIVATE_KEY`` looks like ``0x...``."""
    return is_valid_private_key(runtime.get_setting("XDC_PRIVATE_KEY"))


async def prepare_state(
    runtime: AgentRuntime, message: Memory, state: State | None
) -> State:
    """Compose or refresh the conversation state and attach wallet info."""
    if state is None:
        state = await runtime.compose_state(message)
    else:
        state = await runtime.update_recent_message_state(state)
    state["walletInfo"] = await xdc_wallet_provider.get(runtime, message, state)
    return state


async def emit(callback: HandlerCallback | None, text: str, content: dict[str, Any]) -> None:
    """Invoke a sync or async handler callback, if one was given."""
    if callback is None:
        return
    result = callback({"text": text, "content": content})
    if inspect.isawaitable(result):
        await result


async def report_failure(
    callback: HandlerCallback | None, prefix: str, error: Exception
) -> bool:
    logger.error(f"{prefix}: {error}")
    await emit(callback, f"{prefix}: {error}", {"error": str(error)})
    return False


def default_chain(wallet: WalletClient, chain: str | None) -> SupportedChain:
    """Extracted chain, or the wallet's active chain when none was given."""
    if not chain:
        return wallet.current_chain
    return resolve_chain_name(chain)


def default_address(wallet: WalletClient, address: str | None) -> str:
    """Extracted address in ``0x`` form, or the wallet's own address."""
    if not address:
        return wallet.get_address()
    return normalize_address(address)
