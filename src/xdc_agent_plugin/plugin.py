"""Plugin definition handed to the agent runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from xdc_agent_plugin.actions import get_balance_action, portfolio_action, transfer_action
from xdc_agent_plugin.actions.base import Action
from xdc_agent_plugin.providers import xdc_wallet_provider


@dataclass
class Plugin:
    name: str
    description: str
    actions: list[Action] = field(default_factory=list)
    providers: list[Any] = field(default_factory=list)
    evaluators: list[Any] = field(default_factory=list)

    def get_action(self, name: str) -> Action | None:
        """Find an action by its name or one of its similes."""
        for action in self.actions:
            if action.matches(name):
                return action
        return None


xdc_plugin = Plugin(
    name="xdc",
    description="XDC Plugin for Eliza",
    actions=[transfer_action, get_balance_action, portfolio_action],
    providers=[xdc_wallet_provider],
)
