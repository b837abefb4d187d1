"""Conversational actions exposed by the XDC plugin."""

from xdc_agent_plugin.actions.balance import GetBalanceAction, get_balance_action
from xdc_agent_plugin.actions.base import Action
from xdc_agent_plugin.actions.portfolio import PortfolioAction, portfolio_action
from xdc_agent_plugin.actions.transfer import TransferAction, transfer_action

__all__ = [
    "Action",
    "GetBalanceAction",
    "PortfolioAction",
    "TransferAction",
    "get_balance_action",
    "portfolio_action",
    "transfer_action",
]
