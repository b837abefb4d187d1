"""XDC Network plugin for conversational agents.

Provides transfer, balance and portfolio actions for the XDC mainnet and the
Apothem testnet, backed by a web3.py wallet client.
"""

__version__ = "0.1.0"

from xdc_agent_plugin.errors import (
    BalanceQueryError,
    InvalidAddressError,
    InvalidChainError,
    MissingCredentialError,
    PortfolioError,
    TransferError,
    XDCPluginError,
)
from xdc_agent_plugin.plugin import Plugin, xdc_plugin

__all__ = [
    "__version__",
    "Plugin",
    "xdc_plugin",
    "XDCPluginError",
    "InvalidAddressError",
    "InvalidChainError",
    "MissingCredentialError",
    "TransferError",
    "BalanceQueryError",
    "PortfolioError",
]
