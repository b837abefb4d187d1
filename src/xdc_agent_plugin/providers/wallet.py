"""Wallet context injected into the conversation before parameter extraction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xdc_agent_plugin.wallet.client import init_wallet_client

if TYPE_CHECKING:
    from xdc_agent_plugin.runtime import AgentRuntime, Memory, State

logger = logging.getLogger("xdc_agent_plugin.providers.wallet")


class WalletContextProvider:
    """Describes the agent's wallet: address, balance and active network."""

    name = "xdcWallet"

    async def get(
        self,
        runtime: AgentRuntime,
        message: Memory,
        state: State | None = None,
    ) -> str | None:
        try:
            wallet = init_wallet_client(runtime)
            address = wallet.get_address()
            balance = wallet.get_balance()
            chain = wallet.get_current_chain()
        except Exception as e:
            logger.error(f"Error in XDC wallet provider: {e}")
            return None

        network = "Apothem Testnet" if chain.is_testnet else "XDC Mainnet"
        return (
            f"XDC Network ({network}) Wallet Address: {address}\n"
            f"Balance: {balance} {chain.native_symbol}\n"
            f"Chain ID: {chain.chain_id}, Name: {chain.display_name}"
        )


xdc_wallet_provider = WalletContextProvider()
