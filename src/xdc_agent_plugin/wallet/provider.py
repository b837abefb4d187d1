"""Web3 connections for the XDC networks."""

from __future__ import annotations

import logging

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from xdc_agent_plugin.wallet.chains import ChainConfig

logger = logging.getLogger("xdc_agent_plugin.wallet.provider")


class Web3Provider:
    """Hands out one ``Web3`` instance per chain and RPC endpoint."""

    def __init__(self) -> None:
        self._instances: dict[tuple[str, str], Web3] = {}

    def get_web3(self, chain: ChainConfig) -> Web3:
        """Return a (cached) Web3 instance for *chain*.

        XDC uses XDPoS consensus, whose block headers carry a long
        ``extraData`` field, so the POA middleware is always injected.
        """
        key = (chain.name, chain.rpc_url)
        if key in self._instances:
            return self._instances[key]

        w3 = Web3(Web3.HTTPProvider(chain.rpc_url))
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        logger.debug(f"Connected web3 to {chain.name} at {chain.rpc_url}")
        self._instances[key] = w3
        return w3
