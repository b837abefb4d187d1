"""Chain definitions for the XDC networks."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum

from xdc_agent_plugin.errors import InvalidChainError

logger = logging.getLogger("xdc_agent_plugin.wallet.chains")


class SupportedChain(str, Enum):
    XDC = "xdc"
    APOTHEM = "apothem"


@dataclass(frozen=True)
class ChainConfig:
    """An XDC-family network."""

    name: str
    chain_id: int
    display_name: str
    native_symbol: str
    default_rpc_url: str
    explorer_url: str
    custom_rpc_url: str | None = None

    @property
    def rpc_url(self) -> str:
        return self.custom_rpc_url or self.default_rpc_url

    @property
    def is_testnet(self) -> bool:
        return self.name == SupportedChain.APOTHEM.value


CHAIN_TEMPLATES: dict[str, ChainConfig] = {
    SupportedChain.XDC.value: ChainConfig(
        name=SupportedChain.XDC.value,
        chain_id=50,
        display_name="XDC Network",
        native_symbol="XDC",
        default_rpc_url="https://rpc.xdcrpc.com",
        explorer_url="https://xdcscan.com",
    ),
    SupportedChain.APOTHEM.value: ChainConfig(
        name=SupportedChain.APOTHEM.value,
        chain_id=51,
        display_name="Apothem Network",
        native_symbol="TXDC",
        default_rpc_url="https://erpc.apothem.network",
        explorer_url="https://testnet.xdcscan.com",
    ),
}

_CHAIN_ALIASES = {
    "xdc": SupportedChain.XDC,
    "mainnet": SupportedChain.XDC,
    "xdc mainnet": SupportedChain.XDC,
    "apothem": SupportedChain.APOTHEM,
    "testnet": SupportedChain.APOTHEM,
    "xdctestnet": SupportedChain.APOTHEM,
    "apothem testnet": SupportedChain.APOTHEM,
}


def resolve_chain_name(name: str | SupportedChain) -> SupportedChain:
    """Map a user-supplied chain name or alias to a :class:`SupportedChain`."""
    if isinstance(name, SupportedChain):
        return name
    key = (name or "").strip().lower()
    chain = _CHAIN_ALIASES.get(key)
    if chain is None:
        raise InvalidChainError(
            f"Unknown chain '{name}'. Available: {list_chain_names()}"
        )
    return chain


def get_chain_template(name: str | SupportedChain) -> ChainConfig:
    """Get the built-in template for a chain. Raises ``InvalidChainError``."""
    return CHAIN_TEMPLATES[resolve_chain_name(name).value]


def list_chain_names() -> list[str]:
    """Return the names of all supported chains."""
    return list(CHAIN_TEMPLATES.keys())


class ChainRegistry:
    """Resolved chain configurations for one wallet session.

    Starts out with the built-in templates. Custom RPC endpoints are added
    with :meth:`register`; :meth:`resolve` is a pure lookup.
    """

    def __init__(self) -> None:
        self._chains: dict[str, ChainConfig] = dict(CHAIN_TEMPLATES)

    def register(
        self, name: str | SupportedChain, custom_rpc_url: str | None = None
    ) -> ChainConfig:
        """Build a chain from its template, optionally overriding the RPC URL."""
        template = get_chain_template(name)
        chain = (
            dataclasses.replace(template, custom_rpc_url=custom_rpc_url)
            if custom_rpc_url
            else template
        )
        self._chains[chain.name] = chain
        logger.debug(f"Registered chain {chain.name} (rpc={chain.rpc_url})")
        return chain

    def resolve(self, name: str | SupportedChain) -> ChainConfig:
        key = resolve_chain_name(name).value
        if key not in self._chains:
            raise InvalidChainError(f"Chain '{key}' is not registered.")
        return self._chains[key]

    def names(self) -> list[str]:
        return list(self._chains.keys())
