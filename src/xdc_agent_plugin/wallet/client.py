"""Wallet client: the single point of contact with the chain.

Reads are one ``eth_call``/``eth_getBalance`` each. Every state-changing
contract call is simulated with ``eth_call`` against current chain state
before it is signed and submitted; a failed simulation never reaches
``eth_sendRawTransaction``.
"""

from __future__ import annotations

import logging
from typing import Any

from web3 import Web3

from xdc_agent_plugin.errors import InvalidChainError, TransferError
from xdc_agent_plugin.types import TransactionOptions
from xdc_agent_plugin.wallet.address import normalize_address
from xdc_agent_plugin.wallet.chains import (
    ChainConfig,
    ChainRegistry,
    SupportedChain,
    resolve_chain_name,
)
from xdc_agent_plugin.wallet.identity import WalletIdentity, load_identity
from xdc_agent_plugin.wallet.provider import Web3Provider
from xdc_agent_plugin.wallet.units import NATIVE_DECIMALS, format_units

logger = logging.getLogger("xdc_agent_plugin.wallet.client")

ERC20_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "decimals",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "type": "function",
        "name": "symbol",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "type": "function",
        "name": "allowance",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "approve",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]


def _checksum(address: str) -> str:
    return Web3.to_checksum_address(normalize_address(address))


class WalletClient:
    """Owns the signing identity and talks to the active XDC chain."""

    def __init__(
        self,
        private_key: str,
        default_chain: str | SupportedChain = SupportedChain.XDC,
        registry: ChainRegistry | None = None,
        provider: Web3Provider | None = None,
    ) -> None:
        self.identity: WalletIdentity = load_identity(private_key)
        self.registry = registry or ChainRegistry()
        self.provider = provider or Web3Provider()
        self._current_chain = resolve_chain_name(default_chain)
        self.registry.resolve(self._current_chain)

    # ------------------------------------------------------------------
    # Identity / chain selection
    # ------------------------------------------------------------------

    def get_address(self) -> str:
        return self.identity.address

    @property
    def current_chain(self) -> SupportedChain:
        return self._current_chain

    def get_current_chain(self) -> ChainConfig:
        return self.registry.resolve(self._current_chain)

    def get_chain_config(self, chain: str | SupportedChain) -> ChainConfig:
        return self.registry.resolve(chain)

    def add_chain(
        self, name: str | SupportedChain, custom_rpc_url: str | None = None
    ) -> ChainConfig:
        """Register *name* from its template. Raises ``InvalidChainError``."""
        return self.registry.register(name, custom_rpc_url)

    def switch_chain(
        self, name: str | SupportedChain, custom_rpc_url: str | None = None
    ) -> ChainConfig:
        """Make *name* the active chain.

        Passing *custom_rpc_url* registers the chain with that endpoint first;
        otherwise the chain must already be registered.
        """
        if custom_rpc_url:
            self.add_chain(name, custom_rpc_url)
        chain = self.registry.resolve(name)
        self._current_chain = resolve_chain_name(chain.name)
        logger.debug(f"Active chain is now {chain.name}")
        return chain

    def get_web3(self, chain: str | SupportedChain | None = None) -> Web3:
        config = self.registry.resolve(chain or self._current_chain)
        return self.provider.get_web3(config)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_balance(self) -> str:
        """Native balance of the wallet's own address on the active chain."""
        return self.get_native_balance(self._current_chain, self.get_address())

    def get_native_balance(self, chain: str | SupportedChain, address: str) -> str:
        w3 = self.get_web3(chain)
        balance_wei = w3.eth.get_balance(_checksum(address))
        return format_units(balance_wei, NATIVE_DECIMALS)

    def _erc20(self, w3: Web3, token_address: str):
        return w3.eth.contract(address=_checksum(token_address), abi=ERC20_ABI)

    def get_token_decimals(self, chain: str | SupportedChain, token_address: str) -> int:
        w3 = self.get_web3(chain)
        return int(self._erc20(w3, token_address).functions.decimals().call())

    def get_token_balance(
        self, chain: str | SupportedChain, address: str, token_address: str
    ) -> str:
        """ERC-20 balance of *address*, formatted with the token's decimals."""
        owner = _checksum(address)
        w3 = self.get_web3(chain)
        contract = self._erc20(w3, token_address)
        balance = contract.functions.balanceOf(owner).call()
        decimals = contract.functions.decimals().call()
        return format_units(balance, int(decimals))

    def check_allowance(
        self,
        chain: str | SupportedChain,
        token_address: str,
        owner: str,
        spender: str,
    ) -> int:
        owner_cs = _checksum(owner)
        spender_cs = _checksum(spender)
        w3 = self.get_web3(chain)
        contract = self._erc20(w3, token_address)
        return int(contract.functions.allowance(owner_cs, spender_cs).call())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _base_tx(
        self, w3: Web3, chain: ChainConfig, options: TransactionOptions
    ) -> dict[str, Any]:
        tx: dict[str, Any] = {
            "from": self.get_address(),
            "nonce": w3.eth.get_transaction_count(self.get_address()),
            "chainId": chain.chain_id,
            "gasPrice": options.gas_price or w3.eth.gas_price,
        }
        if options.gas:
            tx["gas"] = options.gas
        return tx

    def _sign_and_send(self, w3: Web3, tx: dict[str, Any]) -> str:
        signed = self.identity.account.sign_transaction(tx)
        tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    def transfer_native(
        self,
        chain: str | SupportedChain,
        to: str,
        amount: int,
        options: TransactionOptions | None = None,
    ) -> str:
        """Send *amount* wei of the native token. Returns the tx hash."""
        to_cs = _checksum(to)
        options = options or TransactionOptions()
        config = self.registry.resolve(chain)
        try:
            w3 = self.provider.get_web3(config)
            tx = self._base_tx(w3, config, options)
            tx["to"] = to_cs
            tx["value"] = int(amount)
            if options.data:
                tx["data"] = options.data
            if "gas" not in tx:
                tx["gas"] = w3.eth.estimate_gas(tx)
            tx_hash = self._sign_and_send(w3, tx)
        except Exception as exc:
            raise TransferError(f"Transfer failed: {exc}") from exc

        logger.info(f"Sent {amount} wei to {to_cs} on {config.name}: tx={tx_hash}")
        return tx_hash

    def _simulate_and_submit(
        self,
        chain: str | SupportedChain,
        token_address: str,
        function_name: str,
        args: tuple[str, int],
        options: TransactionOptions | None,
    ) -> str:
        options = options or TransactionOptions()
        config = self.registry.resolve(chain)
        w3 = self.provider.get_web3(config)
        fn = getattr(self._erc20(w3, token_address).functions, function_name)(*args)

        try:
            ok = fn.call({"from": self.get_address()})
        except Exception as exc:
            raise TransferError(f"Simulation of {function_name} failed: {exc}") from exc
        if ok is False:
            raise TransferError(f"Simulation of {function_name} returned false")

        try:
            tx = self._base_tx(w3, config, options)
            if "gas" not in tx:
                tx["gas"] = fn.estimate_gas({"from": self.get_address()})
            tx = fn.build_transaction(tx)
            return self._sign_and_send(w3, tx)
        except Exception as exc:
            raise TransferError(f"Submitting {function_name} failed: {exc}") from exc

    def transfer_token(
        self,
        chain: str | SupportedChain,
        token_address: str,
        to: str,
        amount: int,
        options: TransactionOptions | None = None,
    ) -> str:
        """Simulate then submit an ERC-20 ``transfer``. Returns the tx hash."""
        to_cs = _checksum(to)
        tx_hash = self._simulate_and_submit(
            chain, token_address, "transfer", (to_cs, int(amount)), options
        )
        logger.info(f"Transferred {amount} units of {token_address} to {to_cs}: tx={tx_hash}")
        return tx_hash

    def approve_token(
        self,
        chain: str | SupportedChain,
        token_address: str,
        spender: str,
        amount: int,
        options: TransactionOptions | None = None,
    ) -> str:
        """Simulate then submit an ERC-20 ``approve``. Returns the tx hash."""
        spender_cs = _checksum(spender)
        tx_hash = self._simulate_and_submit(
            chain, token_address, "approve", (spender_cs, int(amount)), options
        )
        logger.info(f"Approved {spender_cs} for {amount} units of {token_address}: tx={tx_hash}")
        return tx_hash


def init_wallet_client(runtime: Any) -> WalletClient:
    """Build a :class:`WalletClient` from the runtime's settings.

    Reads ``XDC_PRIVATE_KEY``, ``XDC_NETWORK`` and the optional
    ``XDC_RPC_URL`` / ``APOTHEM_RPC_URL`` overrides.
    """
    private_key = runtime.get_setting("XDC_PRIVATE_KEY")

    network = (runtime.get_setting("XDC_NETWORK") or "mainnet").strip().lower()
    try:
        default_chain = resolve_chain_name(network)
    except InvalidChainError:
        logger.warning(f"Unknown XDC_NETWORK '{network}', using mainnet")
        default_chain = SupportedChain.XDC

    registry = ChainRegistry()
    for chain, setting in (
        (SupportedChain.XDC, "XDC_RPC_URL"),
        (SupportedChain.APOTHEM, "APOTHEM_RPC_URL"),
    ):
        rpc_url = runtime.get_setting(setting)
        if rpc_url:
            registry.register(chain, rpc_url)

    return WalletClient(private_key, default_chain=default_chain, registry=registry)
