"""Shared fixtures: a test key, a mocked Web3 instance and a scripted runtime."""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from web3 import Web3

from xdc_agent_plugin.cache import ResultCache, portfolio_cache
from xdc_agent_plugin.runtime import Memory
from xdc_agent_plugin.wallet.chains import SupportedChain
from xdc_agent_plugin.wallet.client import WalletClient

# Well-known development key (Hardhat/Anvil account #0)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RECIPIENT = Web3.to_checksum_address("0x26939338972fa11efca1a438fa5d1daa54a82adb")
RECIPIENT_XDC = "xdc" + RECIPIENT[2:]
TOKEN = Web3.to_checksum_address("0x951857744785e80e2de051c32ee7b25f9c458c42")
TX_HASH_BYTES = bytes.fromhex("ab" * 32)


class FakeProvider:
    """Stands in for ``Web3Provider``; always hands out the same mock."""

    def __init__(self, w3: MagicMock):
        self.w3 = w3
        self.requested: List[str] = []

    def get_web3(self, chain):
        self.requested.append(chain.name)
        return self.w3


def make_w3(native_wei: int = 10**18, token_units: int = 0, token_decimals: int = 18) -> MagicMock:
    w3 = MagicMock(name="Web3")
    w3.eth.get_balance.return_value = native_wei
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.gas_price = 250_000_000
    w3.eth.estimate_gas.return_value = 21_000
    w3.eth.send_raw_transaction.return_value = TX_HASH_BYTES

    contract = MagicMock(name="Contract")
    contract.functions.balanceOf.return_value.call.return_value = token_units
    contract.functions.decimals.return_value.call.return_value = token_decimals
    contract.functions.allowance.return_value.call.return_value = 0
    for name in ("transfer", "approve"):
        fn = getattr(contract.functions, name).return_value
        fn.call.return_value = True
        fn.estimate_gas.return_value = 60_000
        fn.build_transaction.side_effect = lambda tx: {
            **tx,
            "to": TOKEN,
            "data": "0xa9059cbb" + "00" * 64,
        }
    w3.eth.contract.return_value = contract
    return w3


def rpc_calls(w3: MagicMock) -> int:
    """Number of chain reads issued through the mock."""
    contract = w3.eth.contract.return_value
    return (
        w3.eth.get_balance.call_count
        + contract.functions.balanceOf.return_value.call.call_count
        + contract.functions.decimals.return_value.call.call_count
    )


class FakeRuntime:
    """Scripted ``AgentRuntime``: fixed settings and a fixed extraction result."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None, extracted: Any = None):
        self.settings = settings if settings is not None else {
            "XDC_PRIVATE_KEY": TEST_PRIVATE_KEY,
            "XDC_NETWORK": "mainnet",
        }
        self.extracted = extracted if extracted is not None else {}
        self.contexts: List[str] = []

    def get_setting(self, key: str) -> Any:
        return self.settings.get(key)

    async def compose_state(self, message: Memory) -> Dict[str, Any]:
        return {"recentMessages": f"{message.user}: {message.text}"}

    async def update_recent_message_state(self, state: Dict[str, Any]) -> Dict[str, Any]:
        return dict(state)

    async def generate_object(self, context: str) -> Any:
        self.contexts.append(context)
        return self.extracted


@pytest.fixture
def w3():
    return make_w3()


@pytest.fixture
def provider(w3):
    return FakeProvider(w3)


@pytest.fixture
def wallet(provider):
    return WalletClient(TEST_PRIVATE_KEY, default_chain=SupportedChain.XDC, provider=provider)


@pytest.fixture
def testnet_wallet(provider):
    return WalletClient(TEST_PRIVATE_KEY, default_chain=SupportedChain.APOTHEM, provider=provider)


@pytest.fixture
def clock():
    """Manually advanced monotonic clock: ``clock.now`` is the current time."""

    class _Clock:
        now = 1000.0

        def __call__(self) -> float:
            return self.now

    return _Clock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl_seconds=60, clock=clock)


@pytest.fixture
def patch_provider(monkeypatch, provider):
    """Make ``init_wallet_client`` use the mocked Web3 provider."""
    monkeypatch.setattr("xdc_agent_plugin.wallet.client.Web3Provider", lambda: provider)
    return provider


@pytest.fixture
def replies():
    return []


@pytest.fixture(autouse=True)
def _empty_portfolio_cache():
    portfolio_cache.clear()
    yield
    portfolio_cache.clear()
