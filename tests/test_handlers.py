import pytest

from conftest import RECIPIENT, RECIPIENT_XDC, TEST_ADDRESS, TEST_PRIVATE_KEY, FakeRuntime
from xdc_agent_plugin.actions.balance import get_balance_handler
from xdc_agent_plugin.actions.base import prepare_state, validate_private_key
from xdc_agent_plugin.actions.portfolio import get_portfolio_handler
from xdc_agent_plugin.actions.transfer import transfer_handler
from xdc_agent_plugin.plugin import xdc_plugin
from xdc_agent_plugin.providers import xdc_wallet_provider
from xdc_agent_plugin.runtime import Memory

TX_HASH = "0x" + "ab" * 32
MESSAGE = Memory(user="alice", text="send 1 XDC to xdc26939338972fa11eFcA1A438fa5D1Daa54a82Adb")


@pytest.mark.asyncio
async def test_transfer_handler_success(patch_provider, replies):
    runtime = FakeRuntime(extracted={"recipient": RECIPIENT_XDC, "amount": "1", "token": "XDC"})

    ok = await transfer_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is True
    assert len(replies) == 1
    assert replies[0]["content"]["txHash"] == TX_HASH
    assert replies[0]["content"]["recipient"] == RECIPIENT
    assert replies[0]["text"] == (
        f"Successfully transferred 1 XDC to {RECIPIENT}\nTransaction Hash: {TX_HASH}"
    )
    assert "alice: send 1 XDC" in runtime.contexts[0]


@pytest.mark.asyncio
async def test_transfer_handler_reports_failure(patch_provider, provider, replies):
    runtime = FakeRuntime(extracted={"amount": "1"})

    ok = await transfer_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is False
    assert set(replies[0]["content"]) == {"error"}
    assert replies[0]["text"].startswith("Error transferring tokens: ")
    provider.w3.eth.send_raw_transaction.assert_not_called()


@pytest.mark.asyncio
async def test_handler_tolerates_non_object_extraction(patch_provider, replies):
    runtime = FakeRuntime(extracted=["not", "an", "object"])

    ok = await get_balance_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is True
    assert replies[0]["content"]["address"] == TEST_ADDRESS


@pytest.mark.asyncio
async def test_balance_handler_on_testnet(patch_provider, replies):
    runtime = FakeRuntime(
        settings={"XDC_PRIVATE_KEY": TEST_PRIVATE_KEY, "XDC_NETWORK": "apothem"},
        extracted={"address": None, "token": "null"},
    )

    ok = await get_balance_handler(runtime, MESSAGE, {"recentMessages": ""}, {}, replies.append)

    assert ok is True
    assert replies[0]["content"] == {
        "chain": "apothem",
        "address": TEST_ADDRESS,
        "balance": {"token": "TXDC", "amount": "1"},
    }


@pytest.mark.asyncio
async def test_balance_handler_unsupported_token(patch_provider, replies):
    runtime = FakeRuntime(extracted={"token": "USDT"})

    ok = await get_balance_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is False
    assert "0x or xdc" in replies[0]["content"]["error"]


@pytest.mark.asyncio
async def test_missing_key_fails_without_raising(patch_provider, replies):
    runtime = FakeRuntime(settings={}, extracted={})

    ok = await get_portfolio_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is False
    assert "XDC_PRIVATE_KEY" in replies[0]["content"]["error"]


@pytest.mark.asyncio
async def test_portfolio_handler_uses_known_tokens_setting(patch_provider, provider, replies):
    contract = provider.w3.eth.contract.return_value
    contract.functions.balanceOf.return_value.call.return_value = 7 * 10**18
    runtime = FakeRuntime(
        settings={
            "XDC_PRIVATE_KEY": TEST_PRIVATE_KEY,
            "XDC_KNOWN_TOKENS": {"xdc": [{"address": RECIPIENT, "symbol": "FOO"}]},
        },
    )

    ok = await get_portfolio_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is True
    balances = replies[0]["content"]["portfolio"]["balances"]
    assert [(b["symbol"], b["amount"]) for b in balances] == [("XDC", "1"), ("FOO", "7")]


@pytest.mark.asyncio
async def test_async_callback_is_awaited(patch_provider):
    received = []

    async def callback(reply):
        received.append(reply)

    ok = await get_portfolio_handler(FakeRuntime(), MESSAGE, None, {}, callback)

    assert ok is True
    assert received[0]["text"].startswith(f"Portfolio for {TEST_ADDRESS} on xdc network")


@pytest.mark.asyncio
async def test_handler_without_callback(patch_provider):
    assert await get_balance_handler(FakeRuntime(), MESSAGE) is True


@pytest.mark.asyncio
async def test_prepare_state_attaches_wallet_info(patch_provider):
    state = await prepare_state(FakeRuntime(), MESSAGE, None)

    assert state["walletInfo"].startswith(
        f"XDC Network (XDC Mainnet) Wallet Address: {TEST_ADDRESS}"
    )
    assert "Balance: 1 XDC" in state["walletInfo"]


@pytest.mark.asyncio
async def test_wallet_provider_returns_none_on_error(patch_provider):
    assert await xdc_wallet_provider.get(FakeRuntime(settings={}), MESSAGE) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "key, expected",
    [(TEST_PRIVATE_KEY, True), ("0xanything", True), ("abc", False), (None, False)],
)
async def test_validate_private_key(key, expected):
    runtime = FakeRuntime(settings={"XDC_PRIVATE_KEY": key})
    assert await validate_private_key(runtime) is expected


def test_plugin_exposes_actions_by_name_and_simile():
    assert xdc_plugin.name == "xdc"
    assert [a.name for a in xdc_plugin.actions] == ["transfer", "getBalance", "getPortfolio"]
    assert xdc_plugin.get_action("SEND_TOKENS").name == "transfer"
    assert xdc_plugin.get_action("check-balance").name == "getBalance"
    assert xdc_plugin.get_action("MY_TOKENS").name == "getPortfolio"
    assert xdc_plugin.get_action("swap") is None
    assert xdc_plugin.providers == [xdc_wallet_provider]


@pytest.mark.asyncio
async def test_invalid_extracted_address_only_costs_the_wallet_context_read(
    patch_provider, provider, replies
):
    runtime = FakeRuntime(extracted={"address": "xdc1234", "chain": "xdc"})

    ok = await get_balance_handler(runtime, MESSAGE, None, {}, replies.append)

    assert ok is False
    assert "Invalid address" in replies[0]["content"]["error"]
    provider.w3.eth.get_balance.assert_called_once_with(TEST_ADDRESS)
    provider.w3.eth.contract.assert_not_called()
