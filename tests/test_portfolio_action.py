import pytest

from conftest import TEST_ADDRESS, TOKEN, rpc_calls
from xdc_agent_plugin.actions.portfolio import (
    KNOWN_TOKENS,
    PortfolioAction,
    cache_ttl_from_setting,
    known_tokens_from_setting,
)
from xdc_agent_plugin.errors import PortfolioError
from xdc_agent_plugin.types import GetPortfolioParams
from xdc_agent_plugin.wallet.address import NATIVE_TOKEN_ADDRESS

USDT = {"address": TOKEN, "symbol": "USDT"}


@pytest.fixture
def tokens():
    return known_tokens_from_setting({"xdc": [USDT]})


def test_native_only_portfolio(wallet, cache):
    result = PortfolioAction(wallet, cache=cache).get_portfolio(GetPortfolioParams())

    assert result.chain == "xdc"
    assert result.address == TEST_ADDRESS
    assert len(result.balances) == 1
    native = result.balances[0]
    assert native.token == NATIVE_TOKEN_ADDRESS
    assert native.symbol == "XDC"
    assert native.amount == "1"


def test_second_call_within_ttl_is_served_from_cache(wallet, w3, cache, clock, tokens):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.return_value = 5 * 10**18
    action = PortfolioAction(wallet, cache=cache, known_tokens=tokens)

    first = action.get_portfolio(GetPortfolioParams())
    calls = rpc_calls(w3)
    clock.now += 59
    second = action.get_portfolio(GetPortfolioParams(address=TEST_ADDRESS))

    assert rpc_calls(w3) == calls
    assert second == first
    assert second is not first


def test_cache_expires_after_ttl(wallet, w3, cache, clock):
    action = PortfolioAction(wallet, cache=cache)
    action.get_portfolio(GetPortfolioParams())

    clock.now += 60
    w3.eth.get_balance.return_value = 3 * 10**18
    result = action.get_portfolio(GetPortfolioParams())

    assert w3.eth.get_balance.call_count == 2
    assert result.balances[0].amount == "3"


def test_cache_is_keyed_by_chain(wallet, w3, cache):
    action = PortfolioAction(wallet, cache=cache)
    mainnet = action.get_portfolio(GetPortfolioParams(chain="xdc"))
    apothem = action.get_portfolio(GetPortfolioParams(chain="apothem"))

    assert w3.eth.get_balance.call_count == 2
    assert mainnet.balances[0].symbol == "XDC"
    assert apothem.balances[0].symbol == "TXDC"


def test_custom_ttl(wallet, w3, cache, clock):
    action = PortfolioAction(wallet, cache=cache, ttl_seconds=5)
    action.get_portfolio(GetPortfolioParams())
    clock.now += 6
    action.get_portfolio(GetPortfolioParams())
    assert w3.eth.get_balance.call_count == 2


def test_mutating_result_does_not_touch_cache(wallet, cache):
    action = PortfolioAction(wallet, cache=cache)
    first = action.get_portfolio(GetPortfolioParams())
    first.balances.clear()

    assert len(action.get_portfolio(GetPortfolioParams()).balances) == 1


def test_zero_token_balances_are_omitted(wallet, w3, cache, tokens):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.return_value = 0

    result = PortfolioAction(wallet, cache=cache, known_tokens=tokens).get_portfolio(
        GetPortfolioParams()
    )

    assert [b.symbol for b in result.balances] == ["XDC"]


def test_held_tokens_are_listed(wallet, w3, cache, tokens):
    contract = w3.eth.contract.return_value
    contract.functions.balanceOf.return_value.call.return_value = 1_500_000
    contract.functions.decimals.return_value.call.return_value = 6

    result = PortfolioAction(wallet, cache=cache, known_tokens=tokens).get_portfolio(
        GetPortfolioParams()
    )

    assert [(b.symbol, b.amount) for b in result.balances] == [("XDC", "1"), ("USDT", "1.5")]
    assert result.balances[1].token == TOKEN


def test_failing_token_is_skipped(wallet, w3, cache, tokens):
    w3.eth.contract.return_value.functions.balanceOf.return_value.call.side_effect = (
        ConnectionError("rpc down")
    )

    result = PortfolioAction(wallet, cache=cache, known_tokens=tokens).get_portfolio(
        GetPortfolioParams()
    )

    assert len(result.balances) == 1


def test_native_failure_raises_and_is_not_cached(wallet, w3, cache):
    w3.eth.get_balance.side_effect = ConnectionError("rpc down")
    action = PortfolioAction(wallet, cache=cache)

    with pytest.raises(PortfolioError, match="rpc down"):
        action.get_portfolio(GetPortfolioParams())
    assert len(cache) == 0


def test_format_output(wallet, cache):
    action = PortfolioAction(wallet, cache=cache)
    text = action.format_output(action.get_portfolio(GetPortfolioParams()))
    assert text == f"Portfolio for {TEST_ADDRESS} on xdc network:\n\nXDC: 1\n"


def test_known_tokens_from_setting_merges_and_drops_bad_entries():
    merged = known_tokens_from_setting(
        {"XDC": [USDT, {"address": TOKEN}, "junk"], "apothem": "not-a-list"}
    )

    assert merged["xdc"] == KNOWN_TOKENS["xdc"] + [USDT]
    assert merged["apothem"] == KNOWN_TOKENS["apothem"]
    assert known_tokens_from_setting(None) == KNOWN_TOKENS


@pytest.mark.parametrize("value, expected", [(30, 30.0), ("45", 45.0), (None, None), ("x", None), (0, None)])
def test_cache_ttl_from_setting(value, expected):
    assert cache_ttl_from_setting(value) == expected


def test_address_case_shares_one_cache_entry(wallet, w3, cache):
    action = PortfolioAction(wallet, cache=cache)
    action.get_portfolio(GetPortfolioParams(address=TEST_ADDRESS))
    action.get_portfolio(GetPortfolioParams(address=TEST_ADDRESS.lower()))
    action.get_portfolio(GetPortfolioParams(address="xdc" + TEST_ADDRESS[2:].upper()))

    assert w3.eth.get_balance.call_count == 1
    assert len(cache) == 1
