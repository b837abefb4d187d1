"""Portfolio action: native balance plus every known token with a balance."""

from __future__ import annotations

import logging
from typing import Any

from xdc_agent_plugin.actions.base import (
    Action,
    default_address,
    default_chain,
    emit,
    prepare_state,
    report_failure,
    validate_private_key,
)
from xdc_agent_plugin.cache import ResultCache, portfolio_cache
from xdc_agent_plugin.errors import PortfolioError
from xdc_agent_plugin.runtime import AgentRuntime, HandlerCallback, Memory, State, extract_params
from xdc_agent_plugin.templates import get_portfolio_template
from xdc_agent_plugin.types import (
    GetPortfolioParams,
    GetPortfolioResponse,
    Portfolio,
    TokenBalance,
)
from xdc_agent_plugin.wallet.address import NATIVE_TOKEN_ADDRESS, is_native_token
from xdc_agent_plugin.wallet.chains import SupportedChain
from xdc_agent_plugin.wallet.client import WalletClient, init_wallet_client

logger = logging.getLogger("xdc_agent_plugin.actions.portfolio")

# Tokens checked on every portfolio lookup; extend via XDC_KNOWN_TOKENS.
KNOWN_TOKENS: dict[str, list[dict[str, str]]] = {
    SupportedChain.XDC.value: [
        {"address": NATIVE_TOKEN_ADDRESS, "symbol": "XDC"},
    ],
    SupportedChain.APOTHEM.value: [
        {"address": NATIVE_TOKEN_ADDRESS, "symbol": "XDC"},
    ],
}


def known_tokens_from_setting(value: Any) -> dict[str, list[dict[str, str]]]:
    """Merge the ``XDC_KNOWN_TOKENS`` setting into :data:`KNOWN_TOKENS`.

    The setting maps a chain name to a list of ``{"address", "symbol"}``
    entries. Malformed entries are dropped.
    """
    merged = {chain: list(tokens) for chain, tokens in KNOWN_TOKENS.items()}
    if not isinstance(value, dict):
        return merged
    for chain, tokens in value.items():
        if not isinstance(tokens, list):
            continue
        for token in tokens:
            if isinstance(token, dict) and token.get("address") and token.get("symbol"):
                merged.setdefault(str(chain).lower(), []).append(
                    {"address": str(token["address"]), "symbol": str(token["symbol"])}
                )
    return merged


def cache_ttl_from_setting(value: Any) -> float | None:
    """Positive TTL from the ``XDC_PORTFOLIO_CACHE_TTL`` setting, else ``None``."""
    try:
        ttl = float(value)
    except (TypeError, ValueError):
        return None
    return ttl if ttl > 0 else None


def portfolio_cache_key(chain: str, address: str) -> str:
    return f"portfolio_{chain}_{address}"


class PortfolioAction:
    def __init__(
        self,
        wallet: WalletClient,
        cache: ResultCache | None = None,
        known_tokens: dict[str, list[dict[str, str]]] | None = None,
        ttl_seconds: float | None = None,
    ):
        self.wallet = wallet
        self.cache = cache if cache is not None else portfolio_cache
        self.known_tokens = known_tokens if known_tokens is not None else KNOWN_TOKENS
        self.ttl_seconds = ttl_seconds

    def get_portfolio(self, params: GetPortfolioParams) -> Portfolio:
        logger.debug(f"Get portfolio params: {params}")
        chain = default_chain(self.wallet, params.chain)
        address = default_address(self.wallet, params.address)
        logger.debug(f"Normalized portfolio params: chain={chain.value} address={address}")

        cache_key = portfolio_cache_key(chain.value, address.lower())
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Returning cached portfolio result")
            return cached.model_copy(deep=True)

        native_symbol = self.wallet.get_chain_config(chain).native_symbol
        try:
            native_amount = self.wallet.get_native_balance(chain, address)
        except Exception as exc:
            raise PortfolioError(f"Failed to get portfolio: {exc}") from exc

        portfolio = Portfolio(
            chain=chain.value,
            address=address,
            balances=[
                TokenBalance(token=NATIVE_TOKEN_ADDRESS, symbol=native_symbol, amount=native_amount)
            ],
        )

        for token in self.known_tokens.get(chain.value, []):
            if is_native_token(token["address"]):
                continue
            try:
                amount = self.wallet.get_token_balance(chain, address, token["address"])
            except Exception as e:
                logger.warning(f"Error fetching balance for token {token['symbol']}: {e}")
                continue
            if amount != "0":
                portfolio.balances.append(
                    TokenBalance(token=token["address"], symbol=token["symbol"], amount=amount)
                )

        self.cache.set(cache_key, portfolio.model_copy(deep=True), ttl=self.ttl_seconds)
        return portfolio

    @staticmethod
    def format_output(portfolio: Portfolio) -> str:
        output = f"Portfolio for {portfolio.address} on {portfolio.chain} network:\n\n"
        if not portfolio.balances:
            return output + "No tokens found in this wallet."
        for balance in portfolio.balances:
            output += f"{balance.symbol or balance.token}: {balance.amount}\n"
        return output


async def get_portfolio_handler(
    runtime: AgentRuntime,
    message: Memory,
    state: State | None = None,
    options: dict[str, Any] | None = None,
    callback: HandlerCallback | None = None,
) -> bool:
    logger.info("Starting getPortfolio action for XDC...")
    try:
        state = await prepare_state(runtime, message, state)
        content = await extract_params(runtime, get_portfolio_template, state)
        params = GetPortfolioParams.model_validate(content)

        action = PortfolioAction(
            init_wallet_client(runtime),
            known_tokens=known_tokens_from_setting(runtime.get_setting("XDC_KNOWN_TOKENS")),
            ttl_seconds=cache_ttl_from_setting(runtime.get_setting("XDC_PORTFOLIO_CACHE_TTL")),
        )
        portfolio = action.get_portfolio(params)
    except Exception as error:
        return await report_failure(callback, "Get portfolio failed", error)

    await emit(
        callback,
        action.format_output(portfolio),
        GetPortfolioResponse(portfolio=portfolio).to_payload(),
    )
    return True


portfolio_action = Action(
    name="getPortfolio",
    description="Get portfolio of XDC and tokens on the XDC network",
    handler=get_portfolio_handler,
    validate=validate_private_key,
    similes=["GET_PORTFOLIO", "CHECK_PORTFOLIO", "SHOW_PORTFOLIO", "LIST_TOKENS", "MY_TOKENS"],
    examples=[
        [
            {"user": "{{user1}}", "content": {"text": "Show my XDC portfolio"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your portfolio on XDC network",
                    "action": "GET_PORTFOLIO",
                    "content": {"chain": "xdc", "address": "{{walletAddress}}"},
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "What's in my wallet on XDC?"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll show you the tokens in your wallet on XDC",
                    "action": "GET_PORTFOLIO",
                    "content": {"chain": "xdc", "address": "{{walletAddress}}"},
                },
            },
        ],
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "What tokens does xdc71C7656EC7ab88b098defB751B7401B5f6d8976F have?"
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll check the tokens this address holds on XDC",
                    "action": "GET_PORTFOLIO",
                    "content": {
                        "chain": "xdc",
                        "address": "xdc71C7656EC7ab88b098defB751B7401B5f6d8976F",
                    },
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "Show my Apothem testnet portfolio"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your portfolio on Apothem testnet",
                    "action": "GET_PORTFOLIO",
                    "content": {"chain": "apothem", "address": "{{walletAddress}}"},
                },
            },
        ],
    ],
)
