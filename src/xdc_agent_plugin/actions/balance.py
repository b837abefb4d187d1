"""Balance check action for XDC and XRC-20 tokens."""

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
from xdc_agent_plugin.runtime import AgentRuntime, HandlerCallback, Memory, State, extract_params
from xdc_agent_plugin.templates import get_balance_template
from xdc_agent_plugin.types import GetBalanceParams, GetBalanceResponse, TokenBalance
from xdc_agent_plugin.wallet.address import resolve_token_address
from xdc_agent_plugin.wallet.client import WalletClient, init_wallet_client

logger = logging.getLogger("xdc_agent_plugin.actions.balance")


class GetBalanceAction:
    def __init__(self, wallet: WalletClient):
        self.wallet = wallet

    def get_balance(self, params: GetBalanceParams) -> GetBalanceResponse:
        logger.debug(f"Get balance params: {params}")
        chain = default_chain(self.wallet, params.chain)
        address = default_address(self.wallet, params.address)
        token_address = resolve_token_address(params.token)
        logger.debug(f"Normalized get balance params: chain={chain.value} address={address}")

        resp = GetBalanceResponse(chain=chain.value, address=address)
        if token_address is None:
            native_symbol = self.wallet.get_chain_config(chain).native_symbol
            amount = self.wallet.get_native_balance(chain, address)
            resp.balance = TokenBalance(token=native_symbol, amount=amount)
        else:
            amount = self.wallet.get_token_balance(chain, address, token_address)
            resp.balance = TokenBalance(token=params.token, amount=amount)
        return resp

    @staticmethod
    def format_output(resp: GetBalanceResponse) -> str:
        if resp.balance is None:
            return f"No balance found for {resp.address} on {resp.chain}"
        return (
            f"Balance of {resp.address} on {resp.chain}:\n"
            f"{resp.balance.token}: {resp.balance.amount}"
        )


async def get_balance_handler(
    runtime: AgentRuntime,
    message: Memory,
    state: State | None = None,
    options: dict[str, Any] | None = None,
    callback: HandlerCallback | None = None,
) -> bool:
    logger.info("Starting getBalance action for XDC...")
    try:
        state = await prepare_state(runtime, message, state)
        content = await extract_params(runtime, get_balance_template, state)
        params = GetBalanceParams.model_validate(content)

        action = GetBalanceAction(init_wallet_client(runtime))
        resp = action.get_balance(params)
    except Exception as error:
        return await report_failure(callback, "Get balance failed", error)

    await emit(callback, action.format_output(resp), resp.to_payload())
    return True


get_balance_action = Action(
    name="getBalance",
    description="Get balance of XDC or tokens on the XDC network",
    handler=get_balance_handler,
    validate=validate_private_key,
    similes=["GET_BALANCE", "CHECK_BALANCE", "SHOW_BALANCE"],
    examples=[
        [
            {"user": "{{user1}}", "content": {"text": "Check my XDC balance"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your XDC balance",
                    "action": "GET_BALANCE",
                    "content": {"chain": "xdc", "address": "{{walletAddress}}", "token": "XDC"},
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "Check my balance of token 0x1234 on XDC"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your balance of token 0x1234 on XDC",
                    "action": "GET_BALANCE",
                    "content": {"chain": "xdc", "address": "{{walletAddress}}", "token": "0x1234"},
                },
            },
        ],
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "What's the XDC balance of xdc71C7656EC7ab88b098defB751B7401B5f6d8976F?"
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll check the XDC balance of that address",
                    "action": "GET_BALANCE",
                    "content": {
                        "chain": "xdc",
                        "address": "xdc71C7656EC7ab88b098defB751B7401B5f6d8976F",
                        "token": "XDC",
                    },
                },
            },
        ],
        [
            {"user": "{{user1}}", "content": {"text": "Check my wallet balance on Apothem testnet"}},
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you check your wallet balance on Apothem testnet",
                    "action": "GET_BALANCE",
                    "content": {"chain": "apothem", "address": "{{walletAddress}}", "token": "XDC"},
                },
            },
        ],
    ],
)
