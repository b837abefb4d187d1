"""Transfer action: send XDC or an XRC-20 token to another address."""

from __future__ import annotations

import logging
from typing import Any

from xdc_agent_plugin.actions.base import (
    Action,
    default_chain,
    emit,
    prepare_state,
    report_failure,
    validate_private_key,
)
from xdc_agent_plugin.errors import BalanceQueryError, InvalidAddressError, TransferError
from xdc_agent_plugin.runtime import AgentRuntime, HandlerCallback, Memory, State, extract_params
from xdc_agent_plugin.templates import transfer_template
from xdc_agent_plugin.types import TransferParams, TransferResponse
from xdc_agent_plugin.wallet.address import normalize_address, resolve_token_address
from xdc_agent_plugin.wallet.client import WalletClient, init_wallet_client
from xdc_agent_plugin.wallet.units import NATIVE_DECIMALS, format_units, parse_units

logger = logging.getLogger("xdc_agent_plugin.actions.transfer")


class TransferAction:
    def __init__(self, wallet: WalletClient):
        self.wallet = wallet

    def transfer(self, params: TransferParams) -> TransferResponse:
        """Submit one transfer. Failures are raised, never retried."""
        if not params.recipient:
            raise InvalidAddressError("Recipient address is required for a transfer")
        recipient = normalize_address(params.recipient)
        chain = default_chain(self.wallet, params.chain)
        config = self.wallet.get_chain_config(chain)

        try:
            token_address = resolve_token_address(params.token)
        except BalanceQueryError as exc:
            raise TransferError(f"Transfer failed: {exc}") from exc

        amount = params.amount or "0"
        logger.info(
            f"Transferring: {amount} {params.token or config.native_symbol} "
            f"to {recipient} on {config.display_name}"
        )

        try:
            if token_address is None:
                decimals = NATIVE_DECIMALS
                value = parse_units(amount, decimals)
                tx_hash = self.wallet.transfer_native(chain, recipient, value)
            else:
                decimals = self.wallet.get_token_decimals(chain, token_address)
                value = parse_units(amount, decimals)
                tx_hash = self.wallet.transfer_token(chain, token_address, recipient, value)
        except TransferError:
            raise
        except Exception as exc:
            raise TransferError(f"Transfer failed: {exc}") from exc

        return TransferResponse(
            tx_hash=tx_hash,
            recipient=recipient,
            amount=format_units(value, decimals),
            token=config.native_symbol if token_address is None else params.token,
            data="0x",
        )


async def transfer_handler(
    runtime: AgentRuntime,
    message: Memory,
    state: State | None = None,
    options: dict[str, Any] | None = None,
    callback: HandlerCallback | None = None,
) -> bool:
    logger.info("Starting transfer action for XDC...")
    try:
        state = await prepare_state(runtime, message, state)
        content = await extract_params(runtime, transfer_template, state)
        params = TransferParams.model_validate(content)

        action = TransferAction(init_wallet_client(runtime))
        resp = action.transfer(params)
    except Exception as error:
        return await report_failure(callback, "Error transferring tokens", error)

    await emit(
        callback,
        f"Successfully transferred {resp.amount} {resp.token} to {resp.recipient}\n"
        f"Transaction Hash: {resp.tx_hash}",
        resp.to_payload(),
    )
    return True


transfer_action = Action(
    name="transfer",
    description="Transfer a token from one address to another on XDC chain",
    handler=transfer_handler,
    validate=validate_private_key,
    similes=["TRANSFER", "SEND_TOKENS", "TOKEN_TRANSFER", "MOVE_TOKENS"],
    examples=[
        [
            {
                "user": "{{user1}}",
                "content": {"text": "Transfer 1 XDC to 0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb"},
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you transfer 1 XDC to 0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb on XDC",
                    "action": "TRANSFER",
                    "content": {
                        "chain": "xdc",
                        "token": "XDC",
                        "amount": "1",
                        "recipient": "0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb",
                    },
                },
            },
        ],
        [
            {
                "user": "{{user1}}",
                "content": {
                    "text": "Transfer 1 token of 0x1234 to 0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb"
                },
            },
            {
                "user": "{{agent}}",
                "content": {
                    "text": "I'll help you transfer 1 token of 0x1234 to 0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb on XDC",
                    "action": "TRANSFER",
                    "content": {
                        "chain": "xdc",
                        "token": "0x1234",
                        "amount": "1",
                        "recipient": "0x26939338972fa11eFcA1A438fa5D1Daa54a82Adb",
                    },
                },
            },
        ],
    ],
)
