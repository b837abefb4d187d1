"""CLI for the XDC agent plugin - check balances and send XDC from the terminal."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from xdc_agent_plugin.config import (
    LLMConfig,
    LLMProviderConfig,
    PluginConfig,
    get_config_path,
    load_config_or_default,
    save_config,
)
from xdc_agent_plugin.errors import XDCPluginError

app = typer.Typer(
    name="xdc-agent",
    help="Check balances, portfolios and send transfers on the XDC Network.",
    no_args_is_help=True,
)
console = Console()

_config_path: Path | None = None

# Short names accepted by ``ask`` in addition to action names and similes
_ACTION_SHORTCUTS = {
    "balance": "getBalance",
    "portfolio": "getPortfolio",
    "send": "transfer",
}


def _version_callback(value: bool):
    if value:
        from xdc_agent_plugin import __version__
        console.print(f"xdc-agent {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: .xdc-agent/config.yaml)",
        envvar="XDC_AGENT_CONFIG",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Check balances, portfolios and send transfers on the XDC Network."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _load_config() -> PluginConfig:
    return load_config_or_default(_config_path)


def _wallet():
    from xdc_agent_plugin.runtime import PluginRuntime
    from xdc_agent_plugin.wallet.client import init_wallet_client

    return init_wallet_client(PluginRuntime(_load_config()))


def _fail(error: Exception) -> None:
    console.print(f"[red]{error}[/red]")
    raise typer.Exit(1)


# ------------------------------------------------------------------
# Setup
# ------------------------------------------------------------------


@app.command("init")
def init(
    network: str = typer.Option("mainnet", "--network", "-n", help="mainnet or testnet"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
):
    """Write a starter config that reads secrets from environment variables."""
    path = _config_path or get_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force)")
        raise typer.Exit(1)

    config = PluginConfig()
    config.wallet.private_key = "${XDC_PRIVATE_KEY}"
    config.network.network = network
    config.llm = LLMConfig(
        default_provider="anthropic",
        anthropic=LLMProviderConfig(
            api_key="${ANTHROPIC_API_KEY}", model="claude-sonnet-4-5-20250929"
        ),
    )
    save_config(config, path)
    console.print(f"[green]Config written to {path}[/green]")


@app.command("chains")
def chains():
    """List the supported XDC networks."""
    from xdc_agent_plugin.wallet.chains import CHAIN_TEMPLATES

    table = Table(title="Supported Chains")
    table.add_column("Name", style="cyan")
    table.add_column("Chain ID", justify="right")
    table.add_column("Symbol")
    table.add_column("RPC", style="dim")
    table.add_column("Explorer", style="dim")
    for chain in CHAIN_TEMPLATES.values():
        table.add_row(
            chain.name,
            str(chain.chain_id),
            chain.native_symbol,
            chain.rpc_url,
            chain.explorer_url,
        )
    console.print(table)


# ------------------------------------------------------------------
# Wallet commands (no LLM involved)
# ------------------------------------------------------------------


@app.command("address")
def address():
    """Show the wallet address in both notations."""
    from xdc_agent_plugin.wallet.address import to_xdc_address

    try:
        wallet = _wallet()
    except XDCPluginError as e:
        _fail(e)

    addr = wallet.get_address()
    chain = wallet.get_current_chain()
    console.print(Panel(
        f"[cyan]{addr}[/cyan]\n[cyan]{to_xdc_address(addr)}[/cyan]\n\n"
        f"[dim]Active network: {chain.display_name} (chain id {chain.chain_id})[/dim]",
        title="Wallet Address",
    ))


@app.command("balance")
def balance(
    chain: str = typer.Option(None, "--chain", help="xdc or apothem (default: configured network)"),
    addr: str = typer.Option(None, "--address", "-a", help="Address to check (default: own wallet)"),
    token: str = typer.Option(None, "--token", "-t", help="Token contract address (default: XDC)"),
):
    """Show the XDC or token balance of an address."""
    from xdc_agent_plugin.actions.balance import GetBalanceAction
    from xdc_agent_plugin.types import GetBalanceParams

    try:
        action = GetBalanceAction(_wallet())
        resp = action.get_balance(GetBalanceParams(chain=chain, address=addr, token=token))
    except XDCPluginError as e:
        _fail(e)
    except Exception as e:
        _fail(RuntimeError(f"Get balance failed: {e}"))

    console.print(action.format_output(resp))


@app.command("portfolio")
def portfolio(
    chain: str = typer.Option(None, "--chain", help="xdc or apothem (default: configured network)"),
    addr: str = typer.Option(None, "--address", "-a", help="Address to check (default: own wallet)"),
):
    """Show the native balance and every known token held by an address."""
    from xdc_agent_plugin.actions.portfolio import (
        PortfolioAction,
        cache_ttl_from_setting,
        known_tokens_from_setting,
    )
    from xdc_agent_plugin.types import GetPortfolioParams

    config = _load_config()
    try:
        action = PortfolioAction(
            _wallet(),
            known_tokens=known_tokens_from_setting(config.get_setting("XDC_KNOWN_TOKENS")),
            ttl_seconds=cache_ttl_from_setting(config.get_setting("XDC_PORTFOLIO_CACHE_TTL")),
        )
        result = action.get_portfolio(GetPortfolioParams(chain=chain, address=addr))
    except XDCPluginError as e:
        _fail(e)

    table = Table(title=f"Portfolio for {result.address} on {result.chain}")
    table.add_column("Symbol", style="cyan")
    table.add_column("Token", style="dim")
    table.add_column("Amount", justify="right")
    for bal in result.balances:
        table.add_row(bal.symbol or "", bal.token, bal.amount)
    console.print(table)


@app.command("transfer")
def transfer(
    amount: str = typer.Argument(help="Amount to send (e.g. 0.01)"),
    to: str = typer.Option(..., "--to", help="Recipient address (0x... or xdc...)"),
    token: str = typer.Option(None, "--token", "-t", help="Token contract address (default: XDC)"),
    chain: str = typer.Option(None, "--chain", help="xdc or apothem (default: configured network)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Send XDC or a token. Asks for confirmation first."""
    from xdc_agent_plugin.actions.transfer import TransferAction
    from xdc_agent_plugin.types import TransferParams

    try:
        wallet = _wallet()
        params = TransferParams(recipient=to, amount=amount, token=token, chain=chain)
        chain_info = wallet.get_chain_config(chain or wallet.current_chain)
    except XDCPluginError as e:
        _fail(e)

    console.print(f"\n[bold]Send {amount} {token or chain_info.native_symbol} on {chain_info.name}[/bold]")
    console.print(f"  To: {to}")
    console.print(f"  Explorer: {chain_info.explorer_url}\n")
    if not yes:
        typer.confirm("Confirm this transaction?", abort=True)

    try:
        resp = TransferAction(wallet).transfer(params)
    except XDCPluginError as e:
        _fail(e)

    console.print(Panel(
        f"[bold green]Transaction sent![/bold green]\n\n"
        f"Amount: {resp.amount} {resp.token}\n"
        f"Tx: [cyan]{resp.tx_hash}[/cyan]\n"
        f"Explorer: {chain_info.explorer_url}/tx/{resp.tx_hash}",
        title="Transaction Sent",
    ))


# ------------------------------------------------------------------
# Conversational path
# ------------------------------------------------------------------


@app.command("ask")
def ask(
    action_name: str = typer.Argument(help="transfer, balance or portfolio"),
    message: str = typer.Argument(help="Free-text request, e.g. 'what is my balance on apothem?'"),
    user: str = typer.Option("user", "--user", help="Name of the message sender"),
):
    """Run an action on a chat message, letting the LLM extract the parameters."""
    from xdc_agent_plugin.plugin import xdc_plugin
    from xdc_agent_plugin.runtime import Memory, PluginRuntime

    action = xdc_plugin.get_action(_ACTION_SHORTCUTS.get(action_name.lower(), action_name))
    if action is None:
        console.print(f"[red]Unknown action '{action_name}'.[/red]")
        raise typer.Exit(1)

    runtime = PluginRuntime(_load_config())
    replies: list[dict] = []

    async def _ask() -> bool:
        if not await action.validate(runtime):
            console.print("[red]XDC_PRIVATE_KEY is missing or not 0x-prefixed.[/red]")
            return False
        return await action.handler(runtime, Memory(user=user, text=message), None, {}, replies.append)

    ok = asyncio.run(_ask())
    for reply in replies:
        style = "green" if ok else "red"
        console.print(Panel(reply["text"], title=action.name, border_style=style))
        console.print_json(json.dumps(reply["content"], default=str))
    if not ok:
        raise typer.Exit(1)
