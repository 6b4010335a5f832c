"""
MyDocta CLI: the `mydocta` command.

Commands:
  mydocta serve            Run the chat API service
  mydocta chat             Interactive consultation REPL
  mydocta send <message>   One-shot turn (text, --image or --audio)
  mydocta history          Print the persisted conversation
  mydocta new-session      Clear the conversation
"""

import asyncio
import json
from typing import Optional, Tuple

import click
from dotenv import load_dotenv
from rich.console import Console

from controllers.session_controller import SessionController
from services.gateway.factory import create_gateway
from services.session.chat_backends import ChatBackend, HttpChatBackend, LocalChatBackend
from services.session.conversation_store import ConversationStore
from services.session.state_slot import JsonStateSlot
from utils.config import Settings, configure_logging

__version__ = "0.1.0"

load_dotenv()

console = Console()


def get_settings() -> Settings:
    try:
        return Settings.from_env()
    except RuntimeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1)


def build_controller(settings: Settings, local: bool = False) -> Tuple[SessionController, ChatBackend]:
    """Load the persisted conversation and pick how turns reach the model."""
    store = ConversationStore.load(JsonStateSlot(settings.session_slot_path))
    if local:
        backend: ChatBackend = LocalChatBackend(create_gateway(settings))
    else:
        backend = HttpChatBackend(settings.api_url, timeout=settings.http_timeout)
    return SessionController(store, backend), backend


def run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this invocation.")
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str]):
    """MyDocta CLI: AI medical consultation from your terminal."""
    settings = get_settings()
    configure_logging(log_level or ("WARNING" if ctx.invoked_subcommand != "serve" else settings.log_level))
    ctx.obj = settings


@main.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve_cmd(host: str, port: int, reload: bool):
    """Run the chat API service."""
    import uvicorn

    uvicorn.run("main:app", host=host, port=port, reload=reload)


@main.command("history")
@click.option("--json", "json_output", is_flag=True, help="Print raw stored messages.")
@click.pass_obj
def history_cmd(settings: Settings, json_output: bool):
    """Print the persisted conversation."""
    from cli.chat import render_message

    store = ConversationStore.load(JsonStateSlot(settings.session_slot_path))
    if json_output:
        click.echo(json.dumps([msg.to_dict() for msg in store.messages], indent=2))
        return
    if not store.messages:
        console.print("[dim]No messages yet.[/dim]")
        return
    for message in store.messages:
        render_message(message)


@main.command("new-session")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def new_session_cmd(settings: Settings, yes: bool):
    """Clear the current chat and report."""
    if not yes and not click.confirm("Start a new session? This will clear the current chat and report."):
        return
    store = ConversationStore.load(JsonStateSlot(settings.session_slot_path))
    store.erase()
    console.print("[cyan]New session started.[/cyan]")


# Register subcommands from separate modules
from cli.chat import chat_cmd, send_cmd  # noqa: E402

main.add_command(chat_cmd)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()
