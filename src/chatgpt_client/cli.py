"""
cli.py

PURPOSE: Command-line interface for chatting with a completion service.
DEPENDENCIES: typer, rich

ARCHITECTURE NOTES:
The CLI provides commands for:
- chat: Interactive conversation, choosing among candidate replies
- models: List models the service offers
- config: Show the effective configuration
"""

import asyncio
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from chatgpt_client import __version__
from chatgpt_client.client import ChatClient
from chatgpt_client.config import get_settings
from chatgpt_client.errors import ChatClientError, ConfigurationError
from chatgpt_client.models.options import ClientOptions
from chatgpt_client.observability import init_telemetry, shutdown_telemetry
from chatgpt_client.transport import HttpxTransport
from chatgpt_client.ui import plain

app = typer.Typer(
    name="chatgpt-client",
    help="Chat with an OpenAI-style completion service from the terminal.",
    add_completion=False,
)

console = Console()

CHAT_HELP = """Commands:
  /undo     Remove the last message (or discard unanswered candidates)
  /retry    Send the request again after an empty reply
  /history  Show the conversation so far
  /clear    Start a new conversation
  /quit     Leave"""


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"chatgpt-client version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """ChatGPT Client - Stateful chat with candidate selection."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_options(**overrides: object) -> ClientOptions:
    """Build options from settings plus CLI flags, exiting on bad input."""
    settings = get_settings()
    init_telemetry(settings.otel)

    if not settings.llm.api_key:
        plain.print_error("OPENAI_API_KEY environment variable not set.")
        raise typer.Exit(1)

    try:
        return settings.llm.to_options(**overrides)
    except ConfigurationError as e:
        plain.print_error(str(e))
        raise typer.Exit(1) from None


@app.command()
def chat(
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model to talk to"),
    ] = None,
    system: Annotated[
        str | None,
        typer.Option("--system", "-s", help="System message that opens the conversation"),
    ] = None,
    candidates: Annotated[
        int | None,
        typer.Option(
            "--candidates",
            "-n",
            help="Candidate replies per request",
            min=1,
            max=10,
        ),
    ] = None,
    temperature: Annotated[
        float | None,
        typer.Option(
            "--temperature",
            "-t",
            help="Sampling temperature (0.0-2.0)",
            min=0.0,
            max=2.0,
        ),
    ] = None,
) -> None:
    """Hold an interactive conversation."""
    options = _load_options(model=model, n=candidates, temperature=temperature)

    try:
        asyncio.run(_chat_session(options, system))
    except ConfigurationError as e:
        plain.print_error(str(e))
        raise typer.Exit(1) from None
    finally:
        shutdown_telemetry()


async def _chat_session(options: ClientOptions, system: str | None) -> None:
    async with ChatClient(options) as client:
        await client.initialize()

        plain.print_title(f"Chatting with {options.model}")
        plain.print_info("Type /help for commands.")
        console.print()

        if system:
            client.add_system_message(system)
            plain.print_message(client.get_history()[-1])
            console.print()

        while True:
            try:
                line = plain.print_prompt().strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            if not line:
                continue

            if line.startswith("/"):
                if line == "/quit":
                    break
                await _run_command(client, line)
                continue

            try:
                client.add_user_message(line)
            except ChatClientError as e:
                plain.print_error(str(e))
                continue

            await _request_and_select(client)

    plain.print_info("Goodbye.")


async def _run_command(client: ChatClient, line: str) -> None:
    try:
        if line == "/undo":
            client.remove_last_message()
            plain.print_info("Removed.")
        elif line == "/retry":
            await _request_and_select(client)
        elif line == "/history":
            plain.print_history(client.get_history())
        elif line == "/clear":
            client.clear()
            plain.print_info("Started a new conversation.")
        elif line == "/help":
            plain.print_info(CHAT_HELP)
        else:
            plain.print_error(f"Unknown command: {line}")
    except ChatClientError as e:
        plain.print_error(str(e))


async def _request_and_select(client: ChatClient) -> None:
    with console.status("Waiting for replies..."):
        candidates = await client.send_request()

    if not candidates:
        reason = client.last_outcome.value if client.last_outcome else "unknown"
        plain.print_error(f"No reply ({reason}). Use /retry to try again or /undo to drop it.")
        return

    if len(candidates) == 1:
        chosen = client.select_candidate(0)
    else:
        plain.print_candidates(candidates)
        index = _ask_choice(len(candidates))
        if index is None:
            client.remove_last_message()
            plain.print_info("Candidates discarded. Use /retry to ask again.")
            return
        chosen = client.select_candidate(index)

    console.print()
    plain.print_message(chosen)
    console.print()


def _ask_choice(count: int) -> int | None:
    """Ask for a candidate number; None if the user backs out."""
    while True:
        try:
            answer = plain.print_prompt(f"Pick 1-{count} (/undo to discard)").strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return None

        if answer == "/undo":
            return None
        if answer.isdigit() and 1 <= int(answer) <= count:
            return int(answer) - 1
        plain.print_error(f"Enter a number between 1 and {count}.")


@app.command()
def models() -> None:
    """List the models the service offers."""
    options = _load_options()

    async def fetch() -> list[str]:
        transport = HttpxTransport(options)
        try:
            return await transport.list_models()
        finally:
            await transport.aclose()

    try:
        model_ids = asyncio.run(fetch())
    except ConfigurationError as e:
        plain.print_error(str(e))
        raise typer.Exit(1) from None

    for model_id in sorted(model_ids):
        marker = "[green]*[/green] " if model_id == options.model else "  "
        console.print(f"{marker}{model_id}")


@app.command("config")
def config_cmd() -> None:
    """Show the current configuration."""
    settings = get_settings()
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"  Log level: {settings.log_level}")
    console.print(f"  Debug: {settings.debug}")
    console.print()
    console.print("[bold]LLM Settings:[/bold]")
    console.print(f"  Model: {settings.llm.model}")
    console.print(f"  Endpoint: {settings.llm.endpoint}")
    console.print(f"  Models endpoint: {settings.llm.models_endpoint}")
    console.print(f"  Temperature: {settings.llm.temperature}")
    console.print(f"  Candidates: {settings.llm.n}")
    console.print(f"  Timeout: {settings.llm.timeout}s")
    api_key_status = "set" if settings.llm.api_key else "not set"
    console.print(f"  API Key: {api_key_status}")
    console.print()
    console.print("[bold]OpenTelemetry Settings:[/bold]")
    console.print(f"  Enabled: {settings.otel.enabled}")
    console.print(f"  Service name: {settings.otel.service_name}")
    endpoint_status = settings.otel.endpoint if settings.otel.endpoint else "(console only)"
    console.print(f"  Endpoint: {endpoint_status}")


if __name__ == "__main__":
    app()
