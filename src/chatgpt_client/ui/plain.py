"""
plain.py

PURPOSE: Console output for the interactive chat CLI.
DEPENDENCIES: rich

ARCHITECTURE NOTES:
All printing for the CLI goes through this module so the chat loop in
cli.py stays about conversation flow, not formatting.
"""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from chatgpt_client.models.message import Message, Role

console = Console()

_ROLE_STYLES = {
    Role.SYSTEM: "magenta",
    Role.USER: "cyan",
    Role.ASSISTANT: "green",
}


def print_message(message: Message) -> None:
    """Print one conversation turn with a role label."""
    style = _ROLE_STYLES[message.role]
    console.print(f"[bold {style}]{message.role.value}[/bold {style}]")
    console.print(Markdown(message.content))


def print_candidates(candidates: list[Message]) -> None:
    """Print numbered candidates for the user to choose from."""
    for number, candidate in enumerate(candidates, start=1):
        panel = Panel(
            Markdown(candidate.content),
            title=f"[{number}]",
            title_align="left",
            border_style="green",
        )
        console.print(panel)


def print_history(messages: list[Message]) -> None:
    if not messages:
        print_info("The conversation is empty.")
        return
    for message in messages:
        print_message(message)
        console.print()


def print_info(text: str) -> None:
    console.print(f"[dim]{text}[/dim]")


def print_error(text: str) -> None:
    """Print an error message."""
    console.print(f"[red]{text}[/red]")


def print_success(text: str) -> None:
    console.print(f"[green]{text}[/green]")


def print_prompt(label: str = ">") -> str:
    """Print the input prompt and get user input."""
    return console.input(f"[bold cyan]{label}[/bold cyan] ")


def print_title(title: str) -> None:
    panel = Panel(
        Text(title, justify="center", style="bold"),
        border_style="blue",
    )
    console.print(panel)
