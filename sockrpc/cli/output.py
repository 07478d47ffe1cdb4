"""Rich-based output utilities for the sockrpc CLI."""

from rich.console import Console
from rich.markup import escape

from sockrpc.rpc.types import Response

# Shared console instance
console = Console(highlight=False)


def print_error(message: str) -> None:
    """Print an error message in red.

    Args:
        message: The error message to display.
    """
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_info(message: str) -> None:
    """Print an informational message.

    Args:
        message: The info message to display.
    """
    console.print(f"[dim]{escape(message)}[/dim]")


def print_response(response: Response) -> None:
    """Print a response as `result (type)` or as a coloured error line."""
    if response.error is not None:
        code = response.error.get("code")
        message = response.error.get("message", "")
        console.print(
            f"[red]error {code}:[/red] {escape(str(message))} [dim](id={response.id})[/dim]"
        )
        return
    console.print(
        f"{escape(response.result or '')} "
        f"[cyan]({escape(response.result_type or '')})[/cyan] [dim](id={response.id})[/dim]"
    )
