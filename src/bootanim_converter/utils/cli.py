"""Shared CLI setup and error handling."""

import functools
import logging
from collections.abc import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from bootanim_converter.errors import BootAnimError, ExternalToolFailure

EXIT_FAILURE = 1
EXIT_INTERRUPT = 130

console = Console()
stderr_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=stderr_console, rich_tracebacks=True, show_time=True)],
        force=True,
    )


def cli_error_handler(func: Callable) -> Callable:
    """Wrap a CLI command so every fatal error ends in a message and a non-zero exit."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (typer.Exit, SystemExit):
            raise
        except KeyboardInterrupt:
            stderr_console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
            raise typer.Exit(code=EXIT_INTERRUPT)
        except ExternalToolFailure as e:
            stderr_console.print(f"[bold red]Error:[/bold red] {e}")
            if e.stderr.strip():
                stderr_console.print(e.stderr.strip().splitlines()[-1], markup=False, style="dim")
            raise typer.Exit(code=EXIT_FAILURE)
        except (BootAnimError, FileNotFoundError, FileExistsError, ValueError, RuntimeError) as e:
            stderr_console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_FAILURE)
        except Exception as e:
            logging.getLogger(__name__).debug("Unexpected error", exc_info=True)
            stderr_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_FAILURE)

    return wrapper
