"""Typer-based CLI entry point."""

from __future__ import annotations

import asyncio
import logging
from functools import wraps
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from multidrag.core.pagination import PaginationController
from multidrag.core.reorder import compute_permutation
from multidrag.errors import MultiDragError, OptionsLoadError, OptionsValidationError, UnknownItemError
from multidrag.settings.options import ListOptions, load_options

app = typer.Typer(help="Multi-selection drag-to-reorder list engine")
console = Console()


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (UnknownItemError, OptionsLoadError, OptionsValidationError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except MultiDragError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """Configure logging for every command."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
@_handle_errors
def reorder(
    items: str = typer.Argument(..., help="Comma separated items, e.g. a,b,c,d"),
    select: str = typer.Option(..., "--select", "-s", help="Comma separated items to move"),
    to: int = typer.Option(..., "--to", "-t", help="Drop target index"),
) -> None:
    """Move the selected items to INDEX as one block and print the result."""

    values = _split(items)
    selected = _split(select)
    original_index_of = {value: index for index, value in enumerate(values)}
    missing = [value for value in selected if value not in original_index_of]
    if missing:
        raise UnknownItemError(f"not in the list: {', '.join(missing)}")

    result = compute_permutation(values, selected, original_index_of, to)
    print(f"[green]{','.join(result)}")


@app.command()
@_handle_errors
def simulate(
    items: int = typer.Option(45, "--items", "-n", min=0, help="Items available in the fake backend"),
    page_size: int = typer.Option(20, "--page-size", "-p", help="Items per page"),
    pages: int = typer.Option(10, "--pages", "-k", min=1, help="Maximum pages to request"),
) -> None:
    """Page through an in-memory backend and print every request."""

    options = ListOptions.from_mapping({"page_size": page_size})
    backend = [f"item-{index}" for index in range(items)]
    loaded: List[str] = []

    table = Table(title="Page requests")
    table.add_column("Page", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Added", justify="right")
    table.add_column("Has more")

    async def fetch(page: int, size: int) -> None:
        start = (page - 1) * size
        loaded.extend(backend[start : start + size])

    controller = PaginationController(
        lambda: len(loaded),
        on_page_request=fetch,
        options=options,
        on_page_loaded=lambda page, added, has_more: table.add_row(
            str(page), str(options.page_size), str(added), "yes" if has_more else "no"
        ),
    )

    async def run() -> None:
        for _ in range(pages):
            if not await controller.request_next_page():
                break

    asyncio.run(run())
    console.print(table)
    print(f"Loaded {len(loaded)} of {items} items; footer: {controller.footer_state or '-'}")


@app.command("options")
@_handle_errors
def show_options(
    path: Optional[Path] = typer.Argument(None, help="JSON options file to validate"),
) -> None:
    """Validate an options file and print the merged options."""

    options = load_options(path) if path is not None else ListOptions()
    table = Table(title=str(path) if path is not None else "Default options")
    table.add_column("Key")
    table.add_column("Value")
    for key, value in options.to_dict().items():
        table.add_row(key, repr(value))
    console.print(table)


if __name__ == "__main__":
    app()
