"""Command-line interface for yuque-sdk."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from yuque_sdk import __version__
from yuque_sdk.clients import BaseYuqueClient, PasswordClient, TokenClient
from yuque_sdk.config import (
    ClientConfig,
    PasswordClientConfig,
    TokenClientConfig,
    load_config,
)
from yuque_sdk.errors import FatalError
from yuque_sdk.models import DocumentDetail
from yuque_sdk.output import MarkdownWriter

app = typer.Typer(
    name="yuque-sdk",
    help="Download Yuque repositories as Markdown.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"yuque-sdk version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Yuque document fetcher."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_config(
    mode: str,
    config_file: Optional[Path],
    overrides: dict,
) -> ClientConfig:
    if config_file:
        base = load_config(config_file)
        data = base.model_dump()
        fields = type(base).model_fields
        data.update({k: v for k, v in overrides.items() if v is not None and k in fields})
        return type(base).model_validate(data)
    model = TokenClientConfig if mode == "token" else PasswordClientConfig
    return model.model_validate(
        {k: v for k, v in overrides.items() if v is not None and k in model.model_fields}
    )


async def _run(client: BaseYuqueClient, writer: MarkdownWriter, ids: list[str]) -> int:
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )

    async with client:
        if isinstance(client, PasswordClient):
            await client.login()
        docs = await client.get_doc_list()
        total = len([d for d in docs if not ids or d.slug in ids])
        task_id = progress.add_task("Downloading...", total=total)

        async def on_doc_downloaded(doc: DocumentDetail, completed: int, total: int) -> None:
            await writer.write(doc)
            progress.update(task_id, completed=completed, description=doc.title or doc.doc_id)

        with progress:
            articles = await client.get_doc_detail_list(docs, ids, on_doc_downloaded)

    await writer.write_index(client.namespace)
    return len(articles)


@app.command()
def fetch(
    login: Optional[str] = typer.Option(None, "--login", "-l", help="User or group login"),
    repo: Optional[str] = typer.Option(None, "--repo", "-r", help="Repository slug"),
    mode: str = typer.Option(
        "token",
        "--mode",
        "-m",
        help="Authentication mode: 'token' or 'password'",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file (its 'mode' key picks the client)",
    ),
    token: Optional[str] = typer.Option(None, "--token", help="API token (or YUQUE_TOKEN)"),
    username: Optional[str] = typer.Option(None, "--username", help="Account login (or YUQUE_USERNAME)"),
    password: Optional[str] = typer.Option(None, "--password", help="Account password (or YUQUE_PASSWORD)"),
    repo_password: Optional[str] = typer.Option(
        None, "--repo-password", help="Repository password (or YUQUE_REPO_PASSWORD)"
    ),
    cookie: Optional[str] = typer.Option(None, "--cookie", help="Browser cookie (or YUQUE_COOKIE)"),
    ids: Optional[list[str]] = typer.Option(
        None,
        "--id",
        "-i",
        help="Only download these document slugs (repeatable)",
    ),
    limit: Optional[int] = typer.Option(None, "--limit", help="Concurrent detail downloads"),
    output: Path = typer.Option(
        Path("./yuque-docs"),
        "--output",
        "-o",
        help="Output directory",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
):
    """
    Download a Yuque repository and write each document as Markdown.

    Examples:

        yuque-sdk fetch -l my-team -r handbook --token $YUQUE_TOKEN

        yuque-sdk fetch -m password -l my-team -r handbook --repo-password secret

        yuque-sdk fetch -c yuque.toml -i getting-started -i faq
    """
    _configure_logging(verbose)

    if mode not in ("token", "password"):
        console.print(f"[red]Invalid mode: {mode}. Use 'token' or 'password'.[/red]")
        raise typer.Exit(1)

    overrides = {
        "login": login,
        "repo": repo,
        "token": token,
        "username": username,
        "password": password,
        "repo_password": repo_password,
        "cookie": cookie,
        "limit": limit,
    }

    try:
        config = _build_config(mode, config_file, overrides)
        client: BaseYuqueClient
        if isinstance(config, TokenClientConfig):
            client = TokenClient(config)
        else:
            client = PasswordClient(config)  # type: ignore[arg-type]
        count = asyncio.run(_run(client, MarkdownWriter(output), ids or []))
    except FatalError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if e.hint:
            console.print(f"[dim]{e.hint}[/dim]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    console.print(f"[green]Written {count} documents to {output}[/green]")


if __name__ == "__main__":
    app()
