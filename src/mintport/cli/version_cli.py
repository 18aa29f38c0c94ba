"""
Command-line interface for freezing documentation versions.
"""
import os
import logging
import typer
from typing import Optional

from rich.console import Console
from rich.table import Table

from mintport.core.config import settings
from mintport.remote.github_client import GitHubClient
from mintport.versioning.changelog import ChangelogService
from mintport.versioning.freeze import VersionFreezer
from mintport.versioning.versions import list_product_dirs, load_versions_registry, validate_version_format

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Documentation version management")


def _non_interactive() -> bool:
    return os.environ.get("NON_INTERACTIVE", "").lower() in ("1", "true", "yes")


def _require(value: Optional[str], label: str, example: str, default: Optional[str] = None) -> str:
    if value:
        return value
    if _non_interactive():
        typer.echo(f"Error: {label} not provided in non-interactive mode", err=True)
        raise typer.Exit(1)
    return typer.prompt(f"Enter the {label} (e.g., {example})", default=default).strip()


@app.command("freeze")
def freeze(
    product: Optional[str] = typer.Argument(
        None, envvar=["DOCS_SUBDIR", "SUBDIR"], help="Product folder to version, e.g. evm"
    ),
    version: Optional[str] = typer.Option(
        None, "--version", envvar=["CURRENT_VERSION", "FREEZE_VERSION"], help="Version to freeze, e.g. v0.4.x"
    ),
    next_version: Optional[str] = typer.Option(
        None, "--next", envvar="NEW_VERSION", help="Upcoming development version, e.g. v0.5.0"
    ),
    fetch_release_notes: bool = typer.Option(
        True, "--fetch-release-notes/--no-fetch-release-notes",
        help="Fetch release notes from the product repository when they are missing",
    ),
    docs_root: Optional[str] = typer.Option(None, help="Repository root holding docs.json"),
):
    """
    Copy <product>/next into a frozen version folder and register it.
    """
    root = docs_root or settings.docs_root
    choices = list_product_dirs(root)

    product = _require(product, "docs subdirectory to version", ", ".join(choices) or "evm")
    if product not in choices:
        console.print(f"[yellow]Subdirectory \"{product}\" not found at repo root. Proceeding anyway.[/yellow]")

    registry = load_versions_registry(root)
    config = registry.products.get(product)
    next_dev = getattr(config, "nextDev", None) if config else None

    version = _require(version, "version to freeze", "v0.4.x")
    if not validate_version_format(version):
        typer.echo(f"Error: Invalid freeze version format: {version}", err=True)
        raise typer.Exit(1)

    next_version = _require(next_version, "new development version", "v0.5.0", default=next_dev)
    if not validate_version_format(next_version):
        typer.echo(f"Error: Invalid new development version format: {next_version}", err=True)
        raise typer.Exit(1)

    console.print(f"Subdir:   [blue]{product}[/blue]")
    console.print(f"Freezing: [yellow]{version}[/yellow]")
    console.print(f"Next dev: [green]{next_version}[/green]")

    changelog_service = ChangelogService(GitHubClient.from_settings(settings), root)
    freezer = VersionFreezer(root, product, changelog_service)
    try:
        metadata = freezer.freeze(version, next_version, fetch_release_notes=fetch_release_notes)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    console.print(f"[bold green]Version {metadata.version} frozen on {metadata.frozen_date}[/bold green]")
    console.print(f"{product}/next remains the working copy for {next_version}")


@app.command("show")
def show(
    product: Optional[str] = typer.Argument(None, help="Only show this product"),
    docs_root: Optional[str] = typer.Option(None, help="Repository root holding versions.json"),
):
    """
    Display the versions registry.
    """
    registry = load_versions_registry(docs_root or settings.docs_root)
    products = registry.products
    if product:
        if product not in products:
            typer.echo(f"Error: No product entry for {product}", err=True)
            raise typer.Exit(1)
        products = {product: products[product]}

    table = Table(title="Documentation Versions")
    table.add_column("Product", style="cyan")
    table.add_column("Versions", style="green")
    table.add_column("Default")
    table.add_column("Next dev")
    table.add_column("Repository")
    for name, config in products.items():
        table.add_row(
            name,
            ", ".join(config.versions),
            config.default_version or "",
            str(getattr(config, "nextDev", "") or ""),
            config.repository or "",
        )
    console.print(table)
