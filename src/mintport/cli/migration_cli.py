"""
Command-line interface for Docusaurus to Mintlify migration.
"""
import logging
import typer
from typing import Dict, Optional
from pathlib import Path

from rich.console import Console
from rich.table import Table

from mintport.core.config import settings
from mintport.migration.migration_service import MigrationService
from mintport.navigation.docs_json import update_docs_json, write_navigation_snippet
from mintport.remote.github_client import GitHubClient
from mintport.schemas.migration import DirectoryResult

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(name="migrate", help="Docusaurus to Mintlify migration tools")


def _service(product: str, no_fetch: bool, format_code: bool, dry_run: bool) -> MigrationService:
    fetcher = None if no_fetch else GitHubClient.from_settings(settings).fetch_reference
    return MigrationService(product=product, fetcher=fetcher, format_code=format_code, dry_run=dry_run)


def _print_results(results: Dict[str, DirectoryResult]):
    table = Table(title="Migration Results")
    table.add_column("Version", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Unique", justify="right")
    table.add_column("Cache hits", justify="right")
    table.add_column("Images", justify="right")
    for version, result in results.items():
        table.add_row(version, str(result.total_files), str(result.unique_processed),
                      str(result.cache_hits), str(result.images_copied))
    console.print(table)


def _print_report(service: MigrationService):
    report = service.report.generate_report()
    if report:
        console.print(report, markup=False, highlight=False)
    else:
        console.print("[bold green]No migration issues found[/bold green]")


@app.command("all")
def migrate_all(
    source: Path = typer.Argument(..., help="Docusaurus repository holding docs/ and versioned_docs/"),
    target: Path = typer.Argument(..., help="Output folder for the product, e.g. ./sdk"),
    product: str = typer.Argument("generic", help="Product name used for links and navigation"),
    update_nav: bool = typer.Option(False, "--update-nav", help="Rewrite the product dropdown in docs.json"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Convert and report without writing files"),
    staging: bool = typer.Option(False, "--staging", help="Write to the staging folder and emit a navigation snippet"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Keep GitHub reference blocks as comments"),
    format_code: bool = typer.Option(False, "--format-code", help="Reformat fenced code blocks"),
    docs_root: Optional[Path] = typer.Option(None, help="Folder holding docs.json and versions.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Migrate every version of a Docusaurus site.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not source.exists():
        typer.echo(f"Error: Source repository {source} does not exist", err=True)
        raise typer.Exit(1)

    if staging:
        target = Path(settings.staging_dir) / product
    console.print(f"[bold blue]Migrating all versions of {product.upper()} from {source} to {target}[/bold blue]")

    service = _service(product, no_fetch, format_code, dry_run)
    try:
        results = service.migrate_all_versions(str(source), str(target))
    except (OSError, ValueError) as e:
        typer.echo(f"Error during migration: {e}", err=True)
        raise typer.Exit(1)

    _print_results(results)
    _print_report(service)

    all_version_data = {version: result.files for version, result in results.items()}
    if dry_run:
        console.print("[yellow]Dry run: navigation left untouched[/yellow]")
    elif staging:
        snippet = write_navigation_snippet(all_version_data, product, settings.staging_dir)
        console.print(f"Navigation snippet written to {snippet}. Add it to docs.json under navigation.dropdowns")
    elif update_nav:
        root = str(docs_root or settings.docs_root)
        try:
            update_docs_json(root, all_version_data, product)
        except (OSError, ValueError) as e:
            typer.echo(f"Error updating navigation: {e}", err=True)
            raise typer.Exit(1)
        console.print("[green]Updated docs.json and versions.json[/green]")
    else:
        console.print("Skipping navigation update (use --update-nav)")

    console.print(f"[bold green]Migration complete: {target}[/bold green]")


@app.command("single")
def migrate_single(
    source: Path = typer.Argument(..., help="Docusaurus docs folder to convert"),
    target: Path = typer.Argument(..., help="Output folder for the product"),
    product: str = typer.Argument("generic", help="Product name used for links"),
    version: str = typer.Option("next", "--version", help="Version folder to write, e.g. v0.50"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Convert and report without writing files"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Keep GitHub reference blocks as comments"),
    format_code: bool = typer.Option(False, "--format-code", help="Reformat fenced code blocks"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Migrate one docs folder into <target>/<version>.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    service = _service(product, no_fetch, format_code, dry_run)
    try:
        result = service.migrate_single_version(str(source), str(target), version)
    except (OSError, ValueError) as e:
        typer.echo(f"Error during migration: {e}", err=True)
        raise typer.Exit(1)

    _print_results({version: result})
    _print_report(service)


@app.command("file")
def migrate_file(
    input_path: Path = typer.Argument(..., help="Docusaurus .md/.mdx file"),
    output_path: Path = typer.Argument(..., help="Where to write the .mdx result"),
    product: str = typer.Option("generic", "--product", help="Product name used for links"),
    version: str = typer.Option("next", "--version", help="Version used for links"),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Keep GitHub reference blocks as comments"),
    format_code: bool = typer.Option(False, "--format-code", help="Reformat fenced code blocks"),
):
    """
    Convert a single file.
    """
    if not input_path.is_file():
        typer.echo(f"Error: Input file {input_path} does not exist", err=True)
        raise typer.Exit(1)

    service = _service(product, no_fetch, format_code, dry_run=False)
    try:
        result = service.convert_file(str(input_path), str(output_path), version)
    except OSError as e:
        typer.echo(f"Error converting {input_path}: {e}", err=True)
        raise typer.Exit(1)

    console.print(f"[green]Converted[/green] {input_path} -> {output_path} ({result.metadata.title})")
    report = service.report.generate_report()
    if report:
        console.print(report, markup=False, highlight=False)
