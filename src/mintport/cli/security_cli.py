"""
Command-line interface for the security docs mirror.
"""
import os
import logging
import typer
from typing import Optional

import requests
from rich.console import Console

from mintport.core.config import settings
from mintport.remote.github_client import FetchError, GitHubClient
from mintport.security.sync import DEFAULT_OUTPUT_DIR, SecurityDocsSync

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(help="Security documentation sync")


@app.command("sync")
def sync(
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Folder for the generated pages"),
):
    """
    Fetch POLICY.md, SECURITY.md and the audit listings and write MDX pages.
    """
    output_dir = output_dir or os.path.join(settings.docs_root, DEFAULT_OUTPUT_DIR)
    syncer = SecurityDocsSync(
        GitHubClient.from_settings(settings),
        output_dir=output_dir,
        repo=settings.security_repo,
        branch=settings.security_branch,
    )
    console.print(f"Source: github.com/{settings.security_repo}")
    console.print(f"Output: {output_dir}")
    try:
        written = syncer.sync_all()
    except (FetchError, requests.RequestException, OSError) as e:
        typer.echo(f"Sync failed: {e}", err=True)
        raise typer.Exit(1)

    console.print("[bold green]Security documentation sync completed[/bold green]")
    for path in written:
        console.print(f"  - {path}")
