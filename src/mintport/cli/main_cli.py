"""
Top-level CLI that aggregates the migrate, version, changelog, security and links sub-apps.
"""

import logging
import typer
from mintport.cli.migration_cli import app as migration_app
from mintport.cli.version_cli import app as version_app
from mintport.cli.changelog_cli import app as changelog_app
from mintport.cli.security_cli import app as security_app
from mintport.cli.links_cli import app as links_app


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

main_app = typer.Typer(help="mintport: Docusaurus to Mintlify migration and docs versioning")

main_app.add_typer(migration_app, name="migrate")
main_app.add_typer(version_app, name="version")
main_app.add_typer(changelog_app, name="changelog")
main_app.add_typer(security_app, name="security")
main_app.add_typer(links_app, name="links")


def main():
    main_app()

if __name__ == "__main__":
    main()
