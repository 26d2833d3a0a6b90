"""
Main module for orchestrating the export, download and normalization process.
"""

import sys
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .archive import extract_archive, remove_archive
from .config import ExportSettings, load_config, prepare_workspace
from .downloader import download_archive, round_megabytes
from .exceptions import ConfigurationError, NotionExportError
from .export_client import NotionExportClient
from .models import NormalizationReport
from .normalizer import normalize_export

console = Console()


def run_export(settings: ExportSettings, client: Optional[NotionExportClient] = None) -> NormalizationReport:
    """
    Run the whole pipeline: export, download, extract and normalize.

    The workspace directory is wiped at the start of every run.

    Args:
        settings: Resolved configuration
        client: Export client to use (default: one built from settings)

    Returns:
        NormalizationReport: Result of the normalization pass
    """
    client = client or NotionExportClient(settings)
    workspace = prepare_workspace(settings)

    # PHASE 1: Export on Notion's side
    console.print("[bold cyan]PHASE 1: Exporting space from Notion...[/bold cyan]")
    export_url = client.export_space()

    # PHASE 2: Download
    console.print("[bold cyan]PHASE 2: Downloading export archive...[/bold cyan]")
    archive = download_archive(export_url, settings.archive_path, session=client.session)
    console.print(f"[green]Downloaded {round_megabytes(archive.size_bytes)}mb to {escape(str(archive.local_path))}[/green]")
    if archive.declared_size is None:
        console.print("[yellow]Server did not announce the archive size, completeness was not verified[/yellow]")

    # PHASE 3: Extract
    console.print("[bold cyan]PHASE 3: Extracting archive...[/bold cyan]")
    extract_archive(archive.local_path, workspace)
    remove_archive(archive.local_path)

    # PHASE 4: Normalize names and links
    console.print("[bold cyan]PHASE 4: Removing hashes from names and links...[/bold cyan]")
    report = normalize_export(workspace)
    console.print(
        f"[yellow]Renamed {report.files_renamed} files and {report.directories_renamed} directories, "
        f"rewrote links in {report.files_rewritten} files[/yellow]"
    )
    if report.rewrite_failures:
        console.print(f"[yellow]Links could not be rewritten in {len(report.rewrite_failures)} files[/yellow]")

    return report


def main():
    """Main function for exporting a Notion space."""
    try:
        load_dotenv()
        settings = load_config()
        run_export(settings)
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except NotionExportError as e:
        console.print(f"[bold red]❌ {e.stage.capitalize()} Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    console.print("[bold green]✅ Export downloaded and unzipped.[/bold green]")


if __name__ == "__main__":
    main()
