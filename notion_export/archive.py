"""
Module for unpacking the downloaded export archive.
"""

import shutil
import zipfile
from pathlib import Path
from typing import List, Union

from rich.console import Console

from .exceptions import ArchiveError
from .security import safe_path_join

console = Console()


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> List[Path]:
    """
    Extract a ZIP archive into destination, refusing members that escape it.

    Args:
        archive_path: ZIP file to extract
        destination: Directory to extract into (created if missing)

    Returns:
        List of extracted file paths

    Raises:
        ArchiveError: If the archive is corrupt or contains unsafe members
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    extracted = []

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for member in zf.infolist():
                try:
                    target = safe_path_join(destination, member.filename)
                except ValueError as e:
                    raise ArchiveError(str(e)) from e

                if member.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(member, "r") as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                extracted.append(target)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Export archive is not a valid ZIP file: {e}") from e
    except OSError as e:
        raise ArchiveError(f"Unable to extract {archive_path}: {e}") from e

    console.print(f"Extracted [bold]{len(extracted)}[/bold] files.")
    return extracted


def remove_archive(archive_path: Union[str, Path]) -> None:
    """Delete the archive once it has been extracted."""
    try:
        Path(archive_path).unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ArchiveError(f"Unable to delete archive {archive_path}: {e}") from e
