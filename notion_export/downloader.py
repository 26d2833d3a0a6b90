"""
Module for streaming the export archive to local disk.
"""

from pathlib import Path
from typing import Optional, Union

import requests
from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TransferSpeedColumn

from .constants import DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT_SECONDS
from .exceptions import IncompleteTransferError, TransportError
from .models import ArchiveHandle

console = Console()


def round_megabytes(size_bytes: int) -> float:
    """Convert a byte count to megabytes with two decimals."""
    return round(size_bytes / 1000 / 1000, 2)


def _declared_size(response) -> Optional[int]:
    value = response.headers.get("content-length")
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


def download_archive(
    url: str,
    destination: Union[str, Path],
    session: Optional[requests.Session] = None,
    chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    timeout=DOWNLOAD_TIMEOUT_SECONDS,
) -> ArchiveHandle:
    """
    Stream a file from url to destination without holding it in memory.

    Args:
        url: Download URL of the archive
        destination: Local file to write
        session: Session to send the request with (default: plain requests)
        chunk_size: Bytes read per chunk
        timeout: requests timeout, (connect, read) in seconds

    Returns:
        ArchiveHandle: Path and size of the written archive

    Raises:
        TransportError: On connection failure or a non-2xx status
        IncompleteTransferError: If the stream breaks before it is complete
    """
    destination = Path(destination)
    http = session if session is not None else requests

    try:
        response = http.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Unable to download export archive: {e}") from e

    declared_size = _declared_size(response)
    if declared_size is not None:
        console.print(f"Downloading {round_megabytes(declared_size)}mb...")
    else:
        console.print("Downloading export archive (size unknown)...")

    written = 0
    try:
        with response, open(destination, "wb") as f, Progress(
            "[progress.description]{task.description}",
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Downloading", total=declared_size)
            for chunk in response.iter_content(chunk_size):
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
                    progress.update(task, advance=len(chunk))
    except requests.exceptions.RequestException as e:
        destination.unlink(missing_ok=True)
        raise IncompleteTransferError(
            f"Download interrupted after {written} bytes: {e}"
        ) from e
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise IncompleteTransferError(f"Unable to write archive to {destination}: {e}") from e

    if declared_size is not None and written < declared_size:
        destination.unlink(missing_ok=True)
        raise IncompleteTransferError(
            f"Download ended after {written} of {declared_size} bytes."
        )

    return ArchiveHandle(local_path=destination, size_bytes=written, declared_size=declared_size)
