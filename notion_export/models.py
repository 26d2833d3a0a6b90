"""
Data structures shared across the export pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import TASK_STATE_FAILURE, TASK_STATE_SUCCESS
from .exceptions import RemoteRejectedError


class ExportState(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ExportJob:
    """Snapshot of a remote export task as reported by ``getTasks``."""

    task_id: str
    state: ExportState = ExportState.PENDING
    pages_exported: int = 0
    error: Optional[str] = None
    download_url: Optional[str] = None

    @classmethod
    def from_task(cls, task: Dict[str, Any]) -> "ExportJob":
        """
        Build a job from a single entry of the ``getTasks`` results.

        Args:
            task: Raw task payload, e.g. ``{"id", "state", "error", "status"}``

        Returns:
            ExportJob: Parsed job snapshot
        """
        status = task.get("status") or {}
        if not isinstance(status, dict):
            raise RemoteRejectedError(f"Task status is not an object: {status!r}")

        pages_exported = status.get("pagesExported") or 0
        if isinstance(pages_exported, bool) or not isinstance(pages_exported, (int, float)):
            raise RemoteRejectedError(f"Task reports a non-numeric page count: {pages_exported!r}")

        download_url = status.get("exportURL")
        if download_url is not None and not isinstance(download_url, str):
            raise RemoteRejectedError(f"Task reports an invalid export URL: {download_url!r}")

        error = task.get("error")
        raw_state = task.get("state")

        if error or raw_state == TASK_STATE_FAILURE:
            state = ExportState.FAILED
        elif raw_state == TASK_STATE_SUCCESS:
            state = ExportState.SUCCESS
        else:
            state = ExportState.PENDING

        return cls(
            task_id=task.get("id", ""),
            state=state,
            pages_exported=int(pages_exported),
            error=error,
            download_url=download_url,
        )

    @property
    def is_terminal(self) -> bool:
        return self.state in (ExportState.SUCCESS, ExportState.FAILED)


@dataclass
class ArchiveHandle:
    """A downloaded export archive waiting to be extracted."""

    local_path: Path
    size_bytes: int
    declared_size: Optional[int] = None


@dataclass
class NormalizationReport:
    """Summary of a normalization pass over an extracted export."""

    files_renamed: int = 0
    directories_renamed: int = 0
    files_rewritten: int = 0
    rewrite_failures: List[Path] = field(default_factory=list)
    visited: List[Path] = field(default_factory=list)
