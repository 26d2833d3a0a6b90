"""
Custom exceptions for the Notion export system.
"""


class NotionExportError(Exception):
    """Base exception for Notion export operations."""

    stage = "export"


class ConfigurationError(NotionExportError):
    """Raised when configuration is invalid or missing."""

    stage = "configuration"


class TransportError(NotionExportError):
    """Raised when an HTTP request fails at the network or status level."""

    stage = "transport"


class RemoteRejectedError(NotionExportError):
    """Raised when the Notion API returns a malformed or unexpected response."""

    stage = "remote response"


class ExportFailedError(NotionExportError):
    """Raised when the remote export task reports an error."""

    stage = "export task"

    def __init__(self, reason):
        super().__init__(f"Export failed with reason: {reason}")
        self.reason = reason


class ExportTimeoutError(NotionExportError):
    """Raised when the export task does not finish within the configured timeout."""

    stage = "export task"


class IncompleteTransferError(NotionExportError):
    """Raised when the archive stream breaks before it is fully written."""

    stage = "download"


class ArchiveError(NotionExportError):
    """Raised when the downloaded archive cannot be extracted safely."""

    stage = "extraction"


class MalformedNameError(NotionExportError):
    """Raised when a name cannot be stripped of its hash suffix."""

    stage = "normalization"


class NameCollisionError(NotionExportError):
    """Raised when a rename would overwrite an existing sibling."""

    stage = "normalization"


class RewriteIOError(NotionExportError):
    """Raised when a markdown file cannot be read or written during link rewriting."""

    stage = "link rewriting"
