"""
Module for cleaning up internal links in exported Markdown files.

Notion URL-encodes the hashed page names inside image and link targets, e.g.
``![pic](My%20Page%200123456789abcdef0123456789abcdef/pic.png)``. Once the
directories are renamed those segments point nowhere, so they are removed.
"""

import re
from pathlib import Path
from typing import Union

from .exceptions import RewriteIOError

# Markdown files, possibly with a stray encoded character before the extension
MARKDOWN_FILE_PATTERN = re.compile(r"(?:%[0-9A-Fa-f]{2})?\.(?:md|markdown)$", re.IGNORECASE)

# ![label](target) or [label](target "title")
LINK_PATTERN = re.compile(r'(!?\[[^\]]*\]\()([^)\s]+)((?:\s+"[^"]*")?\))')

# %XX escape, optionally followed by the 32-hex page hash, right before a "/"
ENCODED_SEGMENT_PATTERN = re.compile(r"%[0-9A-Fa-f]{2}(?:[0-9a-f]{32})?(?=/)")


def is_markdown_file(path: Union[str, Path]) -> bool:
    """Check whether a file name looks like an exported Markdown document."""
    return bool(MARKDOWN_FILE_PATTERN.search(Path(path).name))


def rewrite_links(content: str) -> str:
    """Remove encoded hash segments from every link and image target in content."""

    def replace_link(match):
        target = ENCODED_SEGMENT_PATTERN.sub("", match.group(2))
        return f"{match.group(1)}{target}{match.group(3)}"

    return LINK_PATTERN.sub(replace_link, content)


def rewrite_references(filepath: Union[str, Path]) -> bool:
    """
    Rewrite hashed link targets of a Markdown file in place.

    Must run before the file itself is renamed, since filepath is its
    current on-disk location.

    Args:
        filepath: Current path of the file

    Returns:
        True if the file content changed

    Raises:
        RewriteIOError: If the file cannot be read or written
    """
    filepath = Path(filepath)
    if not is_markdown_file(filepath):
        return False

    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise RewriteIOError(f"Error reading file {filepath}: {e}") from e

    updated_content = rewrite_links(content)
    if updated_content == content:
        return False

    try:
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(updated_content)
    except OSError as e:
        raise RewriteIOError(f"Error writing updated file {filepath}: {e}") from e

    return True
