"""
Module for removing the content hashes Notion appends to exported names.

A page called "Roadmap" is exported as "Roadmap 0123456789abcdef0123456789abcdef.md"
next to a directory "Roadmap 0123456789abcdef0123456789abcdef" holding its
subpages and attachments. Normalization renames both back to "Roadmap(.md)".
"""

import re
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from rich.console import Console
from rich.markup import escape

from .constants import EXPORT_ROOT_NAME, HASH_SUFFIX_LENGTH
from .exceptions import MalformedNameError, NameCollisionError, RewriteIOError
from .link_processor import rewrite_references
from .models import NormalizationReport

console = Console()

EXTENSION_PATTERN = re.compile(r"\.[A-Za-z]+$")


def strip_hash_suffix(name: str) -> str:
    """
    Get the original name of an exported file.

    Args:
        name: File name as found in the export, e.g. "Notes <hash>.md"

    Returns:
        str: Name without the hash, e.g. "Notes.md"

    Raises:
        MalformedNameError: If a long name has no extension to anchor on
    """
    if len(name) <= HASH_SUFFIX_LENGTH:
        return name

    match = EXTENSION_PATTERN.search(name)
    if match is None:
        raise MalformedNameError(f"Cannot find an extension in '{name}' to strip its hash suffix.")
    if match.start() < HASH_SUFFIX_LENGTH:
        raise MalformedNameError(f"'{name}' is too short in front of its extension to carry a hash suffix.")

    return name[:match.start() - HASH_SUFFIX_LENGTH] + match.group(0)


def strip_directory_suffix(name: str) -> str:
    """Get the original name of an exported directory (fixed-width trim, no extension)."""
    if len(name) <= HASH_SUFFIX_LENGTH:
        return name
    return name[:-HASH_SUFFIX_LENGTH]


def _sorted_children(directory: Path) -> List[Path]:
    return sorted(directory.iterdir(), key=lambda p: p.name)


def _is_directory(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def iter_post_order(root: Path) -> Iterator[Path]:
    """
    Yield every node below root, each directory after all of its descendants.

    Children are listed when their directory is expanded, so the caller may
    rename a node as soon as it is yielded.
    """
    stack = [(child, False) for child in reversed(_sorted_children(root))]
    while stack:
        path, expanded = stack.pop()
        if _is_directory(path) and not expanded:
            stack.append((path, True))
            stack.extend((child, False) for child in reversed(_sorted_children(path)))
        else:
            yield path


def _rename(path: Path, new_name: str) -> Path:
    if new_name == path.name:
        return path

    target = path.with_name(new_name)
    if target.exists() or target.is_symlink():
        raise NameCollisionError(f"Cannot rename '{path}' to '{new_name}': a sibling with that name exists.")

    path.rename(target)
    console.print(f"  → Renamed [dim]{escape(path.name)}[/dim] to [bold]{escape(new_name)}[/bold]")
    return target


def rename_export_root(workspace_dir: Union[str, Path]) -> Path:
    """
    Give the extracted export a deterministic root directory name.

    The archive nests everything under one hash-named directory, which is
    renamed to EXPORT_ROOT_NAME. An archive without that wrapper has its
    top-level entries moved into a new EXPORT_ROOT_NAME directory.

    Returns:
        Path: The export root
    """
    workspace_dir = Path(workspace_dir)
    export_root = workspace_dir / EXPORT_ROOT_NAME
    entries = _sorted_children(workspace_dir)

    if not entries:
        raise MalformedNameError(f"Nothing was extracted into '{workspace_dir}'.")

    if len(entries) == 1 and _is_directory(entries[0]):
        if entries[0].name != EXPORT_ROOT_NAME:
            entries[0].rename(export_root)
        return export_root

    if export_root.exists():
        raise NameCollisionError(
            f"'{export_root}' already exists next to other extracted entries."
        )

    export_root.mkdir()
    for entry in entries:
        entry.rename(export_root / entry.name)
    return export_root


def normalize_tree(
    root: Union[str, Path],
    rewrite: Callable[[Path], bool] = rewrite_references,
    on_visit: Optional[Callable[[Path, bool], None]] = None,
) -> NormalizationReport:
    """
    Strip hash suffixes from every file and directory below root.

    Files have their links rewritten at their current path first and are
    renamed afterwards. A directory is renamed only once all of its
    descendants have been renamed. Rewrite failures are reported and skipped.

    Args:
        root: Export root, itself left untouched
        rewrite: Link rewriter applied to every file before renaming
        on_visit: Observer called with (original path, is_directory) per node

    Returns:
        NormalizationReport: What was renamed and rewritten

    Raises:
        MalformedNameError: If a file name cannot be stripped
        NameCollisionError: If a stripped name already exists
    """
    root = Path(root)
    report = NormalizationReport()

    for path in iter_post_order(root):
        is_directory = _is_directory(path)
        if on_visit is not None:
            on_visit(path, is_directory)
        report.visited.append(path)

        if is_directory:
            if _rename(path, strip_directory_suffix(path.name)) != path:
                report.directories_renamed += 1
            continue

        try:
            if rewrite(path):
                report.files_rewritten += 1
        except RewriteIOError as e:
            console.print(f"[yellow]Skipping link rewrite:[/yellow] {escape(str(e))}")
            report.rewrite_failures.append(path)

        if _rename(path, strip_hash_suffix(path.name)) != path:
            report.files_renamed += 1

    return report


def normalize_export(workspace_dir: Union[str, Path]) -> NormalizationReport:
    """Rename the export root and normalize everything below it."""
    export_root = rename_export_root(workspace_dir)
    return normalize_tree(export_root)
