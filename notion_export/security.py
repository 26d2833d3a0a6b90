"""
Utility functions for validation and security.
"""

import re
from pathlib import Path
from typing import Union


def is_valid_notion_id(notion_id: str) -> bool:
    """
    Check whether a string is a valid Notion ID.

    Args:
        notion_id: ID to validate

    Returns:
        True if the ID is valid
    """
    if not notion_id or not isinstance(notion_id, str):
        return False

    # Dashed format: 8-4-4-4-12 characters
    uuid_pattern = r'^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$'
    # Compact format: 32 characters
    compact_pattern = r'^[a-f0-9]{32}$'

    return bool(re.match(uuid_pattern, notion_id) or re.match(compact_pattern, notion_id))


def safe_path_join(base_path: Union[str, Path], member: str) -> Path:
    """
    Join an archive member name onto a base directory, preventing path traversal.

    Args:
        base_path: Directory the member must stay inside
        member: Relative member path as stored in the archive

    Returns:
        Resolved path below base_path

    Raises:
        ValueError: If the resulting path escapes the base directory
    """
    base = Path(base_path).resolve()
    result = (base / member).resolve()

    try:
        result.relative_to(base)
    except ValueError:
        raise ValueError(f"Unsafe path detected: {member}")

    return result
