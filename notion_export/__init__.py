"""
Package for exporting a Notion space into a clean Markdown tree.
"""

from .config import ExportSettings, load_config, prepare_workspace
from .export_client import NotionExportClient
from .downloader import download_archive
from .archive import extract_archive, remove_archive
from .normalizer import strip_hash_suffix, strip_directory_suffix, rename_export_root, normalize_tree, normalize_export
from .link_processor import is_markdown_file, rewrite_references
from .main import run_export

__all__ = [
    'ExportSettings',
    'load_config',
    'prepare_workspace',
    'NotionExportClient',
    'download_archive',
    'extract_archive',
    'remove_archive',
    'strip_hash_suffix',
    'strip_directory_suffix',
    'rename_export_root',
    'normalize_tree',
    'normalize_export',
    'is_markdown_file',
    'rewrite_references',
    'run_export'
]
