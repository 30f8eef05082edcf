"""Note index, body cache, and directory view."""

from __future__ import annotations

from .cache import DEFAULT_CACHE_CAPACITY, ContentCache
from .directory_view import (
    DEFAULT_SORT_POLICY,
    SORT_NAME,
    SORT_POLICIES,
    SORT_RECENT,
    SORT_SIZE,
    list_directory,
    next_sort_policy,
    normalize_sort_policy,
    sort_documents,
)
from .index import (
    NOTE_EXTENSION,
    DocumentIndex,
    document_title,
    read_document_body,
    scan,
    scan_tree,
)
from .types import DirectoryEntry, Document, Folder

__all__ = [
    "ContentCache",
    "DEFAULT_CACHE_CAPACITY",
    "DEFAULT_SORT_POLICY",
    "DirectoryEntry",
    "Document",
    "DocumentIndex",
    "Folder",
    "NOTE_EXTENSION",
    "SORT_NAME",
    "SORT_POLICIES",
    "SORT_RECENT",
    "SORT_SIZE",
    "document_title",
    "list_directory",
    "next_sort_policy",
    "normalize_sort_policy",
    "read_document_body",
    "scan",
    "scan_tree",
    "sort_documents",
]
