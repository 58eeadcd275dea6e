"""
Core module for the PDF renamer.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- constants: Limits, patterns and error codes
"""

from .exceptions import (
    PDFRenamerError,
    ValidationError,
    ProductCodeFormatError,
    ConfigStoreError,
    DuplicateEntryError,
    EntryNotFoundError,
    ConfigLimitError,
    ConfigImportError,
    HotfolderError,
    HotfolderNotConfiguredError,
    HotfolderPermissionError,
)
from .constants import ErrorCode

__all__ = [
    "PDFRenamerError",
    "ValidationError",
    "ProductCodeFormatError",
    "ConfigStoreError",
    "DuplicateEntryError",
    "EntryNotFoundError",
    "ConfigLimitError",
    "ConfigImportError",
    "HotfolderError",
    "HotfolderNotConfiguredError",
    "HotfolderPermissionError",
    "ErrorCode",
]
