"""
Custom exceptions for the PDF renamer.

Exception Hierarchy:
    PDFRenamerError (base)
    ├── ValidationError            - A field or file failed validation
    ├── ProductCodeFormatError     - A product code string cannot be parsed
    ├── ConfigStoreError           - Config persistence failures
    │   ├── DuplicateEntryError    - Code already used in the category
    │   ├── EntryNotFoundError     - No entry with the given id
    │   ├── ConfigLimitError       - Category is full
    │   └── ConfigImportError      - Imported JSON is unusable
    └── HotfolderError             - Hotfolder I/O failures
        ├── HotfolderNotConfiguredError - No hotfolder selected
        └── HotfolderPermissionError    - Folder not readable/writable

Usage:
    Services raise these; routes catch PDFRenamerError and flash the message.
    Anything else is an unexpected error and is logged with a traceback.
"""

from typing import Optional, Dict, Any


class PDFRenamerError(Exception):
    """
    Base exception for all PDF renamer errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(PDFRenamerError):
    """
    A user-supplied value was rejected by the validator.

    Carries the machine-readable code (e.g. PATTERN, DUPLICATE) so callers can
    react without parsing the message.
    """

    def __init__(self, field: str, code: str, message: str):
        super().__init__(message, {"field": field, "code": code})
        self.field = field
        self.code = code


class ProductCodeFormatError(PDFRenamerError):
    """Product code does not have the five '#'-separated parts."""

    def __init__(self, code: str, message: str = "Ungültiges Produktcode-Format"):
        super().__init__(message, {"code": code})
        self.code = code


# =============================================================================
# CONFIG STORE ERRORS
# =============================================================================

class ConfigStoreError(PDFRenamerError):
    """Base class for configuration store failures."""


class DuplicateEntryError(ConfigStoreError):
    """
    An entry with the same code already exists in the category.

    Codes are the lookup key of the product code generator, so they must be
    unique within machines, products and papers respectively.
    """

    def __init__(self, category: str, code: str):
        message = f'Code "{code}" existiert bereits'
        super().__init__(message, {"category": category, "code": code})
        self.category = category
        self.code = code
        self.error_code = "DUPLICATE"


class EntryNotFoundError(ConfigStoreError):
    """No entry with the given id exists in the category."""

    def __init__(self, category: str, item_id: str):
        message = f'Eintrag "{item_id}" nicht gefunden'
        super().__init__(message, {"category": category, "item_id": item_id})
        self.category = category
        self.item_id = item_id


class ConfigLimitError(ConfigStoreError):
    """The category already holds its maximum number of entries."""

    def __init__(self, category: str, limit: int):
        message = f"Maximale Anzahl Einträge erreicht ({limit})"
        super().__init__(message, {"category": category, "limit": limit})
        self.category = category
        self.limit = limit


class ConfigImportError(ConfigStoreError):
    """
    Imported configuration could not be used.

    The store is left untouched when this is raised.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Import fehlgeschlagen: {message}", details)


# =============================================================================
# HOTFOLDER ERRORS
# =============================================================================

class HotfolderError(PDFRenamerError):
    """
    Reading from or writing to the hotfolder failed.

    Typical causes:
    - Folder was removed or unmounted
    - Disk full
    - File locked by the prepress system while being picked up
    """


class HotfolderNotConfiguredError(HotfolderError):
    """No hotfolder has been selected yet."""

    def __init__(self, message: str = "Kein Hotfolder ausgewählt"):
        super().__init__(message, {"resolution": "Hotfolder in den Einstellungen wählen"})


class HotfolderPermissionError(HotfolderError):
    """The process may not read or write the hotfolder."""

    def __init__(self, path: str, message: str = "Keine Berechtigung für Hotfolder-Zugriff"):
        super().__init__(message, {"path": path})
        self.path = path
