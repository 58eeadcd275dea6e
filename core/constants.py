"""
Application constants.

Central place for limits, patterns and codes shared by the generator,
the validator, the config store and the hotfolder service.
"""

import re

APP_NAME = "Heidelberg PDF Renamer"
APP_VERSION = "1.0.0"

# =============================================================================
# FILES
# =============================================================================

MAX_FILE_SIZE = 100 * 1024 * 1024  # 100 MiB
ALLOWED_MIME_TYPES = ("application/pdf",)
ALLOWED_EXTENSIONS = (".pdf",)
MAX_FILENAME_LENGTH = 255
INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
RESERVED_FILENAMES = re.compile(r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])(\.|$)", re.IGNORECASE)

# =============================================================================
# PRODUCT CODE
# =============================================================================

CODE_SEPARATOR = "#"
CODE_PARTS = 5
PAPER_PREFIX = "D-"
ORDER_PREFIX = "A"
MAX_CUSTOMER_CODE_LENGTH = 20

# Value -> tag for the two known paper classes
PAPER_TYPE_TAGS = {
    "gestrichen": "g_s",
    "ungestrichen": "u_s",
}
PAPER_TYPE_SUFFIX = "_s"
PAPER_TYPE_CUSTOM = "custom"

# Swiss number formatting (1'200)
THOUSANDS_SEPARATOR = "'"
THOUSANDS_SEPARATORS = ("'", "’")

FORM_FIELDS = (
    "auftragsnummer",
    "kunde",
    "auftragsposition",
    "maschine",
    "auflage",
    "produkt",
    "papierart",
    "papiername",
)

# =============================================================================
# VALIDATION ERROR CODES
# =============================================================================

class ErrorCode:
    """Machine-readable validation error codes."""

    REQUIRED = "REQUIRED"
    PATTERN = "PATTERN"
    MIN_LENGTH = "MIN_LENGTH"
    MAX_LENGTH = "MAX_LENGTH"
    MIN_VALUE = "MIN_VALUE"
    MAX_VALUE = "MAX_VALUE"
    NOT_NUMERIC = "NOT_NUMERIC"
    TOO_SMALL = "TOO_SMALL"
    TOO_LARGE = "TOO_LARGE"
    INVALID_ENUM = "INVALID_ENUM"
    INVALID_PREFIX = "INVALID_PREFIX"
    INVALID_FORMAT = "INVALID_FORMAT"
    TOO_SHORT = "TOO_SHORT"
    DUPLICATE = "DUPLICATE"
    NO_FILE = "NO_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    INVALID_FILE_EXTENSION = "INVALID_FILE_EXTENSION"
    INVALID_CHARACTERS = "INVALID_CHARACTERS"
    RESERVED_NAME = "RESERVED_NAME"
    TOO_LONG = "TOO_LONG"


# =============================================================================
# CONFIG STORE
# =============================================================================

CONFIG_VERSION = "1.0.0"
MIGRATION_NEEDED_VERSIONS = ("0.9.0", "0.9.1")

CATEGORIES = ("machines", "products", "papers")

MAX_ENTRIES = {
    "machines": 50,
    "products": 100,
    "papers": 100,
}

ID_PREFIX = {
    "machines": "machine_",
    "products": "product_",
    "papers": "paper_",
}

# Category -> (name field rule, code field rule) in the validator table
ENTRY_RULES = {
    "machines": ("machineName", "machineCode"),
    "products": ("productName", "productCode"),
    "papers": ("paperName", "paperCode"),
}

# =============================================================================
# HOTFOLDER
# =============================================================================

MAX_FILES_DISPLAY = 10
