"""
Data models for the PDF renamer.

This module contains dataclasses for:
- FormData: One filled-in rename form
- ConfigEntry / RenamerConfig: Machines, products and papers
- Validation results for fields, forms and uploaded files
"""

from .form_data import FormData
from .config_entry import ConfigEntry, RenamerConfig, default_config, generate_entry_id
from .validation_result import (
    UploadedFile,
    FieldValidationResult,
    ValidationIssue,
    FormValidationResult,
    FileValidationResult,
)

__all__ = [
    # Form
    "FormData",
    # Config
    "ConfigEntry",
    "RenamerConfig",
    "default_config",
    "generate_entry_id",
    # Validation
    "UploadedFile",
    "FieldValidationResult",
    "ValidationIssue",
    "FormValidationResult",
    "FileValidationResult",
]
