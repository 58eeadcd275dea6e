"""
Field, form and file validation.

A static rule table maps each field name to its rules. Validation never
raises for bad input: every check returns a result object with either the
normalized value or a machine-readable code and a localized message.

Check order per field:
    REQUIRED -> PATTERN -> MIN/MAX_LENGTH -> numeric bounds
    -> print-run check (auflage) -> enum -> order-number check (auftragsnummer)
"""

from __future__ import annotations

import re
from typing import Dict, Any, Mapping, Optional, Union

from core.constants import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    ErrorCode,
    FORM_FIELDS,
    INVALID_FILENAME_CHARS,
    MAX_FILE_SIZE,
    MAX_FILENAME_LENGTH,
    PAPER_TYPE_TAGS,
    RESERVED_FILENAMES,
)
from models.form_data import FormData
from models.validation_result import (
    FieldValidationResult,
    FileValidationResult,
    FormValidationResult,
    UploadedFile,
    ValidationIssue,
)
from modules.formatting import format_file_size, format_swiss_number, strip_thousands_separators
from modules.i18n import DEFAULT_LANGUAGE, field_display_name, translate
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9äöüÄÖÜß\s\-_.]+$")
_UPPER_CODE_PATTERN = re.compile(r"^[A-Z0-9_-]+$")
_MIXED_CODE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_ORDER_NUMBER_PATTERN = re.compile(r"^A[0-9]+$")

MAX_AUFLAGE = 1_000_000

VALIDATION_RULES: Dict[str, Dict[str, Any]] = {
    # Rename form
    "auftragsnummer": {
        "required": True,
        "pattern": _ORDER_NUMBER_PATTERN,
        "min_length": 2,
        "max_length": 20,
    },
    "kunde": {
        "required": True,
        "pattern": re.compile(r"^[a-zA-Z0-9äöüÄÖÜß\s\-_&.]+$"),
        "min_length": 1,
        "max_length": 50,
    },
    "auftragsposition": {
        "required": True,
        "pattern": re.compile(r"^[0-9]+$"),
        "min": 0,
        "max": 999,
    },
    "auflage": {
        "required": True,
        "pattern": re.compile(r"^[0-9'’\s]+$"),
        "min": 1,
        "max": MAX_AUFLAGE,
    },
    "maschine": {
        "required": True,
        "pattern": _UPPER_CODE_PATTERN,
        "min_length": 1,
        "max_length": 20,
    },
    "produkt": {
        "required": True,
        "pattern": _UPPER_CODE_PATTERN,
        "min_length": 1,
        "max_length": 20,
    },
    "papierart": {
        "required": True,
        "enum": tuple(PAPER_TYPE_TAGS),
    },
    "papierart_custom": {
        "required": True,
        "pattern": re.compile(r"^[A-Za-zäöüÄÖÜß]+$"),
        "min_length": 1,
        "max_length": 20,
    },
    "papiername": {
        "required": True,
        "pattern": _MIXED_CODE_PATTERN,
        "min_length": 1,
        "max_length": 30,
    },
    # Settings
    "machineName": {"required": True, "pattern": _NAME_PATTERN, "min_length": 1, "max_length": 30},
    "machineCode": {"required": True, "pattern": _UPPER_CODE_PATTERN, "min_length": 1, "max_length": 10},
    "productName": {"required": True, "pattern": _NAME_PATTERN, "min_length": 1, "max_length": 30},
    "productCode": {"required": True, "pattern": _UPPER_CODE_PATTERN, "min_length": 1, "max_length": 10},
    "paperName": {"required": True, "pattern": _NAME_PATTERN, "min_length": 1, "max_length": 30},
    "paperCode": {"required": True, "pattern": _MIXED_CODE_PATTERN, "min_length": 1, "max_length": 15},
}


def is_empty(value: Any) -> bool:
    """None or a blank string; numbers are never empty."""
    return value is None or (isinstance(value, str) and value.strip() == "")


class Validator:
    """
    Applies VALIDATION_RULES to form fields, forms and uploaded files.

    Messages are produced in the validator's language; codes do not depend
    on it.
    """

    def __init__(self, lang: str = DEFAULT_LANGUAGE, rules: Optional[Dict[str, Dict[str, Any]]] = None):
        self.lang = lang
        self.rules = rules if rules is not None else VALIDATION_RULES

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def validate_field(
        self,
        field_name: str,
        value: Any,
        custom_rules: Optional[Dict[str, Any]] = None,
    ) -> FieldValidationResult:
        """
        Validate one value against the rules of field_name.

        Args:
            field_name: Rule table key (unknown names are always valid)
            value: Raw input value
            custom_rules: Extra rules merged over the table entry

        Returns:
            FieldValidationResult; on success normalized_value is set
        """
        rules = {**self.rules.get(field_name, {}), **(custom_rules or {})}
        label = field_display_name(field_name, self.lang)

        if rules.get("required") and is_empty(value):
            return FieldValidationResult.failure(
                ErrorCode.REQUIRED, self._t("validation.required", field=label)
            )

        if is_empty(value):
            return FieldValidationResult.success(value, value)

        string_value = str(value).strip()

        pattern = rules.get("pattern")
        if pattern is not None and not pattern.search(string_value):
            return FieldValidationResult.failure(ErrorCode.PATTERN, self._rule_message(field_name, label))

        min_length = rules.get("min_length")
        if min_length and len(string_value) < min_length:
            return FieldValidationResult.failure(
                ErrorCode.MIN_LENGTH, self._t("validation.min_length", field=label, min=min_length)
            )

        max_length = rules.get("max_length")
        if max_length and len(string_value) > max_length:
            return FieldValidationResult.failure(
                ErrorCode.MAX_LENGTH, self._t("validation.max_length", field=label, max=max_length)
            )

        has_bounds = "min" in rules or "max" in rules
        if has_bounds and field_name != "auflage":
            bounds_result = self._check_bounds(string_value, rules, label)
            if bounds_result is not None:
                return bounds_result

        extra: Dict[str, Any] = {}
        if field_name == "auflage":
            auflage_result = self.validate_auflage(string_value)
            if not auflage_result.valid:
                return auflage_result
            extra = {
                "numeric_value": auflage_result.numeric_value,
                "formatted_value": auflage_result.formatted_value,
            }

        allowed = rules.get("enum")
        if allowed and string_value not in allowed:
            return FieldValidationResult.failure(
                ErrorCode.INVALID_ENUM,
                self._t("validation.invalid_enum", field=label, values=", ".join(allowed)),
            )

        if field_name == "auftragsnummer":
            order_result = self.validate_auftragsnummer(string_value)
            if not order_result.valid:
                return order_result

        return FieldValidationResult.success(
            string_value, self.normalize_value(field_name, string_value), **extra
        )

    def _check_bounds(self, string_value: str, rules: Dict[str, Any], label: str) -> Optional[FieldValidationResult]:
        try:
            number = float(string_value)
        except ValueError:
            return FieldValidationResult.failure(
                ErrorCode.NOT_NUMERIC, self._t("validation.not_numeric", field=label)
            )

        if "min" in rules and number < rules["min"]:
            return FieldValidationResult.failure(
                ErrorCode.MIN_VALUE, self._t("validation.min_value", field=label, min=rules["min"])
            )
        if "max" in rules and number > rules["max"]:
            return FieldValidationResult.failure(
                ErrorCode.MAX_VALUE, self._t("validation.max_value", field=label, max=rules["max"])
            )
        return None

    def validate_auflage(self, value: str) -> FieldValidationResult:
        """Check a Swiss formatted print run ("1'200" or "1200"), 1..1'000'000."""
        clean_value = strip_thousands_separators(value)

        if not clean_value.isdigit() or not clean_value.isascii():
            return FieldValidationResult.failure(
                ErrorCode.NOT_NUMERIC, self._t("validation.auflage.not_numeric")
            )

        try:
            number = int(clean_value)
        except ValueError:
            # Beyond the int conversion digit limit
            return FieldValidationResult.failure(ErrorCode.TOO_LARGE, self._t("validation.auflage.too_large"))
        if number < 1:
            return FieldValidationResult.failure(ErrorCode.TOO_SMALL, self._t("validation.auflage.too_small"))
        if number > MAX_AUFLAGE:
            return FieldValidationResult.failure(ErrorCode.TOO_LARGE, self._t("validation.auflage.too_large"))

        return FieldValidationResult.success(
            value, value, numeric_value=number, formatted_value=format_swiss_number(number)
        )

    def validate_auftragsnummer(self, value: str) -> FieldValidationResult:
        """Order numbers are 'A' followed by at least one digit."""
        if not value.startswith("A"):
            return FieldValidationResult.failure(
                ErrorCode.INVALID_PREFIX, self._t("validation.auftragsnummer.invalid_prefix")
            )
        if len(value) < 2:
            return FieldValidationResult.failure(
                ErrorCode.TOO_SHORT, self._t("validation.auftragsnummer.too_short")
            )
        if not _ORDER_NUMBER_PATTERN.match(value):
            return FieldValidationResult.failure(
                ErrorCode.INVALID_FORMAT, self._t("validation.auftragsnummer.invalid_format")
            )
        return FieldValidationResult.success(value, value)

    @staticmethod
    def normalize_value(field_name: str, value: str) -> str:
        if field_name in ("auftragsnummer", "machineCode", "productCode"):
            return value.upper()
        if field_name == "auflage":
            return value
        return value.strip()

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------

    def validate_form(self, form_data: Union[FormData, Mapping[str, Any]]) -> FormValidationResult:
        """
        Validate every form field and collect all errors.

        A custom paper class (form_data.papierart_custom) is checked with the
        'papierart_custom' rule instead of the enum of known classes.
        """
        if not isinstance(form_data, FormData):
            form_data = FormData.from_dict(form_data)

        results: Dict[str, FieldValidationResult] = {}
        errors = []

        for field_name in FORM_FIELDS:
            rule_name = field_name
            if field_name == "papierart" and form_data.papierart_custom:
                rule_name = "papierart_custom"

            result = self.validate_field(rule_name, form_data.get(field_name))
            results[field_name] = result
            if not result.valid:
                errors.append(ValidationIssue(field=field_name, error=result.error, code=result.code))

        if errors:
            logger.debug(f"Form validation failed: {[e.code for e in errors]}")

        return FormValidationResult(valid=not errors, errors=errors, results=results)

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def validate_file(self, uploaded: Optional[UploadedFile]) -> FileValidationResult:
        """
        Check an uploaded file's metadata.

        Order: presence, size ceiling, empty file, MIME type, extension,
        filename legality.
        """
        if uploaded is None:
            return self._file_failure(ErrorCode.NO_FILE, "validation.file.no_file")

        if uploaded.size > MAX_FILE_SIZE:
            return self._file_failure(
                ErrorCode.FILE_TOO_LARGE, "validation.file.too_large", max=format_file_size(MAX_FILE_SIZE)
            )

        if uploaded.size == 0:
            return self._file_failure(ErrorCode.EMPTY_FILE, "validation.file.empty")

        if uploaded.content_type not in ALLOWED_MIME_TYPES:
            return self._file_failure(ErrorCode.INVALID_FILE_TYPE, "validation.file.invalid_type")

        if not uploaded.name.lower().endswith(ALLOWED_EXTENSIONS):
            return self._file_failure(ErrorCode.INVALID_FILE_EXTENSION, "validation.file.invalid_extension")

        name_result = self.validate_filename(uploaded.name)
        if not name_result.valid:
            return name_result

        return FileValidationResult(
            valid=True,
            file_info={
                "name": uploaded.name,
                "size": uploaded.size,
                "type": uploaded.content_type,
            },
        )

    def validate_filename(self, filename: str) -> FileValidationResult:
        """Reject characters and names that no target filesystem accepts."""
        if INVALID_FILENAME_CHARS.search(filename):
            return self._file_failure(ErrorCode.INVALID_CHARACTERS, "validation.file.invalid_characters")

        if RESERVED_FILENAMES.match(filename):
            return self._file_failure(ErrorCode.RESERVED_NAME, "validation.file.reserved_name")

        if len(filename) > MAX_FILENAME_LENGTH:
            return self._file_failure(ErrorCode.TOO_LONG, "validation.file.too_long")

        return FileValidationResult(valid=True, file_info={"name": filename})

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _t(self, key: str, **kwargs) -> str:
        return translate(key, lang=self.lang, **kwargs)

    def _rule_message(self, field_name: str, label: str) -> str:
        key = f"validation.rules.{field_name}"
        message = self._t(key)
        return self._t("validation.pattern", field=label) if message == key else message

    def _file_failure(self, code: str, key: str, **kwargs) -> FileValidationResult:
        return FileValidationResult(valid=False, error=self._t(key, **kwargs), code=code)
