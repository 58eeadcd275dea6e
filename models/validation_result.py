"""
Validation result models.

Validation failures are values, not exceptions: every check returns a result
carrying either a normalized value or a machine-readable code plus message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional


@dataclass
class UploadedFile:
    """Metadata of an uploaded file, as checked by the file validator."""

    name: str
    size: int
    content_type: str = ""
    last_modified: Optional[datetime] = None


@dataclass
class FieldValidationResult:
    """Outcome of validating one field."""

    valid: bool
    value: Any = None
    normalized_value: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    numeric_value: Optional[int] = None
    """Parsed print run (auflage only)."""
    formatted_value: Optional[str] = None
    """Swiss formatted print run (auflage only)."""

    @classmethod
    def success(cls, value: Any, normalized_value: Any = None, **extra) -> "FieldValidationResult":
        return cls(valid=True, value=value, normalized_value=normalized_value, **extra)

    @classmethod
    def failure(cls, code: str, error: str) -> "FieldValidationResult":
        return cls(valid=False, error=error, code=code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        if not self.valid:
            return {"valid": False, "error": self.error, "code": self.code}

        data = {"valid": True, "value": self.value, "normalizedValue": self.normalized_value}
        if self.numeric_value is not None:
            data["numericValue"] = self.numeric_value
            data["formattedValue"] = self.formatted_value
        return data


@dataclass
class ValidationIssue:
    """One error in a form validation."""

    field: str
    error: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "error": self.error, "code": self.code}


@dataclass
class FormValidationResult:
    """Outcome of validating all form fields; every error is collected."""

    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    results: Dict[str, FieldValidationResult] = field(default_factory=dict)

    @property
    def summary(self) -> Dict[str, Any]:
        total = len(self.results)
        valid_fields = sum(1 for r in self.results.values() if r.valid)
        return {
            "totalFields": total,
            "validFields": valid_fields,
            "invalidFields": total - valid_fields,
            "errorCount": len(self.errors),
            "isComplete": valid_fields == total and not self.errors,
        }

    def errors_for(self, field_name: str) -> List[ValidationIssue]:
        return [e for e in self.errors if e.field == field_name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "results": {name: r.to_dict() for name, r in self.results.items()},
            "summary": self.summary,
        }


@dataclass
class FileValidationResult:
    """Outcome of validating an uploaded file."""

    valid: bool
    error: Optional[str] = None
    code: Optional[str] = None
    file_info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        if not self.valid:
            return {"valid": False, "error": self.error, "code": self.code}
        return {"valid": True, "fileInfo": dict(self.file_info)}
