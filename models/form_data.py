"""
Order form data model.

The form uses the German field names of the prepress workflow, and the
product code generator and validator key their rules on the same names.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Any, Mapping, Optional

from core.constants import FORM_FIELDS, PAPER_TYPE_CUSTOM


@dataclass
class FormData:
    """
    One filled-in rename form.

    Values are kept as the user typed them (strings, or numbers when built
    from code); normalization happens in the validator and the generator.
    """

    auftragsnummer: Any = None
    """Order number, e.g. 'A12345'."""

    kunde: Any = None
    """Customer name."""

    auftragsposition: Any = None
    """Position within the order (0-999)."""

    maschine: Any = None
    """Machine code from the config."""

    auflage: Any = None
    """Print run, may be Swiss formatted ("1'200")."""

    produkt: Any = None
    """Product code from the config."""

    papierart: Any = None
    """Paper class: 'gestrichen', 'ungestrichen' or a custom value."""

    papiername: Any = None
    """Paper code from the config."""

    papierart_custom: bool = False
    """True when papierart holds a custom paper class typed by the user."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormData":
        """Create from a dictionary with the German form keys."""
        values = {name: data.get(name) for name in FORM_FIELDS}
        return cls(papierart_custom=bool(data.get("papierart_custom", False)), **values)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FormData":
        """
        Create from submitted form fields.

        The paper class radio group has a third option 'custom'; in that case
        the free text field 'papierart_custom_value' replaces it. A 'custom'
        choice with an empty text field stays 'custom'.
        """
        values = {name: form.get(name) for name in FORM_FIELDS}
        is_custom = False

        custom_value = (form.get("papierart_custom_value") or "").strip()
        if values["papierart"] == PAPER_TYPE_CUSTOM and custom_value:
            values["papierart"] = custom_value
            is_custom = True

        return cls(papierart_custom=is_custom, **values)

    def get(self, name: str, default: Optional[Any] = None) -> Any:
        """Dictionary-style access by form field name."""
        return getattr(self, name, default)

    def missing_fields(self) -> list:
        """Names of required fields that are empty."""
        missing = []
        for name in FORM_FIELDS:
            value = getattr(self, name)
            if value is None or str(value).strip() == "":
                missing.append(name)
        return missing

    @property
    def is_complete(self) -> bool:
        """True when every form field has a value."""
        return not self.missing_fields()
