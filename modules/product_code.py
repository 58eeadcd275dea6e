"""
Product code generator for the Prinect hotfolder naming convention.

Format:
    <Auftrag>-<Position>#<Kunde>-<Produkt>#<Maschine>_<Papierart>_<Papiername>#<Auflage>#D-<Papiername>#

Example:
    A12345-1#TestKunde-BRFPP#CX75_u_s_NoSat170#1200#D-NoSat170#

The prepress system parses this prefix from the filename, so the format must
stay byte-for-byte stable. Generation is a pure function of the form data and
the config: no state, no side effects besides logging.
"""

from __future__ import annotations

import re
from typing import Dict, Any, Mapping, Optional, Union

from core.constants import (
    CODE_PARTS,
    CODE_SEPARATOR,
    MAX_CUSTOMER_CODE_LENGTH,
    ORDER_PREFIX,
    PAPER_PREFIX,
    PAPER_TYPE_SUFFIX,
    PAPER_TYPE_TAGS,
)
from core.exceptions import ProductCodeFormatError
from models.config_entry import RenamerConfig
from models.form_data import FormData
from modules.formatting import format_swiss_number, parse_swiss_number
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

_CUSTOMER_DISALLOWED = re.compile(r"[^a-zA-Z0-9äöüÄÖÜß\-_]")

FormInput = Union[FormData, Mapping[str, Any]]
ConfigInput = Union[RenamerConfig, Mapping[str, Any], None]


class InvalidQuantityError(ValueError):
    """Print run has no leading integer."""


class ProductCodeGenerator:
    """Builds, parses and checks product codes."""

    def generate(self, form_data: FormInput, config: ConfigInput) -> str:
        """
        Generate the product code.

        Args:
            form_data: FormData or mapping with the German form keys
            config: RenamerConfig or its dict form; lookups fall back to the
                raw input when no entry matches

        Returns:
            The product code, or "" if a field is missing or the print run
            cannot be parsed
        """
        form = self._as_form(form_data)
        if not form.is_complete:
            return ""

        try:
            parts = self.build_code_parts(form, config)
        except InvalidQuantityError as e:
            logger.warning(f"Product code not generated: {e}")
            return ""

        return self.assemble_code(parts)

    def build_code_parts(self, form_data: FormInput, config: ConfigInput) -> Dict[str, str]:
        """
        Build the five code parts.

        Raises:
            InvalidQuantityError: If the print run is not a number
        """
        form = self._as_form(form_data)
        cfg = self._as_config(config)

        paper_code = self._lookup(cfg, "papers", form.papiername)
        return {
            "auftrag": self.build_order_part(form),
            "kunde": f"{self.sanitize_text(form.kunde)}-{self._lookup(cfg, 'products', form.produkt)}",
            "maschine": "_".join([
                self._lookup(cfg, "machines", form.maschine),
                self.get_paper_type_code(form.papierart),
                paper_code,
            ]),
            "auflage": self.build_quantity_part(form.auflage),
            "papier": f"{PAPER_PREFIX}{paper_code}",
        }

    @staticmethod
    def assemble_code(parts: Mapping[str, str]) -> str:
        ordered = [parts["auftrag"], parts["kunde"], parts["maschine"], parts["auflage"], parts["papier"]]
        return CODE_SEPARATOR.join(ordered) + CODE_SEPARATOR

    @staticmethod
    def build_order_part(form: FormData) -> str:
        """'A12345-1'; a missing 'A' prefix is added."""
        order_number = str(form.auftragsnummer).strip()
        if not order_number.startswith(ORDER_PREFIX):
            order_number = f"{ORDER_PREFIX}{order_number}"
        return f"{order_number}-{str(form.auftragsposition).strip()}"

    @staticmethod
    def build_quantity_part(quantity: Any) -> str:
        """Drop Swiss grouping: "1'200" -> "1200"."""
        number = parse_swiss_number(quantity)
        if number is None:
            raise InvalidQuantityError(f"Ungültige Auflage: {quantity!r}")
        return str(number)

    @staticmethod
    def get_paper_type_code(paper_type: Any) -> str:
        """'gestrichen' -> 'g_s', 'ungestrichen' -> 'u_s', custom -> first letter + '_s'."""
        paper_type = str(paper_type)
        tag = PAPER_TYPE_TAGS.get(paper_type)
        if tag:
            return tag
        return f"{paper_type[:1].lower()}{PAPER_TYPE_SUFFIX}"

    @staticmethod
    def sanitize_text(text: Any) -> str:
        """Keep letters, digits, umlauts, '-' and '_'; at most 20 characters."""
        return _CUSTOMER_DISALLOWED.sub("", str(text).strip())[:MAX_CUSTOMER_CODE_LENGTH]

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def parse_code(self, product_code: str) -> Dict[str, str]:
        """
        Split a product code into its fields.

        Separators inside codes make some splits ambiguous; the last '-' of
        the customer part and the first two '_' of the machine part win.

        Raises:
            ProductCodeFormatError: If the code has fewer than five parts
        """
        parts = product_code.split(CODE_SEPARATOR)
        if len(parts) < CODE_PARTS:
            raise ProductCodeFormatError(product_code)

        order_part, customer_part, machine_part, quantity_part, paper_part = parts[:CODE_PARTS]

        order, _, position = order_part.partition("-")
        customer, _, product = customer_part.rpartition("-")
        machine_fields = machine_part.split("_", 3)
        machine_fields += [""] * (4 - len(machine_fields))
        paper_prefix, _, paper_suffix = paper_part.partition("-")

        return {
            "auftrag": order,
            "position": position,
            "kunde": customer,
            "produkt": product,
            "maschine": machine_fields[0],
            "papierart": f"{machine_fields[1]}_{machine_fields[2]}",
            "papiername": machine_fields[3],
            "auflage": quantity_part,
            "papier_prefix": paper_prefix,
            "papier_suffix": paper_suffix,
        }

    def validate_code(self, product_code: str) -> Dict[str, Any]:
        try:
            return {"valid": True, "parsed": self.parse_code(product_code)}
        except ProductCodeFormatError as e:
            return {"valid": False, "error": e.message}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def format_swiss_number(number: int) -> str:
        return format_swiss_number(number)

    def generate_example(self) -> str:
        """The documented example: A12345-1#TestKunde-BRFPP#CX75_u_s_NoSat170#1200#D-NoSat170#"""
        example_data = {
            "auftragsnummer": "A12345",
            "kunde": "TestKunde",
            "auftragsposition": "1",
            "maschine": "CX75",
            "auflage": "1200",
            "produkt": "BRFPP",
            "papierart": "ungestrichen",
            "papiername": "NoSat170",
        }
        example_config = {
            "machines": [{"name": "CX75", "code": "CX75"}],
            "products": [{"name": "Broschüre", "code": "BRFPP"}],
            "papers": [{"name": "NoSat170", "code": "NoSat170", "type": "ungestrichen"}],
        }
        return self.generate(example_data, example_config)

    def debug_info(self, form_data: FormInput, config: ConfigInput) -> Dict[str, Any]:
        """Input, parts and final code in one dict; also logged at DEBUG."""
        form = self._as_form(form_data)
        info: Dict[str, Any] = {"input": form.to_dict(), "missing": form.missing_fields()}

        if form.is_complete:
            try:
                parts = self.build_code_parts(form, config)
                info["parts"] = parts
                info["code"] = self.assemble_code(parts)
            except InvalidQuantityError as e:
                info["error"] = str(e)

        logger.debug(f"Product code debug: {info}")
        return info

    @staticmethod
    def _as_form(form_data: FormInput) -> FormData:
        if isinstance(form_data, FormData):
            return form_data
        return FormData.from_dict(form_data or {})

    @staticmethod
    def _as_config(config: ConfigInput) -> Optional[RenamerConfig]:
        if config is None or isinstance(config, RenamerConfig):
            return config
        return RenamerConfig.from_dict(config)

    @staticmethod
    def _lookup(config: Optional[RenamerConfig], category: str, value: Any) -> str:
        if config is not None:
            entry = config.find_by_code(category, value)
            if entry is not None:
                return entry.code
        return str(value)
