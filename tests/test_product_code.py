"""
Unit tests for the product code generator.

The generated prefix is parsed by the prepress system, so most tests pin
exact strings.
"""

import pytest
from unittest.mock import patch

from core.exceptions import ProductCodeFormatError
from models.config_entry import ConfigEntry, RenamerConfig, default_config
from models.form_data import FormData
from modules.formatting import parse_swiss_number
from modules.product_code import InvalidQuantityError, ProductCodeGenerator


EXAMPLE_CODE = "A12345-1#TestKunde-BRFPP#CX75_u_s_NoSat170#1200#D-NoSat170#"


# Fixtures

@pytest.fixture
def generator():
    return ProductCodeGenerator()


@pytest.fixture
def config():
    return RenamerConfig(
        machines=[ConfigEntry(name="Speedmaster CX 75", code="CX75", id="machine_1")],
        products=[ConfigEntry(name="Broschüre", code="BRFPP", id="product_1")],
        papers=[ConfigEntry(name="Nautilus Satin 170", code="NoSat170", id="paper_1", type="ungestrichen")],
    )


@pytest.fixture
def form_data():
    return {
        "auftragsnummer": "A12345",
        "kunde": "TestKunde",
        "auftragsposition": "1",
        "maschine": "CX75",
        "auflage": "1'200",
        "produkt": "BRFPP",
        "papierart": "ungestrichen",
        "papiername": "NoSat170",
    }


class TestGenerate:
    """Full code generation."""

    def test_documented_example(self, generator, form_data, config):
        assert generator.generate(form_data, config) == EXAMPLE_CODE

    def test_generate_example(self, generator):
        assert generator.generate_example() == EXAMPLE_CODE

    def test_accepts_form_data_and_config_dict(self, generator, form_data, config):
        form = FormData.from_dict(form_data)
        assert generator.generate(form, config.to_dict()) == EXAMPLE_CODE

    def test_is_deterministic(self, generator, form_data, config):
        first = generator.generate(form_data, config)
        second = generator.generate(form_data, config)
        assert first == second

    @pytest.mark.parametrize("missing", [
        "auftragsnummer", "kunde", "auftragsposition", "maschine",
        "auflage", "produkt", "papierart", "papiername",
    ])
    def test_missing_field_yields_empty_code(self, generator, form_data, config, missing):
        form_data[missing] = ""
        assert generator.generate(form_data, config) == ""

    def test_whitespace_only_counts_as_missing(self, generator, form_data, config):
        form_data["kunde"] = "   "
        assert generator.generate(form_data, config) == ""

    def test_position_zero_is_not_missing(self, generator, form_data, config):
        form_data["auftragsposition"] = 0
        assert generator.generate(form_data, config).startswith("A12345-0#")

    def test_order_prefix_added(self, generator, form_data, config):
        form_data["auftragsnummer"] = "12345"
        assert generator.generate(form_data, config) == EXAMPLE_CODE

    def test_unknown_codes_fall_back_to_input(self, generator, form_data):
        form_data.update({"maschine": "XYZ", "produkt": "NEW", "papiername": "Foo99"})
        code = generator.generate(form_data, RenamerConfig())
        assert code == "A12345-1#TestKunde-NEW#XYZ_u_s_Foo99#1200#D-Foo99#"

    def test_without_config(self, generator, form_data):
        assert generator.generate(form_data, None) == EXAMPLE_CODE

    def test_coated_paper(self, generator, form_data, config):
        form_data["papierart"] = "gestrichen"
        assert "#CX75_g_s_NoSat170#" in generator.generate(form_data, config)

    def test_custom_paper_class_uses_first_letter(self, generator, form_data, config):
        form_data["papierart"] = "Naturpapier"
        assert "#CX75_n_s_NoSat170#" in generator.generate(form_data, config)

    def test_invalid_quantity_yields_empty_code(self, generator, form_data, config):
        form_data["auflage"] = "abc"
        assert generator.generate(form_data, config) == ""

    def test_oversized_quantity_yields_empty_code(self, generator, form_data, config):
        form_data["auflage"] = "1" * 5000
        assert generator.generate(form_data, config) == ""

    def test_invalid_quantity_is_logged(self, generator, form_data, config):
        form_data["auflage"] = "viele"
        with patch("modules.product_code.logger") as mock_logger:
            generator.generate(form_data, config)
        mock_logger.warning.assert_called_once()

    def test_default_config_codes(self, generator, form_data):
        form_data.update({"maschine": "XL106", "produkt": "FLY", "papiername": "MaGl135", "papierart": "gestrichen"})
        code = generator.generate(form_data, default_config())
        assert code == "A12345-1#TestKunde-FLY#XL106_g_s_MaGl135#1200#D-MaGl135#"


class TestCodeParts:
    """Individual parts of the code."""

    def test_build_code_parts(self, generator, form_data, config):
        parts = generator.build_code_parts(form_data, config)
        assert parts == {
            "auftrag": "A12345-1",
            "kunde": "TestKunde-BRFPP",
            "maschine": "CX75_u_s_NoSat170",
            "auflage": "1200",
            "papier": "D-NoSat170",
        }

    @pytest.mark.parametrize("quantity, expected", [
        ("1'200", "1200"),
        ("1’200", "1200"),
        ("1 200", "1200"),
        ("1'000'000", "1000000"),
        (500, "500"),
        ("12x", "12"),
    ])
    def test_quantity_part(self, generator, quantity, expected):
        assert generator.build_quantity_part(quantity) == expected

    def test_quantity_part_rejects_text(self, generator):
        with pytest.raises(InvalidQuantityError):
            generator.build_quantity_part("abc")

    @pytest.mark.parametrize("paper_type, expected", [
        ("gestrichen", "g_s"),
        ("ungestrichen", "u_s"),
        ("Recycling", "r_s"),
        ("", "_s"),
    ])
    def test_paper_type_code(self, generator, paper_type, expected):
        assert generator.get_paper_type_code(paper_type) == expected

    def test_sanitize_text_removes_special_characters(self, generator):
        assert generator.sanitize_text("Müller & Söhne AG") == "MüllerSöhneAG"

    def test_sanitize_text_keeps_dash_and_underscore(self, generator):
        assert generator.sanitize_text("Print-Shop_ZH") == "Print-Shop_ZH"

    def test_sanitize_text_truncates_to_twenty(self, generator):
        result = generator.sanitize_text("A" * 30)
        assert result == "A" * 20

    def test_customer_is_sanitized_in_code(self, generator, form_data, config):
        form_data["kunde"] = "Druck & Co. GmbH"
        assert "#DruckCoGmbH-BRFPP#" in generator.generate(form_data, config)

    def test_format_swiss_number(self, generator):
        assert generator.format_swiss_number(1200) == "1'200"
        assert generator.format_swiss_number(1000000) == "1'000'000"
        assert generator.format_swiss_number(999) == "999"

    @pytest.mark.parametrize("number", list(range(0, 5000, 137)) + [999_999, 1_000_000, 1_234_567_890])
    def test_swiss_number_round_trip(self, generator, number):
        formatted = generator.format_swiss_number(number)
        assert parse_swiss_number(formatted) == number
        assert generator.build_quantity_part(formatted) == str(number)


class TestParseCode:
    """Parsing codes back into fields."""

    def test_parse_example(self, generator):
        parsed = generator.parse_code(EXAMPLE_CODE)
        assert parsed == {
            "auftrag": "A12345",
            "position": "1",
            "kunde": "TestKunde",
            "produkt": "BRFPP",
            "maschine": "CX75",
            "papierart": "u_s",
            "papiername": "NoSat170",
            "auflage": "1200",
            "papier_prefix": "D",
            "papier_suffix": "NoSat170",
        }

    def test_parse_customer_with_dash(self, generator):
        parsed = generator.parse_code("A1-2#Print-Shop-FLY#SM52_g_s_MaGl135#500#D-MaGl135#")
        assert parsed["kunde"] == "Print-Shop"
        assert parsed["produkt"] == "FLY"

    def test_parse_paper_code_with_underscore(self, generator):
        parsed = generator.parse_code("A1-2#Kunde-FLY#SM52_g_s_Ma_Gl#500#D-Ma_Gl#")
        assert parsed["papiername"] == "Ma_Gl"

    def test_parse_too_few_parts(self, generator):
        with pytest.raises(ProductCodeFormatError):
            generator.parse_code("A1-2#Kunde-FLY")

    def test_generated_code_round_trips(self, generator, form_data, config):
        parsed = generator.parse_code(generator.generate(form_data, config))
        assert parsed["auftrag"] == "A12345"
        assert parsed["auflage"] == "1200"
        assert parsed["papiername"] == "NoSat170"

    def test_validate_code(self, generator):
        assert generator.validate_code(EXAMPLE_CODE)["valid"] is True
        result = generator.validate_code("kaputt")
        assert result["valid"] is False
        assert result["error"]


class TestDebugInfo:

    def test_complete_form(self, generator, form_data, config):
        info = generator.debug_info(form_data, config)
        assert info["code"] == EXAMPLE_CODE
        assert info["missing"] == []

    def test_incomplete_form(self, generator, form_data, config):
        form_data["papiername"] = None
        info = generator.debug_info(form_data, config)
        assert info["missing"] == ["papiername"]
        assert "code" not in info
