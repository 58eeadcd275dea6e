"""
Integration tests for the Flask routes.

Each test gets an app whose config store, uploads and hotfolder settings
live in a temp directory.
"""

import hashlib
import io
import json
import pytest
from pathlib import Path

from pypdf import PdfWriter

from app import create_app


EXAMPLE_CODE = "A12345-1#TestKunde-BRFPP#CX75_u_s_NoSat170#1200#D-NoSat170#"


# Fixtures

@pytest.fixture
def pdf_bytes():
    writer = PdfWriter()
    writer.add_blank_page(width=595.28, height=841.89)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def order_form():
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


def upload(client, data, name="flyer.pdf", content_type="application/pdf"):
    return client.post(
        "/upload",
        data={"pdf": (io.BytesIO(data), name, content_type)},
        content_type="multipart/form-data",
        follow_redirects=True,
    )


@pytest.fixture
def uploaded(client, pdf_bytes):
    upload(client, pdf_bytes)
    return client


class TestMainPage:

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert "Heidelberg PDF Renamer" in html
        assert "Speedmaster CX 75 (CX75)" in html
        assert "Keine Datei geladen" in html

    def test_unknown_page_redirects(self, client):
        response = client.get("/gibt-es-nicht", follow_redirects=True)
        assert response.request.path == "/"
        assert "Seite nicht gefunden" in response.get_data(as_text=True)

    def test_language_switch(self, client):
        response = client.get("/set_language/en", follow_redirects=True)
        html = response.get_data(as_text=True)
        assert "Language changed to English" in html
        assert "No file loaded" in html

    def test_unsupported_language(self, client):
        response = client.get("/set_language/fr", follow_redirects=True)
        assert "Nicht unterstützte Sprache: fr" in response.get_data(as_text=True)


class TestUpload:

    def test_upload_pdf(self, client, pdf_bytes, app):
        response = upload(client, pdf_bytes)

        html = response.get_data(as_text=True)
        assert "flyer.pdf" in html
        assert "1 Seiten" in html
        assert "210.0 &times; 297.0 mm" in html

        with client.session_transaction() as sess:
            current = sess["current_file"]
        assert current["original_name"] == "flyer.pdf"
        assert current["size"] == len(pdf_bytes)
        assert Path(current["stored_path"]).read_bytes() == pdf_bytes
        assert Path(current["stored_path"]).parent == Path(app.config["UPLOAD_FOLDER"])
        assert current["sha256"] == hashlib.sha256(pdf_bytes).hexdigest()

    def test_upload_without_file(self, client):
        response = client.post("/upload", data={}, follow_redirects=True)
        assert "Keine Datei ausgewählt" in response.get_data(as_text=True)

    def test_upload_empty_file(self, client):
        response = upload(client, b"")
        assert "Datei ist leer" in response.get_data(as_text=True)
        with client.session_transaction() as sess:
            assert "current_file" not in sess

    def test_upload_wrong_type(self, client):
        response = upload(client, b"hello", name="notes.txt", content_type="text/plain")
        assert "Nur PDF-Dateien sind erlaubt" in response.get_data(as_text=True)

    def test_upload_replaces_previous_file(self, uploaded, pdf_bytes):
        with uploaded.session_transaction() as sess:
            first_path = Path(sess["current_file"]["stored_path"])

        upload(uploaded, pdf_bytes, name="zweite.pdf")

        assert not first_path.exists()
        with uploaded.session_transaction() as sess:
            assert sess["current_file"]["original_name"] == "zweite.pdf"

    def test_remove_file(self, uploaded):
        with uploaded.session_transaction() as sess:
            stored_path = Path(sess["current_file"]["stored_path"])

        response = uploaded.post("/remove-file", follow_redirects=True)

        assert "Datei entfernt" in response.get_data(as_text=True)
        assert not stored_path.exists()

    def test_request_too_large(self, tmp_path, pdf_bytes):
        app = create_app("config.TestingConfig", overrides={
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "CONFIG_STORE_PATH": str(tmp_path / "config.json"),
            "HOTFOLDER_SETTINGS_PATH": str(tmp_path / "hotfolder.json"),
            "MAX_CONTENT_LENGTH": 100,
        })
        response = upload(app.test_client(), pdf_bytes)
        assert "Datei zu gross" in response.get_data(as_text=True)


class TestRename:

    def test_download(self, uploaded, order_form, pdf_bytes):
        response = uploaded.post("/rename/download", data=order_form)

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert EXAMPLE_CODE + "flyer.pdf" in response.headers["Content-Disposition"]
        assert response.data == pdf_bytes
        response.close()

    def test_download_without_file(self, client, order_form):
        response = client.post("/rename/download", data=order_form, follow_redirects=True)
        assert "Bitte zuerst eine PDF-Datei laden" in response.get_data(as_text=True)

    def test_download_invalid_form(self, uploaded, order_form):
        order_form.update({"auftragsnummer": "12345", "auftragsposition": "1000"})
        response = uploaded.post("/rename/download", data=order_form, follow_redirects=True)

        html = response.get_data(as_text=True)
        assert "Bitte alle Felder korrekt ausfüllen" in html
        assert "Auftragsposition darf maximal 999 sein" in html

    def test_form_values_kept_after_error(self, uploaded, order_form):
        order_form["auflage"] = "0"
        uploaded.post("/rename/download", data=order_form)
        with uploaded.session_transaction() as sess:
            assert sess["form"]["kunde"] == "TestKunde"

    def test_markup_is_stripped(self, uploaded, order_form):
        order_form["kunde"] = "<b>TestKunde</b>"
        response = uploaded.post("/rename/download", data=order_form)
        assert EXAMPLE_CODE + "flyer.pdf" in response.headers["Content-Disposition"]
        response.close()

    def test_save_to_hotfolder(self, uploaded, order_form, hotfolder_dir, pdf_bytes):
        uploaded.post("/settings/hotfolder", data={"hotfolder_path": str(hotfolder_dir)})

        response = uploaded.post("/rename/hotfolder", data=order_form, follow_redirects=True)

        assert "im Hotfolder gespeichert" in response.get_data(as_text=True)
        target = hotfolder_dir / (EXAMPLE_CODE + "flyer.pdf")
        assert target.read_bytes() == pdf_bytes

    def test_save_without_hotfolder(self, uploaded, order_form):
        response = uploaded.post("/rename/hotfolder", data=order_form, follow_redirects=True)
        assert "Kein Hotfolder ausgewählt" in response.get_data(as_text=True)


class TestSettings:

    def test_settings_page(self, client):
        response = client.get("/settings")
        assert response.status_code == 200
        assert "NoSat170" in response.get_data(as_text=True)

    def test_add_machine(self, client, app):
        response = client.post(
            "/settings/machines/add",
            data={"name": "Speedmaster CD 102", "code": "cd102"},
            follow_redirects=True,
        )
        assert "Speedmaster CD 102 (CD102) wurde hinzugefügt" in response.get_data(as_text=True)
        assert app.config["CONFIG_STORE"].get_config().find_by_code("machines", "CD102")

    def test_add_duplicate(self, client):
        response = client.post(
            "/settings/products/add", data={"name": "Flyer 2", "code": "FLY"}, follow_redirects=True
        )
        assert "existiert bereits" in response.get_data(as_text=True)

    def test_add_paper_custom_type(self, client, app):
        client.post("/settings/papers/add", data={
            "name": "Kraft 90", "code": "Kr90", "type": "custom", "type_custom_value": "Kraft",
        })
        paper = app.config["CONFIG_STORE"].get_config().find_by_code("papers", "Kr90")
        assert paper.type == "Kraft"

    def test_unknown_category(self, client):
        response = client.post("/settings/inks/add", data={"name": "Cyan", "code": "C"})
        assert response.status_code == 302

    def test_update_and_delete(self, client, app):
        store = app.config["CONFIG_STORE"]
        machine = store.get_config().machines[0]

        client.post(f"/settings/machines/{machine.id}/update", data={"name": "CX 75", "code": "CX75"})
        assert store.get_config().find_by_id("machines", machine.id).name == "CX 75"

        response = client.post(f"/settings/machines/{machine.id}/delete", follow_redirects=True)
        assert "CX 75 wurde gelöscht" in response.get_data(as_text=True)
        assert store.get_config().find_by_id("machines", machine.id) is None

    def test_export(self, client):
        response = client.get("/settings/export")

        assert response.mimetype == "application/json"
        assert "attachment; filename=heidelberg-config-" in response.headers["Content-Disposition"]
        data = json.loads(response.get_data(as_text=True))
        assert "exportedAt" in data
        assert len(data["papers"]) == 5

    def test_import(self, client, app):
        payload = json.dumps({
            "machines": [{"name": "Nur eine", "code": "ONE"}],
            "products": [],
            "papers": [],
        }).encode("utf-8")
        response = client.post(
            "/settings/import",
            data={"config_file": (io.BytesIO(payload), "config.json")},
            content_type="multipart/form-data",
            follow_redirects=True,
        )
        assert "Konfiguration wurde importiert" in response.get_data(as_text=True)
        assert [m.code for m in app.config["CONFIG_STORE"].get_config().machines] == ["ONE"]

    def test_import_invalid(self, client):
        response = client.post(
            "/settings/import",
            data={"config_file": (io.BytesIO(b"{kaputt"), "config.json")},
            content_type="multipart/form-data",
            follow_redirects=True,
        )
        assert "Import fehlgeschlagen" in response.get_data(as_text=True)

    def test_reset(self, client, app):
        store = app.config["CONFIG_STORE"]
        store.delete_item("machines", store.get_config().machines[0].id)
        client.post("/settings/reset")
        assert len(store.get_config().machines) == 4

    def test_select_and_clear_hotfolder(self, client, app, hotfolder_dir):
        response = client.post(
            "/settings/hotfolder", data={"hotfolder_path": str(hotfolder_dir)}, follow_redirects=True
        )
        assert "Hotfolder gewählt: hotfolder" in response.get_data(as_text=True)

        client.post("/settings/hotfolder/clear")
        assert app.config["HOTFOLDER_SERVICE"].hotfolder is None

    def test_select_missing_hotfolder(self, client, tmp_path):
        response = client.post(
            "/settings/hotfolder", data={"hotfolder_path": str(tmp_path / "fehlt")}, follow_redirects=True
        )
        assert "Verzeichnis existiert nicht" in response.get_data(as_text=True)

    def test_delete_hotfolder_file(self, client, hotfolder_dir):
        client.post("/settings/hotfolder", data={"hotfolder_path": str(hotfolder_dir)})
        (hotfolder_dir / "alt.pdf").write_bytes(b"%PDF-1.4")

        settings_html = client.get("/settings").get_data(as_text=True)
        assert "alt.pdf" in settings_html

        response = client.post("/settings/hotfolder/delete", data={"filename": "alt.pdf"}, follow_redirects=True)
        assert "aus dem Hotfolder gelöscht" in response.get_data(as_text=True)
        assert not (hotfolder_dir / "alt.pdf").exists()

    def test_delete_hotfolder_file_outside_folder(self, client, hotfolder_dir):
        client.post("/settings/hotfolder", data={"hotfolder_path": str(hotfolder_dir)})
        response = client.post(
            "/settings/hotfolder/delete", data={"filename": "../renamer_config.json"}, follow_redirects=True
        )
        assert "Ungültiger Dateiname" in response.get_data(as_text=True)


class TestApi:

    def test_preview(self, client, order_form):
        response = client.post("/api/preview", json=order_form)
        data = response.get_json()
        assert data["code"] == EXAMPLE_CODE
        assert data["complete"] is True
        assert data["filename"] is None

    def test_preview_with_file(self, uploaded, order_form):
        data = uploaded.post("/api/preview", json=order_form).get_json()
        assert data["filename"] == EXAMPLE_CODE + "flyer.pdf"

    def test_preview_incomplete(self, client, order_form):
        del order_form["papiername"]
        data = client.post("/api/preview", json=order_form).get_json()
        assert data["code"] == ""
        assert data["missing"] == ["papiername"]

    def test_preview_custom_paper_class(self, client, order_form):
        order_form.update({"papierart": "custom", "papierart_custom_value": "Recycling"})
        data = client.post("/api/preview", json=order_form).get_json()
        assert "#CX75_r_s_NoSat170#" in data["code"]

    def test_validate_field(self, client):
        data = client.post("/api/validate/auflage", json={"value": "1'200"}).get_json()
        assert data == {"valid": True, "value": "1'200", "normalizedValue": "1'200",
                        "numericValue": 1200, "formattedValue": "1'200"}

    def test_validate_field_error(self, client):
        data = client.post("/api/validate/auftragsnummer", json={"value": "B1"}).get_json()
        assert data["valid"] is False
        assert data["code"] == "PATTERN"

    def test_validate_oversized_print_run(self, client):
        response = client.post("/api/validate/auflage", json={"value": "1" * 5000})
        assert response.status_code == 200
        assert response.get_json()["code"] == "TOO_LARGE"

    @pytest.mark.parametrize("body", [[1], "x", 5])
    def test_preview_ignores_non_object_json(self, client, body):
        response = client.post("/api/preview", json=body)
        assert response.status_code == 200
        assert response.get_json()["code"] == ""

    @pytest.mark.parametrize("body", [[1], "x"])
    def test_validate_ignores_non_object_json(self, client, body):
        response = client.post("/api/validate/auflage", json=body)
        assert response.status_code == 200
        assert response.get_json()["code"] == "REQUIRED"

    def test_config(self, client):
        data = client.get("/api/config").get_json()
        assert [p["code"] for p in data["products"]] == ["BRFPP", "FLY", "VK", "PLK", "BRP", "FLD"]

    def test_hotfolder_not_configured(self, client):
        assert client.get("/api/hotfolder").get_json() == {"configured": False}

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["checks"]["config_store"] == "ok"
        assert data["checks"]["hotfolder"] == "not_configured"
