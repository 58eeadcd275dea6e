"""
Settings page.

Maintain machines, products and papers, export/import/reset the
configuration and choose the hotfolder.
"""

from datetime import date

from flask import (
    Blueprint,
    Response,
    abort,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from core.constants import CATEGORIES, PAPER_TYPE_CUSTOM
from core.exceptions import ConfigStoreError, HotfolderError, ValidationError
from routes.common import get_service, sanitize_text, t
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

settings_bp = Blueprint("settings", __name__, url_prefix="/settings")


def _entry_from_form(category: str) -> dict:
    """name/code (and paper type) from the submitted entry form."""
    data = {
        "name": sanitize_text(request.form.get("name")),
        "code": sanitize_text(request.form.get("code")),
    }
    if category == "papers":
        paper_type = sanitize_text(request.form.get("type"))
        if paper_type == PAPER_TYPE_CUSTOM:
            paper_type = sanitize_text(request.form.get("type_custom_value"))
        data["type"] = paper_type
    return data


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        abort(404)


def _back():
    return redirect(url_for("settings.index"))


@settings_bp.route("", methods=["GET"])
def index():
    return render_template(
        "settings.html",
        config=get_service("CONFIG_STORE").get_config(),
        categories=CATEGORIES,
        hotfolder=get_service("HOTFOLDER_SERVICE").get_hotfolder_info(),
    )


@settings_bp.route("/<category>/add", methods=["POST"])
def add_item(category: str):
    _check_category(category)
    data = _entry_from_form(category)

    try:
        config = get_service("CONFIG_STORE").add_item(category, data)
    except (ValidationError, ConfigStoreError) as e:
        flash(t("messages.error", error=e.message), "error")
        return _back()

    added = config.entries(category)[-1]
    flash(t("messages.entry_added", name=added.name, code=added.code), "success")
    return _back()


@settings_bp.route("/<category>/<item_id>/update", methods=["POST"])
def update_item(category: str, item_id: str):
    _check_category(category)
    data = _entry_from_form(category)

    try:
        config = get_service("CONFIG_STORE").update_item(category, item_id, data)
    except (ValidationError, ConfigStoreError) as e:
        flash(t("messages.error", error=e.message), "error")
        return _back()

    updated = config.find_by_id(category, item_id)
    flash(t("messages.entry_updated", name=updated.name), "success")
    return _back()


@settings_bp.route("/<category>/<item_id>/delete", methods=["POST"])
def delete_item(category: str, item_id: str):
    _check_category(category)
    store = get_service("CONFIG_STORE")
    entry = store.get_config().find_by_id(category, item_id)

    try:
        store.delete_item(category, item_id)
    except ConfigStoreError as e:
        flash(t("messages.error", error=e.message), "error")
        return _back()

    flash(t("messages.entry_deleted", name=entry.name if entry else item_id), "success")
    return _back()


@settings_bp.route("/export", methods=["GET"])
def export_config():
    """Download the configuration as heidelberg-config-YYYY-MM-DD.json."""
    filename = f"heidelberg-config-{date.today().isoformat()}.json"
    logger.info(f"Config exported as {filename}")
    return Response(
        get_service("CONFIG_STORE").export_config(),
        mimetype="application/json",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@settings_bp.route("/import", methods=["POST"])
def import_config():
    config_file = request.files.get("config_file")
    if not config_file or config_file.filename == "":
        flash(t("messages.import_no_file"), "error")
        return _back()

    try:
        text = config_file.read().decode("utf-8")
        get_service("CONFIG_STORE").import_config(text)
    except UnicodeDecodeError as e:
        flash(t("messages.error", error=str(e)), "error")
        return _back()
    except ConfigStoreError as e:
        flash(t("messages.error", error=e.message), "error")
        return _back()

    flash(t("messages.import_success"), "success")
    return _back()


@settings_bp.route("/reset", methods=["POST"])
def reset_config():
    try:
        get_service("CONFIG_STORE").reset_to_defaults()
    except ConfigStoreError as e:
        flash(t("messages.error", error=e.message), "error")
        return _back()

    flash(t("messages.reset_done"), "success")
    return _back()


@settings_bp.route("/hotfolder", methods=["POST"])
def select_hotfolder():
    path = (request.form.get("hotfolder_path") or "").strip()
    if not path:
        flash(t("ui.no_hotfolder"), "error")
        return _back()

    try:
        directory = get_service("HOTFOLDER_SERVICE").select_hotfolder(path)
    except HotfolderError as e:
        flash(t("messages.hotfolder_failed", error=e.message), "error")
        return _back()

    flash(t("messages.hotfolder_selected", name=directory.name or str(directory)), "success")
    return _back()


@settings_bp.route("/hotfolder/clear", methods=["POST"])
def clear_hotfolder():
    try:
        get_service("HOTFOLDER_SERVICE").clear_saved_hotfolder()
    except HotfolderError as e:
        flash(t("messages.hotfolder_failed", error=e.message), "error")
        return _back()

    flash(t("messages.hotfolder_cleared"), "info")
    return _back()


@settings_bp.route("/hotfolder/delete", methods=["POST"])
def delete_hotfolder_file():
    filename = (request.form.get("filename") or "").strip()
    try:
        get_service("HOTFOLDER_SERVICE").delete_from_hotfolder(filename)
    except HotfolderError as e:
        flash(t("messages.hotfolder_failed", error=e.message), "error")
        return _back()

    flash(t("messages.hotfolder_file_deleted", name=filename), "info")
    return _back()
