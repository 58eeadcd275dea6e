"""
Rename actions.

Both actions validate the order form, generate the product code and name the
current file '<product code><original name>'. Download streams it back to the
browser; hotfolder copies it into the selected hotfolder.
"""

from typing import Optional, Tuple

from flask import (
    Blueprint,
    flash,
    redirect,
    request,
    send_file,
    session,
    url_for,
)

from core.exceptions import HotfolderError
from models.form_data import FormData
from routes.common import get_service, get_validator, sanitized_form, t
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

rename_bp = Blueprint("rename", __name__, url_prefix="/rename")


def _prepare_rename() -> Optional[Tuple[dict, str]]:
    """
    Validate the submitted form against the current file.

    Flashes every problem and returns None if renaming is not possible;
    otherwise (current_file, renamed filename).
    """
    form_values = sanitized_form(request.form)
    session["form"] = form_values
    session.modified = True

    current_file = session.get("current_file")
    if not current_file:
        flash(t("messages.no_file_uploaded"), "error")
        return None

    form = FormData.from_form(form_values)
    validation = get_validator().validate_form(form)
    if not validation.valid:
        flash(t("messages.form_invalid"), "error")
        for issue in validation.errors:
            flash(issue.error, "error")
        return None

    config = get_service("CONFIG_STORE").get_config()
    product_code = get_service("PRODUCT_CODE_GENERATOR").generate(form, config)
    if not product_code:
        flash(t("messages.form_invalid"), "error")
        return None

    filename = get_service("FILE_HANDLER").build_renamed_filename(product_code, current_file["original_name"])
    return current_file, filename


@rename_bp.route("/download", methods=["POST"])
def download():
    """Stream the current file under its new name."""
    prepared = _prepare_rename()
    if prepared is None:
        return redirect(url_for("main.index"))

    current_file, filename = prepared
    try:
        response = send_file(
            current_file["stored_path"],
            mimetype="application/pdf",
            as_attachment=True,
            download_name=filename,
        )
    except OSError as e:
        logger.error(f"Download failed: {e}", exc_info=True)
        flash(t("messages.download_failed", error=str(e)), "error")
        return redirect(url_for("main.index"))

    logger.info(f"Download as {filename}")
    return response


@rename_bp.route("/hotfolder", methods=["POST"])
def save_to_hotfolder():
    """Copy the current file into the hotfolder under its new name."""
    prepared = _prepare_rename()
    if prepared is None:
        return redirect(url_for("main.index"))

    current_file, filename = prepared
    try:
        saved_name = get_service("HOTFOLDER_SERVICE").save_to_hotfolder(current_file["stored_path"], filename)
    except HotfolderError as e:
        flash(t("messages.hotfolder_failed", error=e.message), "error")
        return redirect(url_for("main.index"))

    flash(t("messages.hotfolder_saved", name=saved_name), "success")
    return redirect(url_for("main.index"))
