"""
PDF upload route.

Handles file upload, validation, and PDF analysis.
Keeps the current file in the session; one file at a time.
"""

import os
from datetime import datetime
from pathlib import Path

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    request,
    session,
    url_for,
)
from werkzeug.utils import secure_filename

from models.validation_result import UploadedFile
from modules.formatting import format_file_size
from routes.common import get_service, get_validator, t
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

upload_bp = Blueprint("upload", __name__)


def _stream_size(file_storage) -> int:
    """Size of an uploaded file without reading it into memory."""
    stream = file_storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _discard_current_file() -> None:
    """Delete the stored copy of the current file and forget it."""
    current = session.pop("current_file", None)
    if not current:
        return
    stored_path = Path(current["stored_path"])
    try:
        stored_path.unlink()
        logger.debug(f"Removed stored upload {stored_path.name}")
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove stored upload {stored_path}: {e}")


@upload_bp.route("/upload", methods=["POST"])
def upload():
    """Validate, store and analyze an uploaded PDF, then return to the main page."""
    validator = get_validator()
    pdf_file = request.files.get("pdf")

    if not pdf_file or pdf_file.filename == "":
        flash(validator.validate_file(None).error, "error")
        return redirect(url_for("main.index"))

    uploaded = UploadedFile(
        name=pdf_file.filename,
        size=_stream_size(pdf_file),
        content_type=pdf_file.mimetype or "",
        last_modified=datetime.now(),
    )
    result = validator.validate_file(uploaded)
    if not result.valid:
        logger.info(f"Rejected upload {uploaded.name}: {result.code}")
        flash(t("messages.invalid_file", error=result.error), "error")
        return redirect(url_for("main.index"))

    try:
        upload_folder = Path(current_app.config["UPLOAD_FOLDER"])
        upload_folder.mkdir(parents=True, exist_ok=True)

        # Save file with timestamp prefix
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        stored_name = f"{timestamp}_{secure_filename(pdf_file.filename) or 'upload.pdf'}"
        stored_path = upload_folder / stored_name

        logger.info(f"Saving uploaded file: {stored_name}")
        pdf_file.save(stored_path)
    except OSError as e:
        logger.error(f"Upload failed: {e}", exc_info=True)
        flash(t("messages.error", error=str(e)), "error")
        return redirect(url_for("main.index"))

    analysis = get_service("PDF_ANALYZER").analyze(stored_path)
    if "error" in analysis:
        flash(t("messages.analysis_failed"), "warning")
    else:
        logger.info(f"PDF analysis complete: {analysis.get('pages')} pages")

    _discard_current_file()
    file_handler = get_service("FILE_HANDLER")
    file_info = file_handler.get_file_info(uploaded)
    session["current_file"] = {
        "original_name": uploaded.name,
        "stored_name": stored_name,
        "stored_path": str(stored_path),
        "size": uploaded.size,
        "size_formatted": format_file_size(uploaded.size),
        "content_type": uploaded.content_type,
        "uploaded_at": file_info.get("lastModified"),
        "analysis": analysis,
        "sha256": file_handler.generate_file_hash(stored_path),
    }
    session.modified = True

    flash(t("messages.upload_success", name=uploaded.name), "success")
    return redirect(url_for("main.index"))


@upload_bp.route("/remove-file", methods=["POST"])
def remove_file():
    _discard_current_file()
    flash(t("messages.file_removed"), "info")
    return redirect(url_for("main.index"))
