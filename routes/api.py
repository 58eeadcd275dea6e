"""
API routes (AJAX endpoints).

Handles:
- /api/preview - Product code and filename for the current form values
- /api/validate/<field> - Live validation of one form field
- /api/config - Machines, products and papers
- /api/hotfolder - Hotfolder summary
- /health - Health check endpoint
"""

from flask import (
    Blueprint,
    current_app,
    request,
    session,
)

from core.constants import APP_VERSION
from models.form_data import FormData
from routes.common import get_service, get_validator, sanitized_form
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


def _request_data() -> dict:
    """JSON object body if sent, form fields otherwise."""
    data = request.get_json(silent=True)
    if isinstance(data, dict) and data:
        return data
    return request.form.to_dict()


@api_bp.route("/api/preview", methods=["POST"])
def preview():
    """
    Product code preview.

    Incomplete forms yield an empty code; the response lists the missing
    fields so the page can show a placeholder.
    """
    form = FormData.from_form(sanitized_form(_request_data()))
    config = get_service("CONFIG_STORE").get_config()
    product_code = get_service("PRODUCT_CODE_GENERATOR").generate(form, config)

    response = {
        "code": product_code,
        "complete": form.is_complete,
        "missing": form.missing_fields(),
        "filename": None,
    }

    current_file = session.get("current_file")
    if product_code and current_file:
        response["filename"] = get_service("FILE_HANDLER").build_renamed_filename(
            product_code, current_file["original_name"]
        )
    return response


@api_bp.route("/api/validate/<field_name>", methods=["POST"])
def validate_field(field_name: str):
    """Validate one value: {"value": ...} -> field validation result."""
    value = _request_data().get("value")
    result = get_validator().validate_field(field_name, value)
    return result.to_dict()


@api_bp.route("/api/config", methods=["GET"])
def get_config():
    return get_service("CONFIG_STORE").get_config().to_dict()


@api_bp.route("/api/hotfolder", methods=["GET"])
def hotfolder_info():
    return get_service("HOTFOLDER_SERVICE").get_hotfolder_info()


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "version": APP_VERSION,
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    # Check config store
    config_store = current_app.config.get("CONFIG_STORE")
    if config_store and config_store.is_loaded:
        health_status["checks"]["config_store"] = "ok"
    else:
        health_status["checks"]["config_store"] = "not_loaded"
        health_status["status"] = "degraded"

    # Check hotfolder (optional: downloads work without it)
    hotfolder_service = current_app.config.get("HOTFOLDER_SERVICE")
    if hotfolder_service and hotfolder_service.hotfolder is not None:
        health_status["checks"]["hotfolder"] = "ok"
    else:
        health_status["checks"]["hotfolder"] = "not_configured"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
