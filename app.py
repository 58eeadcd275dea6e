"""
Heidelberg PDF Renamer - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env, config object, overrides)
2. Loads the machine/product/paper configuration (JSON store)
3. Restores the saved hotfolder
4. Registers route blueprints
5. Sets up error handlers and context processors

ARCHITECTURE:
    Flask request threads
    ├── ConfigStore (one instance, lock-guarded JSON file)
    ├── HotfolderService (one instance, settings JSON file)
    └── Stateless helpers: ProductCodeGenerator, FileHandler, PDFAnalyzer

The current upload and the last form values live in the user's session.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, flash, redirect, request, session, url_for
from werkzeug.exceptions import RequestEntityTooLarge

from logging_config import setup_logging, get_logger
from core.constants import APP_NAME, APP_VERSION, MAX_FILE_SIZE
from modules.file_handler import FileHandler
from modules.formatting import format_file_size
from modules.i18n import create_translation_filter, get_supported_languages, translate, DEFAULT_LANGUAGE
from modules.pdf_analyzer import PDFAnalyzer
from modules.product_code import ProductCodeGenerator
from services.config_store import ConfigStore
from services.hotfolder_service import HotfolderService
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_object: str = "config.Config", overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the config class
        overrides: Config values applied last (tests pass temp paths here)

    Returns:
        Configured Flask application
    """
    # Load .env from base path (next to executable in production)
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)  # Default behavior

    # Create Flask app
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production" and not app.config.get("TESTING")

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting {APP_NAME} {APP_VERSION} in {app.config.get('ENVIRONMENT')} mode")

    # Ensure upload folder exists
    upload_folder = Path(app.config["UPLOAD_FOLDER"])
    upload_folder.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    config_store = ConfigStore(app.config["CONFIG_STORE_PATH"])
    config_store.load_config()
    app.config["CONFIG_STORE"] = config_store

    hotfolder_service = HotfolderService(
        app.config["HOTFOLDER_SETTINGS_PATH"],
        default_hotfolder=app.config.get("DEFAULT_HOTFOLDER"),
    )
    if hotfolder_service.load_saved_hotfolder() is None:
        logger.info("No hotfolder selected yet")
    app.config["HOTFOLDER_SERVICE"] = hotfolder_service

    app.config["PRODUCT_CODE_GENERATOR"] = ProductCodeGenerator()
    app.config["FILE_HANDLER"] = FileHandler()
    app.config["PDF_ANALYZER"] = PDFAnalyzer()

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # CONTEXT PROCESSORS
    # =========================================================================

    default_language = app.config.get("DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)

    def _session_language() -> str:
        return session.get("language", default_language)

    @app.context_processor
    def inject_i18n():
        """Inject translation function into all templates."""
        current_lang = _session_language()
        return {
            "_": create_translation_filter(current_lang),
            "current_language": current_lang,
            "supported_languages": get_supported_languages(),
            "app_name": APP_NAME,
            "app_version": APP_VERSION,
        }

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(e):
        flash(translate("messages.file_too_large", lang=_session_language(),
                        max=format_file_size(MAX_FILE_SIZE)), "error")
        return redirect(url_for("main.index"))

    @app.errorhandler(404)
    def handle_not_found(e):
        flash(translate("messages.page_not_found", lang=_session_language()), "warning")
        return redirect(url_for("main.index"))

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        flash(translate("messages.unexpected_error", lang=_session_language()), "error")
        return redirect(url_for("main.index"))

    # =========================================================================
    # LANGUAGE ROUTE
    # =========================================================================

    @app.route("/set_language/<lang>", methods=["GET"])
    def set_language(lang: str):
        languages = get_supported_languages()
        if lang in languages:
            session["language"] = lang
            session.modified = True
            flash(translate("messages.language_changed", lang=lang, name=languages[lang]["name"]), "success")
        else:
            flash(translate("messages.unsupported_language", lang=_session_language(), code=lang), "error")
        return redirect(request.referrer or url_for("main.index"))

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
