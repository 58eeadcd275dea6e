"""
Flask route blueprints for the PDF renamer.

This module contains all route handlers organized by functionality:
- main: Rename page
- upload: PDF upload and removal
- rename: Download under the new name, save to hotfolder
- settings: Machines, products, papers, import/export, hotfolder choice
- api: AJAX endpoints (preview, live validation, config, health)

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .upload import upload_bp
from .rename import rename_bp
from .settings import settings_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "upload_bp",
    "rename_bp",
    "settings_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(upload_bp)
    app.register_blueprint(rename_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(api_bp)
