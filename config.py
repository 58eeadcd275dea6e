"""
Configuration for the PDF renamer.

All paths default to locations next to this file; the hotfolder itself is
chosen in the settings page and only pre-set by DEFAULT_HOTFOLDER.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from core.constants import MAX_FILE_SIZE

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent
INSTANCE_DIR = BASE_DIR / "instance"


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    UPLOAD_FOLDER = os.environ.get(
        "UPLOAD_FOLDER", str(INSTANCE_DIR / "uploads")
    )
    # File ceiling plus room for the multipart envelope and form fields
    MAX_CONTENT_LENGTH = MAX_FILE_SIZE + 1024 * 1024
    SESSION_COOKIE_NAME = "pdf_renamer_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Persistence
    CONFIG_STORE_PATH = os.environ.get(
        "CONFIG_STORE_PATH", str(INSTANCE_DIR / "renamer_config.json")
    )
    HOTFOLDER_SETTINGS_PATH = os.environ.get(
        "HOTFOLDER_SETTINGS_PATH", str(INSTANCE_DIR / "hotfolder.json")
    )
    DEFAULT_HOTFOLDER = os.environ.get("DEFAULT_HOTFOLDER", "")

    # Message language when the session has none ('de' or 'en')
    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "de")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 8 * 3600  # one shift


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
