"""Shared fixtures: an app wired to temp directories and its test client."""

import pytest

from app import create_app


@pytest.fixture
def hotfolder_dir(tmp_path):
    directory = tmp_path / "hotfolder"
    directory.mkdir()
    return directory


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "config.TestingConfig",
        overrides={
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "CONFIG_STORE_PATH": str(tmp_path / "renamer_config.json"),
            "HOTFOLDER_SETTINGS_PATH": str(tmp_path / "hotfolder.json"),
            "DEFAULT_HOTFOLDER": "",
            "DEFAULT_LANGUAGE": "de",
        },
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()
