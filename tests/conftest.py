"""Test configuration utilities and shared fixtures."""

import shutil
import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from tscatalog.backend.app import create_app  # noqa: E402
from tscatalog.backend.app.localization import CatalogRegistry, load_directory  # noqa: E402

TRANSLATIONS_ROOT = SRC / "tscatalog" / "translations"
FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture()
def translations_dir(tmp_path: Path) -> Path:
    """Copy the shipped resources into a writable directory."""

    target = tmp_path / "translations"
    shutil.copytree(TRANSLATIONS_ROOT, target)
    return target


@pytest.fixture()
def registry(translations_dir: Path) -> CatalogRegistry:
    return CatalogRegistry(lambda: load_directory(translations_dir))


@pytest.fixture()
def app(registry: CatalogRegistry) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(registry)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
