"""Shared fixtures for the JExTile test-suite."""

import logging
from pathlib import Path
import sys

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from jextile.config.manager import ConfigManager
from jextile.core.models import DocumentMeta
from jextile.ui.controllers.grid_controller import GridController

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep ConfigManager away from the real home directory."""
    config_dir = tmp_path / "jextile-config"
    monkeypatch.setenv("JEXTILE_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def people():
    """A small heterogeneous document."""
    return [
        {"id": 1, "Title": "Ada", "tags": ["math", "engines"], "address": {"city": "London", "zip": "N1"}},
        {"id": 2, "Title": "Grace", "tags": ["navy", "cobol"], "active": True},
        {"id": 3, "Title": "Edsger", "tags": [], "note": None},
    ]


class RecordingSaveHandler:
    def __init__(self):
        self.calls = []

    def __call__(self, document, meta: DocumentMeta):
        self.calls.append((document, meta))
        return Path(meta.name)


@pytest.fixture
def save_handler():
    return RecordingSaveHandler()


@pytest.fixture
def controller(people, save_handler):
    ctrl = GridController(save_handler=save_handler)
    ctrl.load_document(people, "people.json", 321)
    return ctrl
