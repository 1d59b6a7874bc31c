"""
Shared pytest configuration and fixtures for configo tests.

This file contains:
- Isolation of the process-wide -config flag cache
- Removal of CONFIG_PATH from the ambient environment
- A factory fixture for writing configuration files
"""

import json
from pathlib import Path
import sys

import pytest
import yaml

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from configo.locator import config_flag  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config_source(monkeypatch):
    """Start every test with no cached flag parse and no CONFIG_PATH."""
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    config_flag.reset()
    yield
    config_flag.reset()


@pytest.fixture
def write_config(tmp_path):
    """Factory writing a configuration file and returning its path.

    Mappings are serialized according to the file suffix; strings are written as-is.
    """

    def _write(content, name="config.yaml"):
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        elif path.suffix == ".json":
            path.write_text(json.dumps(content), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(content), encoding="utf-8")
        return path

    return _write
