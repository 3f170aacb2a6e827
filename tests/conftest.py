"""Pytest fixtures for build-runner-mcp tests."""

import json
import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def project_dir(tmp_path):
    """Empty project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def home_dir(tmp_path):
    """Empty fallback home directory, so the real home never leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def write_config(project_dir):
    """Write a .build-runner.json into the project directory."""

    def _write(data, name=".build-runner.json", directory=None):
        path = (directory or project_dir) / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def python_target():
    """Config fragment running a Python snippet directly (no shell)."""

    def _target(code, **extra):
        return {"cmd": sys.executable, "args": ["-c", code], "sh": False, **extra}

    return _target
