"""Shared fixtures for scaffolding tests."""

import pytest
from scaffold_wizard.engine.runner import MockActionRunner


@pytest.fixture
def mock_runner():
    return MockActionRunner()


@pytest.fixture
def workspace(tmp_path):
    folder = tmp_path / "my-app"
    folder.mkdir()
    return folder
