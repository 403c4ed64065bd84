"""Unit tests configuration file."""

import pytest


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def model_file(tmp_path):
    """Write a view model description to a temporary file and return its path."""

    def write(text: str) -> str:
        path = tmp_path / "input.model"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write
