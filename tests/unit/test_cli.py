"""
TEST DOC: CLI

WHAT: Tests for the typer command-line interface
WHY: The commands that need no network should work offline
HOW: Invoke the app with typer's CliRunner

CASES:
- --version
- config hides the API key
- chat and models refuse to start without a key
"""

import pytest
from typer.testing import CliRunner

from chatgpt_client import __version__
from chatgpt_client.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("CHATGPT_CLIENT_LLM_API_KEY", raising=False)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_hides_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-do-not-print")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert "API Key: set" in result.output
    assert "sk-do-not-print" not in result.output


@pytest.mark.parametrize("command", ["chat", "models"])
def test_requires_api_key(command):
    result = runner.invoke(app, [command])
    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output
