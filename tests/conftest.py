"""Shared fixtures: isolate tests from the CI runner's own environment."""

import os

import pytest

_ENV_PREFIXES = ("GITHUB_", "JIRA_", "GATE_", "LOGGING_", "INPUT_")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop GITHUB_*/JIRA_*/INPUT_* variables so runs in Actions behave like local ones."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
