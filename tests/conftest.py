"""Shared fixtures for pytest tests."""

import logging
import pathlib
from collections.abc import Generator
from typing import Any

import pytest

from modkitctl import diagnostics, settings


@pytest.fixture(autouse=True)
def clean_runtime(monkeypatch) -> Generator[None, Any, None]:
    """Start every test with default runtime settings and no ambient switches."""
    for env_var in (
        settings.VERBOSE_ENV_VAR,
        settings.DEBUG_ENV_VAR,
        settings.EXCEPTION_ACTION_ENV_VAR,
    ):
        monkeypatch.delenv(env_var, raising=False)
    settings.runtime.reset()
    diagnostics.clear_frames()
    diagnostics.diagnostic_logger.setLevel(logging.DEBUG)
    yield
    settings.runtime.reset()
    diagnostics.clear_frames()


@pytest.fixture
def workspace(tmp_path: pathlib.Path, faker) -> pathlib.Path:
    """Create a minimal module workspace with a pyproject.toml."""
    project_name = faker.slug()
    (tmp_path / "pyproject.toml").write_text(
        f'[project]\nname = "{project_name}"\nversion = "0.1.0"\n'
    )
    (tmp_path / settings.WORKSPACE_SOURCE_DIRNAME).mkdir()
    (tmp_path / settings.WORKSPACE_TESTS_DIRNAME).mkdir()
    return tmp_path


def assert_messages_match(messages: list[str], *expected: str):
    """Assert each expected substring appears in the messages, in order."""
    remaining = iter(messages)
    for fragment in expected:
        assert any(fragment in message for message in remaining), (
            f"{fragment!r} not found in order in {messages!r}"
        )


def diagnostic_messages(caplog) -> list[str]:
    """Get only the messages logged on the diagnostics logger."""
    return [
        record.getMessage()
        for record in caplog.records
        if record.name == settings.DIAGNOSTICS_LOGGER_NAME
    ]
