"""Shared pytest fixtures for the vue-scaffold test suite.

Provides:
- A scripted prompter that answers by message substring
- An offline version lookup standing in for the registry client
- The bundled catalog and asset directory
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Sequence

import pytest
from rich.console import Console

from vue_scaffold.catalog import Catalog, load_catalog
from vue_scaffold.cli import ASSET_DIR


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Answers prompts from a {message substring: answer} table.

    Unmatched prompts get their default. An exception instance as the answer
    is raised instead of returned.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = answers or {}
        self.asked: list[str] = []

    def _answer(self, message: str, default: Any) -> Any:
        self.asked.append(message)
        for key, value in self.answers.items():
            if key in message:
                if isinstance(value, BaseException):
                    raise value
                return value
        return default

    def text(self, message: str, default: str) -> str:
        return self._answer(message, default)

    def confirm(self, message: str, default: bool = False) -> bool:
        return self._answer(message, default)

    def select(self, message: str, choices: Sequence[tuple[str, Any]], default: int = 0) -> Any:
        return self._answer(message, choices[default][1])


class FakeLookup:
    """Offline stand-in for `RegistryClient`."""

    def __init__(self, versions: dict[str, str] | None = None, default: str = "1.0.0") -> None:
        self.versions = versions or {}
        self.default = default
        self.calls: list[str] = []

    def latest_version(self, name: str) -> str:
        self.calls.append(name)
        return self.versions.get(name, self.default)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def asset_dir() -> Path:
    return ASSET_DIR


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test with `tmp_path` as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
