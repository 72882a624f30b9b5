"""Shared test fixtures."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from syncdoc.config import SyncdocConfig, load_config
from syncdoc.formatter import FormatterFailed
from syncdoc.merge import DocMerger

_MISSING = Path("/nonexistent/syncdoc/config.toml")


class IdentityFormatter:
    """Deterministic stand-in for rustfmt: strips trailing whitespace only."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def format(self, text: str) -> str:
        self.calls.append(text)
        lines = [line.rstrip() for line in text.splitlines()]
        return "\n".join(lines) + "\n" if lines else ""


class SpacingFormatter(IdentityFormatter):
    """Also collapses token-stream spacing around paths and macro calls."""

    def format(self, text: str) -> str:
        text = super().format(text)
        text = re.sub(r"\s*::\s*", "::", text)
        text = re.sub(r"\s*!\s*\(", "!(", text)
        text = re.sub(r"\(\s+", "(", text)
        return re.sub(r"\s+\)", ")", text)


class FailingFormatter:
    """Formatter whose subprocess always fails."""

    def format(self, text: str) -> str:
        raise FormatterFailed("rustfmt exited with status 1", returncode=1, stderr="error")


@pytest.fixture
def identity_formatter() -> IdentityFormatter:
    return IdentityFormatter()


@pytest.fixture
def spacing_formatter() -> SpacingFormatter:
    return SpacingFormatter()


@pytest.fixture
def failing_formatter() -> FailingFormatter:
    return FailingFormatter()


@pytest.fixture
def default_config() -> SyncdocConfig:
    """Bundled defaults, isolated from user and project config files."""
    return load_config(config_path=_MISSING, user_config_path=_MISSING)


@pytest.fixture
def merger(identity_formatter: IdentityFormatter) -> DocMerger:
    return DocMerger(identity_formatter)
