"""Canonical source formatter used to normalise both sides of a merge."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from syncdoc.config import SyncdocConfig
    from syncdoc.formatter.rustfmt import RustfmtFormatter


class MergeError(Exception):
    """Base exception for all merge engine errors."""


class FormatterFailed(MergeError):
    """The formatter subprocess could not be run or exited unsuccessfully.

    Attributes:
        returncode: Exit status, or None if the process never completed.
        stderr: Captured diagnostic output, possibly empty.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class EncodingError(MergeError):
    """The formatter produced output that is not valid UTF-8."""


def get_formatter(config: SyncdocConfig) -> RustfmtFormatter:
    """Build the formatter described by the ``[formatter]`` config section."""
    from syncdoc.formatter.rustfmt import RustfmtFormatter

    fmt = config.formatter
    return RustfmtFormatter(
        command=fmt.command,
        args=fmt.args,
        edition=fmt.edition,
        timeout_seconds=fmt.timeout_seconds,
    )


def __getattr__(name: str) -> Any:
    """Lazy-load formatter classes on first access."""
    if name == "RustfmtFormatter":
        from syncdoc.formatter.rustfmt import RustfmtFormatter

        return RustfmtFormatter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "MergeError",
    "FormatterFailed",
    "EncodingError",
    "get_formatter",
    "RustfmtFormatter",
]
