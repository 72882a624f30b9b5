"""rustfmt driven as a stdin → stdout filter."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from syncdoc.formatter import EncodingError, FormatterFailed

logger = logging.getLogger(__name__)


class RustfmtFormatter:
    """Format Rust source text by piping it through ``rustfmt``.

    Every call starts its own short-lived process, so one instance can be
    shared across threads.

    Args:
        command: Executable name or path.
        args: Extra arguments placed before ``--edition``.
        edition: Rust edition passed as ``--edition``; empty to omit.
        timeout_seconds: Per-call wall clock limit.
    """

    def __init__(
        self,
        command: str = "rustfmt",
        args: Sequence[str] = ("--emit=stdout",),
        edition: str = "2021",
        timeout_seconds: float = 30.0,
    ) -> None:
        self._command = command
        self._args = tuple(args)
        self._edition = edition
        self._timeout = timeout_seconds

    def command_line(self) -> list[str]:
        cmd = [self._command, *self._args]
        if self._edition:
            cmd.extend(["--edition", self._edition])
        return cmd

    def format(self, text: str) -> str:
        """Return the canonical formatting of ``text``.

        Raises:
            FormatterFailed: If the executable is missing, times out, or
                exits non-zero.
            EncodingError: If the formatter output is not UTF-8.
        """
        cmd = self.command_line()
        try:
            result = subprocess.run(
                cmd,
                input=text.encode("utf-8"),
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise FormatterFailed(f"Formatter not found: {self._command}") from exc
        except subprocess.TimeoutExpired as exc:
            raise FormatterFailed(
                f"Formatter timed out after {self._timeout}s: {self._command}"
            ) from exc

        stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
        if result.returncode != 0:
            logger.debug("%s exited with %d: %s", self._command, result.returncode, stderr)
            raise FormatterFailed(
                f"{self._command} exited with status {result.returncode}",
                returncode=result.returncode,
                stderr=stderr,
            )

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncodingError(f"{self._command} produced non-UTF-8 output: {exc}") from exc
