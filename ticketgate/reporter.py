"""Publish the gate result to the CI host.

The boolean ``validation`` step output is written exactly once per run,
before any error is surfaced, so pipelines can branch on it without
parsing error text. On GitHub Actions the output goes to the file named
by GITHUB_OUTPUT and the failure reason is emitted as an ``::error::``
workflow command; elsewhere both go to the given stream.
"""

import logging
import sys
from pathlib import Path
from typing import TextIO

from ticketgate.models import ValidationOutcome

OUTPUT_NAME = "validation"


def escape_workflow_data(text: str) -> str:
    """Escape a value for a GitHub workflow command (newlines survive as %0A)."""
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class OutcomeReporter:
    """Writes the validation flag and the terminating error."""

    def __init__(
        self,
        output_path: Path | None = None,
        stream: TextIO | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._output_path = output_path
        self._stream = stream or sys.stdout
        self._log = log or logging.getLogger("ticketgate.reporter")
        self._written = False

    def report(self, outcome: ValidationOutcome) -> int:
        """Record the outcome; return the process exit code (0 pass, 1 fail)."""
        if outcome.passed:
            return self._finish(True, None)
        return self._finish(False, outcome.failure_reason or "Validation failed.")

    def report_error(self, error: BaseException) -> int:
        """Record a run that could not reach an outcome; return exit code 1."""
        return self._finish(False, str(error) or type(error).__name__)

    def _finish(self, passed: bool, reason: str | None) -> int:
        if self._written:
            raise RuntimeError("validation output already reported")
        self._written = True
        self._set_output(OUTPUT_NAME, "true" if passed else "false")
        if passed:
            self._log.info("Validation passed")
            return 0
        self._log.error("Validation failed: %s", reason)
        self._stream.write(f"::error::{escape_workflow_data(reason or '')}\n")
        self._stream.flush()
        return 1

    def _set_output(self, name: str, value: str) -> None:
        line = f"{name}={value}\n"
        if self._output_path is not None:
            with self._output_path.open("a", encoding="utf-8") as f:
                f.write(line)
        else:
            self._stream.write(line)
