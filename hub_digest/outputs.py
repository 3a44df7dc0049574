import json
import logging
import sys
import uuid
from pathlib import Path
from typing import IO, Any, Protocol

from .search import Found

log = logging.getLogger(__name__)


class Reporter(Protocol):
    def report_found(self, found: Found) -> None: ...

    def report_failure(self, message: str) -> None: ...


def format_output(name: str, value: Any) -> str:
    """Render one ``name=value`` entry of a GitHub Actions outputs file.

    Missing values are written empty, other non-string values as compact JSON.
    Multi-line values use the ``name<<DELIMITER`` form.
    """
    if value is None:
        value = ""
    elif not isinstance(value, str):
        value = json.dumps(value, separators=(",", ":"))

    if "\n" not in value:
        return f"{name}={value}\n"

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class GithubOutputReporter:
    def __init__(self, path: Path, stream: IO[str] | None = None):
        self.path = path
        self.stream = stream or sys.stdout

    def report_found(self, found: Found) -> None:
        with self.path.open("a", encoding="utf-8") as fp:
            for name, value in found.outputs().items():
                fp.write(format_output(name, value))
        log.info("Outputs written to %s", self.path)

    def report_failure(self, message: str) -> None:
        # Workflow commands are read from stdout
        print(f"::error::{message}", file=self.stream)


class StdoutReporter:
    def __init__(self, stream: IO[str] | None = None, error_stream: IO[str] | None = None):
        self.stream = stream or sys.stdout
        self.error_stream = error_stream or sys.stderr

    def report_found(self, found: Found) -> None:
        print(json.dumps(found.outputs(), indent=2), file=self.stream)

    def report_failure(self, message: str) -> None:
        print(f"::error::{message}", file=self.error_stream)
