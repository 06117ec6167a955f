from dataclasses import dataclass
from typing import Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class Finding:
    """What a rule reports. The engine turns it into a Diagnostic."""

    line: int
    message: str


@dataclass(frozen=True)
class Diagnostic:
    rule: str
    severity: Severity
    message: str
    line: int
    lesson: str

    def format(self) -> str:
        return f"{self.lesson}:{self.line}: {self.severity} [{self.rule}] {self.message}"


def sort_key(diagnostic: Diagnostic) -> tuple[str, int, str]:
    return (diagnostic.lesson, diagnostic.line, diagnostic.rule)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)
