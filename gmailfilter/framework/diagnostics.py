"""Diagnostics returned from every lifecycle operation.

Operations append diagnostics rather than raising, so that every field
conversion is attempted and the operator sees all problems in one pass.
"""

from dataclasses import dataclass
from typing import Optional

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    summary: str
    detail: str = ""
    attribute: Optional[str] = None

    def __str__(self) -> str:
        where = f" [{self.attribute}]" if self.attribute else ""
        text = f"{self.severity.capitalize()}: {self.summary}{where}"
        if self.detail:
            text += f"\n  {self.detail}"
        return text


class Diagnostics(list):
    """An ordered collection of Diagnostic entries."""

    def add_error(self, summary: str, detail: str = "", attribute: Optional[str] = None):
        self.append(Diagnostic(ERROR, summary, detail, attribute))

    def add_warning(self, summary: str, detail: str = "", attribute: Optional[str] = None):
        self.append(Diagnostic(WARNING, summary, detail, attribute))

    def has_error(self) -> bool:
        return any(d.severity == ERROR for d in self)

    def errors(self) -> list:
        return [d for d in self if d.severity == ERROR]

    def warnings(self) -> list:
        return [d for d in self if d.severity == WARNING]
