# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """
    Structured, client-safe error entry.

    :param code: Stable machine-readable identifier (snake_case).
    :type code: str
    :param description: Human-readable explanation.
    :type description: str
    """

    code: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "description": self.description}
