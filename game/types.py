"""Common dataclasses shared by the session and its callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class StepResult:
    """Container for the result of a session step."""

    state: Dict[str, Any]
    done: bool
    info: Dict[str, Any]


__all__ = ["StepResult"]
