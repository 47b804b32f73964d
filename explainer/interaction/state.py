"""
Dashboard interaction state.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Phase(str, Enum):
    """Idle: nothing in flight. Loading: a request has been dispatched."""
    IDLE = "idle"
    LOADING = "loading"


@dataclass
class InteractionState:
    """
    Everything the dashboard renders. Created empty at mount.
    explanation and error are never both non-empty; loading is only True
    between dispatch and result arrival.
    """
    query: str = ""
    explanation: str = ""
    loading: bool = False
    error: str = ""
    is_speaking: bool = False

    @property
    def phase(self) -> Phase:
        return Phase.LOADING if self.loading else Phase.IDLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "explanation": self.explanation,
            "loading": self.loading,
            "error": self.error,
            "is_speaking": self.is_speaking,
        }
