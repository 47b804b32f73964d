"""
Schemas for the explanation feature.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from explainer.errors import ValidationError


@dataclass(frozen=True)
class ExplanationRequest:
    """A concept to explain. Always stored trimmed and non-empty."""
    concept: str

    @classmethod
    def from_raw(cls, concept: str | None) -> "ExplanationRequest":
        """Trim the concept; raise ValidationError if nothing is left."""
        text = (concept or "").strip()
        if not text:
            raise ValidationError("Empty concept")
        return cls(concept=text)


@dataclass(frozen=True)
class Success:
    """Explanation text returned by the model (or the fallback string)."""
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Short, user-facing reason. Never the raw exception text."""
    reason: str

    @property
    def ok(self) -> bool:
        return False


ExplanationResult = Union[Success, Failure]
