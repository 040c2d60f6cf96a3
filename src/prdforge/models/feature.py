"""Feature models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class TemplateId(str, Enum):
    """PRD methodology templates understood by the generation service."""

    AGILE = "agile"
    WATERFALL = "waterfall"
    LEAN = "lean"
    DEFAULT = "default"


class Feature(BaseModel):
    """A user-described product feature."""

    id: int
    name: str = ""
    description: str = ""

    def is_blank(self) -> bool:
        return not self.name.strip()
