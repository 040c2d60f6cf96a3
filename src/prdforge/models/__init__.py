"""Pydantic models used across the project."""

from __future__ import annotations

from prdforge.models.feature import Feature, TemplateId
from prdforge.models.version import FeatureSnapshot, Version, VersionSummary

__all__ = [
    "Feature",
    "FeatureSnapshot",
    "TemplateId",
    "Version",
    "VersionSummary",
]
