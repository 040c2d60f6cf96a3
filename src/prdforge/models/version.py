"""Version models.

A version is an immutable snapshot of a draft plus the features that produced it. The
serialized form is the record schema of the persisted version log.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from prdforge.models.feature import Feature


class FeatureSnapshot(BaseModel):
    """A feature as it was when a version was recorded."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str

    @classmethod
    def of(cls, feature: Feature) -> FeatureSnapshot:
        return cls(id=feature.id, name=feature.name, description=feature.description)

    def to_feature(self) -> Feature:
        """Editable copy for the working feature list."""

        return Feature(id=self.id, name=self.name, description=self.description)


class Version(BaseModel):
    """An immutable, timestamped draft snapshot."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: str
    content: str
    features: tuple[FeatureSnapshot, ...]

    def summary(self) -> VersionSummary:
        return VersionSummary(id=self.id, timestamp=self.timestamp)


class VersionSummary(BaseModel):
    """Read-only projection used for browsing history."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: str
