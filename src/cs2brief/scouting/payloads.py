"""
Typed schema for raw Tracker.gg payloads.

Every field has a default, and explicit nulls are dropped before
validation, so a missing or null sub-object resolves to defaults here, once,
instead of being guarded against throughout the analysis code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TrackerStat(_Payload):
    """A single stat entry: ``{"value": 1.2, "displayValue": "1.20", ...}``."""

    value: float = 0.0
    display_value: str = Field(default="", alias="displayValue")
    percentile: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)


class StatBlock(_Payload):
    """Mapping of stat name to TrackerStat with zero-default lookups."""

    stats: dict[str, TrackerStat] = Field(default_factory=dict)

    @field_validator("stats", mode="before")
    @classmethod
    def _drop_null_stats(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def value(self, name: str) -> float:
        stat = self.stats.get(name)
        return stat.value if stat is not None else 0.0

    def stat(self, name: str) -> TrackerStat:
        return self.stats.get(name) or TrackerStat()


class PlatformInfo(_Payload):
    platform_slug: str = Field(default="steam", alias="platformSlug")
    platform_user_id: str = Field(default="", alias="platformUserId")
    platform_user_handle: str = Field(default="Unknown", alias="platformUserHandle")
    avatar_url: str = Field(default="", alias="avatarUrl")


class SegmentMetadata(_Payload):
    name: str = ""


class ProfileSegment(StatBlock):
    type: str = ""
    metadata: SegmentMetadata = Field(default_factory=SegmentMetadata)


class ProfilePayload(_Payload):
    """The ``data`` object of a profile response."""

    platform_info: PlatformInfo = Field(default_factory=PlatformInfo, alias="platformInfo")
    segments: list[ProfileSegment] = Field(default_factory=list)

    @property
    def overview(self) -> ProfileSegment:
        for segment in self.segments:
            if segment.type == "overview":
                return segment
        return ProfileSegment(type="overview")

    def segments_of(self, segment_type: str) -> list[ProfileSegment]:
        return [s for s in self.segments if s.type == segment_type]


class MatchAttributes(_Payload):
    id: str = ""


class MatchMetadata(_Payload):
    map_name: str = Field(default="", alias="mapName")
    result: str = ""
    score: str = ""
    timestamp: datetime | None = None


class MatchSegment(StatBlock):
    """One element of the recent-matches response."""

    attributes: MatchAttributes = Field(default_factory=MatchAttributes)
    metadata: MatchMetadata = Field(default_factory=MatchMetadata)
