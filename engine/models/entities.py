# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the civic issue engine.
"""

from typing import Optional, Tuple
from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from .base import BaseEntity, generate_object_id, generate_share_token
from .enums import IssueStatus, IssueCategory, IssueSeverity


class TimelineEvent(BaseEntity):
    """Immutable record of a status change."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=to_camel,
        frozen=True
    )

    id: str = Field(default_factory=generate_object_id, description="Event identifier")
    status: IssueStatus = Field(..., description="Resulting status")
    timestamp: int = Field(..., ge=0, description="Event time in epoch milliseconds")
    description: str = Field(..., description="Human-readable description")
    updated_by: str = Field(..., min_length=1, description="Actor identifier or 'system'")


class Issue(BaseEntity):
    """A citizen-reported infrastructure issue."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
        alias_generator=to_camel
    )

    id: Optional[str] = Field(None, description="Identifier assigned by storage")
    share_token: str = Field(default_factory=generate_share_token, description="Public lookup token")
    title: str = Field(..., min_length=1, max_length=200, description="Issue title")
    description: str = Field(default="", max_length=4000, description="Issue description")
    category: Optional[IssueCategory] = Field(None, description="Issue category, unset for incomplete reports")
    custom_category: Optional[str] = Field(None, max_length=120, description="Free-text category for 'other'")
    severity: IssueSeverity = Field(default=IssueSeverity.MEDIUM, description="Reported severity")
    image_ref: str = Field(default="", description="Uploaded image reference")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude")
    address: str = Field(default="", description="Free-text address")
    submitted_at: int = Field(..., ge=0, description="Submission time in epoch milliseconds")
    user_id: str = Field(..., min_length=1, description="Reporting user identifier")
    ai_confidence: Optional[float] = Field(None, ge=0, le=1, description="Image classifier confidence")
    view_count: int = Field(default=0, ge=0, description="Public view counter")
    status: Optional[IssueStatus] = Field(None, description="Lifecycle status, unset until enriched")
    zone_id: Optional[str] = Field(None, description="Administrative zone (ward)")
    department: Optional[str] = Field(None, description="Accountable department")
    contractor_id: Optional[str] = Field(None, description="Accountable contractor")
    deadline: Optional[int] = Field(None, ge=0, description="SLA deadline in epoch milliseconds")
    timeline: Tuple[TimelineEvent, ...] = Field(default_factory=tuple, description="Append-only status history")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate issue title."""
        if not v.strip():
            raise ValueError('Issue title cannot be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_routing(self):
        """Zone, department, contractor and deadline are set together or not at all."""
        routing = (self.zone_id, self.department, self.contractor_id, self.deadline)
        present = [value is not None for value in routing]
        if any(present) and not all(present):
            raise ValueError('zone_id, department, contractor_id and deadline must be set together')
        return self

    @model_validator(mode='after')
    def validate_timeline(self):
        """Validate timeline ordering and its relation to status."""
        if self.status is not None and not self.timeline:
            raise ValueError('Timeline cannot be empty once status is set')

        if self.timeline:
            if self.timeline[0].status != IssueStatus.OPEN:
                raise ValueError('First timeline entry must have status open')
            for previous, current in zip(self.timeline, self.timeline[1:]):
                if current.timestamp < previous.timestamp:
                    raise ValueError('Timeline timestamps must be non-decreasing')

        return self

    def is_routed(self) -> bool:
        """Check if enrichment assigned zone and responsibility."""
        return self.zone_id is not None

    def is_resolved(self) -> bool:
        """Check if issue is resolved."""
        return self.status == IssueStatus.RESOLVED

    def last_event(self) -> Optional[TimelineEvent]:
        """Most recent timeline event, if any."""
        return self.timeline[-1] if self.timeline else None
