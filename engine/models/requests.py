# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for issue intake, status updates and queries.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .enums import IssueStatus, IssueSeverity, IssueCategory


class IssueSubmission(BaseModel):
    """
    Raw report fields from the reporting client.

    Coordinates and category are optional here: enrichment decides what to do
    with incomplete submissions instead of the model rejecting them.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True
    )

    title: str = Field(..., min_length=1, max_length=200, description="Issue title")
    description: str = Field(default="", max_length=4000, description="Issue description")
    category: Optional[str] = Field(None, description="Category identifier")
    custom_category: Optional[str] = Field(None, max_length=120, description="Free-text category")
    severity: IssueSeverity = Field(default=IssueSeverity.MEDIUM, description="Reported severity")
    image_ref: str = Field(default="", alias="imageRef", description="Uploaded image reference")
    latitude: Optional[float] = Field(None, description="Latitude")
    longitude: Optional[float] = Field(None, description="Longitude")
    address: str = Field(default="", description="Free-text address")
    user_id: str = Field(..., min_length=1, alias="userId", description="Reporting user identifier")
    timestamp: Optional[int] = Field(None, ge=0, description="Submission time in epoch milliseconds")
    ai_confidence: Optional[float] = Field(None, ge=0, le=1, alias="aiConfidence", description="Classifier confidence")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate issue title."""
        if not v.strip():
            raise ValueError('Issue title cannot be empty')
        return v.strip()

    @field_validator('category')
    @classmethod
    def normalize_category(cls, v):
        """Normalize blank categories to missing."""
        if v is None or not v.strip():
            return None
        return v.strip().lower()

    def has_known_category(self) -> bool:
        """Check if category is one of the fixed enumeration values."""
        return self.category in {category.value for category in IssueCategory}


class StatusUpdateRequest(BaseModel):
    """Request to move an issue to a new status."""

    model_config = ConfigDict(use_enum_values=True)

    status: IssueStatus = Field(..., description="Target status")
    description: str = Field(..., min_length=1, max_length=1000, description="Timeline note")
    updated_by: str = Field(..., min_length=1, description="Actor identifier")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        """Validate timeline note."""
        if not v.strip():
            raise ValueError('Status update description cannot be empty')
        return v.strip()


class IssueFilters(BaseModel):
    """Filters for issue queries, sorted by submission time descending."""

    model_config = ConfigDict(use_enum_values=True)

    category: Optional[IssueCategory] = Field(None, description="Category filter")
    severity: Optional[IssueSeverity] = Field(None, description="Severity filter")
    status: Optional[IssueStatus] = Field(None, description="Status filter")
    zone_id: Optional[str] = Field(None, description="Zone filter")
    overdue_only: bool = Field(default=False, description="Only overdue issues")
    limit: Optional[int] = Field(None, ge=1, le=1000, description="Result count cap")
    offset: int = Field(default=0, ge=0, description="Results to skip")
