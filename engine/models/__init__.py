# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the civic issue engine.
"""

# Base models and time helpers
from .base import (
    BaseEntity,
    ReferenceEntity,
    MILLISECONDS_PER_HOUR,
    generate_object_id,
    generate_share_token,
    current_time_ms,
    to_datetime,
    from_datetime
)

# Enumerations
from .enums import (
    IssueStatus,
    IssueCategory,
    IssueSeverity,
    SLAState,
    category_label
)

# Core entities
from .entities import Issue, TimelineEvent

# Reference data
from .reference import (
    Responsibility,
    ZoneBoundary,
    Zone,
    Contractor,
    SLAConfig,
    ReferenceData,
    default_reference_data
)

# Request models
from .requests import IssueSubmission, StatusUpdateRequest, IssueFilters

# Response models
from .responses import (
    IssueResponse,
    IssueStats,
    WardRanking,
    ContractorPerformance,
    DashboardResponse
)

__all__ = [
    # Base models
    "BaseEntity",
    "ReferenceEntity",
    "MILLISECONDS_PER_HOUR",
    "generate_object_id",
    "generate_share_token",
    "current_time_ms",
    "to_datetime",
    "from_datetime",

    # Enumerations
    "IssueStatus",
    "IssueCategory",
    "IssueSeverity",
    "SLAState",
    "category_label",

    # Core entities
    "Issue",
    "TimelineEvent",

    # Reference data
    "Responsibility",
    "ZoneBoundary",
    "Zone",
    "Contractor",
    "SLAConfig",
    "ReferenceData",
    "default_reference_data",

    # Request models
    "IssueSubmission",
    "StatusUpdateRequest",
    "IssueFilters",

    # Response models
    "IssueResponse",
    "IssueStats",
    "WardRanking",
    "ContractorPerformance",
    "DashboardResponse"
]
