# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the civic issue engine.
"""

from enum import Enum


class IssueStatus(str, Enum):
    """Issue lifecycle status. Overdue is derived, never stored."""
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class IssueCategory(str, Enum):
    """Fixed issue category enumeration."""
    ROAD_DAMAGE = "road_damage"
    GARBAGE = "garbage"
    WATER_LEAK = "water_leak"
    BROKEN_INFRA = "broken_infra"
    OTHER = "other"


class IssueSeverity(str, Enum):
    """Reporter-assessed severity."""
    LOW = "low"
    MEDIUM = "medium"
    CRITICAL = "critical"


class SLAState(str, Enum):
    """Display-level SLA condition computed at read time."""
    UNROUTED = "unrouted"
    ON_TRACK = "on_track"
    OVERDUE = "overdue"
    RESOLVED = "resolved"


CATEGORY_LABELS = {
    IssueCategory.ROAD_DAMAGE: "Road Damage",
    IssueCategory.GARBAGE: "Garbage",
    IssueCategory.WATER_LEAK: "Water Leak",
    IssueCategory.BROKEN_INFRA: "Broken Infrastructure",
    IssueCategory.OTHER: "Other",
}


def category_label(category: str) -> str:
    """Human-readable category name, falling back to the raw value."""
    try:
        return CATEGORY_LABELS[IssueCategory(category)]
    except ValueError:
        return category
