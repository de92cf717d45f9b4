# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Read-side view models for display collaborators.
"""

from typing import List, Optional, Dict
from pydantic import BaseModel, Field
from .entities import Issue


class IssueResponse(BaseModel):
    """Issue with display lookups and SLA state computed at read time."""

    issue: Issue = Field(..., description="Stored issue record")
    category_label: str = Field(..., description="Human-readable category")
    zone_name: Optional[str] = Field(None, description="Zone display name")
    contractor_name: Optional[str] = Field(None, description="Contractor display name")
    is_overdue: bool = Field(..., description="Overdue at evaluation time")
    acknowledgement_overdue: bool = Field(..., description="Not acknowledged within the window")
    sla_state: str = Field(..., description="unrouted, on_track, overdue or resolved")
    time_remaining_ms: Optional[int] = Field(None, description="Deadline minus evaluation time")
    allowed_transitions: List[str] = Field(default_factory=list, description="Statuses reachable next")
    evaluated_at: int = Field(..., description="Evaluation time in epoch milliseconds")


class IssueStats(BaseModel):
    """Aggregate counters for the dashboard."""

    total_issues: int = Field(default=0, description="All issues")
    critical_issues: int = Field(default=0, description="Critical severity issues")
    resolved_issues: int = Field(default=0, description="Resolved issues")
    overdue_issues: int = Field(default=0, description="Overdue at evaluation time")
    active_users: int = Field(default=0, description="Distinct reporters")
    issues_by_category: Dict[str, int] = Field(default_factory=dict, description="Counts per category")
    issues_by_severity: Dict[str, int] = Field(default_factory=dict, description="Counts per severity")
    issues_by_status: Dict[str, int] = Field(default_factory=dict, description="Counts per status")


class WardRanking(BaseModel):
    """Ward accountability ranking entry."""

    zone_id: str = Field(..., description="Zone identifier")
    name: str = Field(..., description="Zone display name")
    total: int = Field(default=0, description="Issues routed to the ward")
    resolved: int = Field(default=0, description="Resolved issues")
    overdue: int = Field(default=0, description="Overdue issues")
    resolution_rate: float = Field(default=0.0, description="Resolved share, 0-1")
    score: int = Field(default=0, ge=0, le=100, description="Ranking score")


class ContractorPerformance(BaseModel):
    """Contractor accountability entry."""

    contractor_id: str = Field(..., description="Contractor identifier")
    name: str = Field(..., description="Contractor display name")
    assigned: int = Field(default=0, description="Issues assigned")
    resolved: int = Field(default=0, description="Resolved issues")
    overdue: int = Field(default=0, description="Overdue issues")
    resolution_rate: float = Field(default=0.0, description="Resolved share, 0-1")


class DashboardResponse(BaseModel):
    """Stats, rankings and contractor performance evaluated at one instant."""

    stats: IssueStats = Field(..., description="Aggregate counters")
    ward_rankings: List[WardRanking] = Field(default_factory=list, description="Wards by score")
    contractors: List[ContractorPerformance] = Field(default_factory=list, description="Contractors by overdue count")
    evaluated_at: int = Field(..., description="Evaluation time in epoch milliseconds")
