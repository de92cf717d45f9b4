# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Read-side aggregation for the feed, map and ranking dashboards.

This module contains pure functions over issue snapshots. Every function
that depends on overdue state takes the evaluation time explicitly.
"""

from collections import Counter
from math import radians, cos, sin, asin, sqrt
from typing import Dict, Iterable, List, Optional
from models.entities import Issue
from models.enums import IssueCategory, IssueSeverity, IssueStatus
from models.requests import IssueFilters
from models.responses import ContractorPerformance, IssueStats, WardRanking
from .sla import is_overdue

EARTH_RADIUS_KM = 6371.0

# Share of the score taken away for an all-overdue backlog
OVERDUE_PENALTY = 50


def compute_stats(issues: Iterable[Issue], now: int) -> IssueStats:
    """
    Aggregate dashboard counters.

    Args:
        issues: Issue snapshots
        now: Evaluation time in epoch milliseconds

    Returns:
        IssueStats with totals and per-category/severity/status counts
    """
    issues = list(issues)

    by_category = {category.value: 0 for category in IssueCategory}
    by_severity = {severity.value: 0 for severity in IssueSeverity}
    by_status = {status.value: 0 for status in IssueStatus}

    for issue in issues:
        if issue.category is not None:
            by_category[issue.category] = by_category.get(issue.category, 0) + 1
        by_severity[issue.severity] = by_severity.get(issue.severity, 0) + 1
        if issue.status is not None:
            by_status[issue.status] = by_status.get(issue.status, 0) + 1

    return IssueStats(
        total_issues=len(issues),
        critical_issues=by_severity[IssueSeverity.CRITICAL.value],
        resolved_issues=by_status[IssueStatus.RESOLVED.value],
        overdue_issues=sum(1 for issue in issues if is_overdue(issue, now)),
        active_users=len({issue.user_id for issue in issues}),
        issues_by_category=by_category,
        issues_by_severity=by_severity,
        issues_by_status=by_status
    )


def ward_score(total: int, resolved: int, overdue: int) -> int:
    """Ranking score 0-100: resolution rate minus an overdue penalty."""
    if total == 0:
        return 0
    raw = 100 * resolved / total - OVERDUE_PENALTY * overdue / total
    return max(0, min(100, round(raw)))


def rank_wards(issues: Iterable[Issue], zone_names: Dict[str, str], now: int) -> List[WardRanking]:
    """
    Rank wards by accountability score.

    Args:
        issues: Issue snapshots
        zone_names: Zone id to display name for every configured ward
        now: Evaluation time in epoch milliseconds

    Returns:
        WardRanking entries sorted by score descending, then name
    """
    totals = Counter()
    resolved = Counter()
    overdue = Counter()

    for issue in issues:
        if issue.zone_id is None:
            continue
        totals[issue.zone_id] += 1
        if issue.is_resolved():
            resolved[issue.zone_id] += 1
        if is_overdue(issue, now):
            overdue[issue.zone_id] += 1

    rankings = []
    for zone_id in set(zone_names) | set(totals):
        total = totals[zone_id]
        rankings.append(WardRanking(
            zone_id=zone_id,
            name=zone_names.get(zone_id, "Unknown Ward"),
            total=total,
            resolved=resolved[zone_id],
            overdue=overdue[zone_id],
            resolution_rate=resolved[zone_id] / total if total else 0.0,
            score=ward_score(total, resolved[zone_id], overdue[zone_id])
        ))

    return sorted(rankings, key=lambda r: (-r.score, r.name, r.zone_id))


def contractor_performance(
    issues: Iterable[Issue],
    contractor_names: Dict[str, str],
    now: int
) -> List[ContractorPerformance]:
    """
    Per-contractor assignment, resolution and overdue counts.

    Returns:
        Entries sorted by overdue count descending, then lowest resolution rate
    """
    assigned = Counter()
    resolved = Counter()
    overdue = Counter()

    for issue in issues:
        if issue.contractor_id is None:
            continue
        assigned[issue.contractor_id] += 1
        if issue.is_resolved():
            resolved[issue.contractor_id] += 1
        if is_overdue(issue, now):
            overdue[issue.contractor_id] += 1

    entries = []
    for contractor_id in set(contractor_names) | set(assigned):
        count = assigned[contractor_id]
        entries.append(ContractorPerformance(
            contractor_id=contractor_id,
            name=contractor_names.get(contractor_id, "Unknown Contractor"),
            assigned=count,
            resolved=resolved[contractor_id],
            overdue=overdue[contractor_id],
            resolution_rate=resolved[contractor_id] / count if count else 0.0
        ))

    return sorted(entries, key=lambda e: (-e.overdue, e.resolution_rate, e.contractor_id))


def sort_issues(issues: Iterable[Issue]) -> List[Issue]:
    """Newest submissions first."""
    return sorted(issues, key=lambda issue: issue.submitted_at, reverse=True)


def filter_issues(issues: Iterable[Issue], filters: IssueFilters, now: Optional[int] = None) -> List[Issue]:
    """
    Filter issues the same way the storage query does.

    Args:
        issues: Issue snapshots
        filters: Filter criteria
        now: Evaluation time, required when filters.overdue_only is set

    Returns:
        Matching issues, newest first, after offset and limit
    """
    filtered = list(issues)

    if filters.category is not None:
        filtered = [i for i in filtered if i.category == filters.category]

    if filters.severity is not None:
        filtered = [i for i in filtered if i.severity == filters.severity]

    if filters.status is not None:
        filtered = [i for i in filtered if i.status == filters.status]

    if filters.zone_id:
        filtered = [i for i in filtered if i.zone_id == filters.zone_id]

    if filters.overdue_only:
        if now is None:
            raise ValueError("now is required to filter overdue issues")
        filtered = [i for i in filtered if is_overdue(i, now)]

    filtered = sort_issues(filtered)[filters.offset:]

    if filters.limit is not None:
        filtered = filtered[:filters.limit]

    return filtered


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * asin(sqrt(a))


def issues_near(issues: Iterable[Issue], latitude: float, longitude: float, radius_km: float) -> List[Issue]:
    """Issues with coordinates within radius_km of a point, nearest first."""
    located = [
        (haversine_km(latitude, longitude, issue.latitude, issue.longitude), issue)
        for issue in issues
        if issue.latitude is not None and issue.longitude is not None
    ]
    return [issue for distance, issue in sorted(located, key=lambda pair: pair[0]) if distance <= radius_km]
