# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for dashboard aggregation.
"""

import pytest

from domain.rankings import (
    compute_stats, ward_score, rank_wards, contractor_performance,
    sort_issues, filter_issues, haversine_km, issues_near
)
from models.requests import IssueFilters

NOW = 10_000


@pytest.fixture
def issues(make_issue):
    """Mixed set of issues across both wards."""
    return [
        make_issue(status="open", deadline=5_000, submitted_at=100, zone_id="ward_001",
                   contractor_id="cont_road_01", severity="critical", user_id="u1"),
        make_issue(status="resolved", deadline=5_000, submitted_at=200, zone_id="ward_001",
                   contractor_id="cont_road_01", user_id="u2"),
        make_issue(status="acknowledged", deadline=50_000, submitted_at=300, zone_id="ward_002",
                   contractor_id="cont_water_02", category="water_leak", user_id="u1"),
        make_issue(status="resolved", deadline=50_000, submitted_at=400, zone_id="ward_002",
                   contractor_id="cont_water_02", category="water_leak", severity="low", user_id="u3"),
    ]


class TestComputeStats:
    """Test aggregate counters."""

    def test_counts(self, issues):
        """Test aggregate counters over mixed issues."""
        stats = compute_stats(issues, NOW)

        assert stats.total_issues == 4
        assert stats.critical_issues == 1
        assert stats.resolved_issues == 2
        assert stats.overdue_issues == 1
        assert stats.active_users == 3
        assert stats.issues_by_category["road_damage"] == 2
        assert stats.issues_by_category["water_leak"] == 2
        assert stats.issues_by_category["garbage"] == 0
        assert stats.issues_by_status == {"open": 1, "acknowledged": 1, "resolved": 2}

    def test_empty(self):
        """Test stats over no issues are zero."""
        stats = compute_stats([], NOW)

        assert stats.total_issues == 0
        assert stats.overdue_issues == 0

    def test_overdue_depends_on_now(self, issues):
        """Test overdue depends on now."""
        assert compute_stats(issues, 1_000).overdue_issues == 0
        assert compute_stats(issues, 60_000).overdue_issues == 2


class TestWardScore:
    """Test score arithmetic."""

    @pytest.mark.parametrize("total,resolved,overdue,expected", [
        (0, 0, 0, 0),
        (4, 4, 0, 100),
        (4, 2, 0, 50),
        (2, 1, 1, 25),
        (2, 0, 2, 0),
    ])
    def test_score(self, total, resolved, overdue, expected):
        """Test ward score arithmetic."""
        assert ward_score(total, resolved, overdue) == expected


class TestRankWards:
    """Test ward rankings."""

    def test_ranking_order(self, issues):
        """Test ranking order."""
        rankings = rank_wards(issues, {"ward_001": "Downtown Central", "ward_002": "Suburban North"}, NOW)

        assert [r.zone_id for r in rankings] == ["ward_002", "ward_001"]
        north, downtown = rankings
        assert north.score == 50
        assert north.resolution_rate == 0.5
        assert downtown.overdue == 1
        assert downtown.score == 25

    def test_wards_without_issues_listed(self):
        """Test wards without issues listed."""
        rankings = rank_wards([], {"ward_001": "Downtown Central"}, NOW)

        assert len(rankings) == 1
        assert rankings[0].total == 0
        assert rankings[0].score == 0

    def test_unknown_zone_named(self, make_issue):
        """Test unknown zone named."""
        rankings = rank_wards([make_issue(zone_id="ward_777")], {}, NOW)
        assert rankings[0].name == "Unknown Ward"


class TestContractorPerformance:
    """Test contractor accountability."""

    def test_sorted_by_overdue(self, issues):
        """Test sorted by overdue."""
        entries = contractor_performance(
            issues, {"cont_road_01": "Metro Paving Co.", "cont_gen_01": "CityCare Services"}, NOW
        )

        assert entries[0].contractor_id == "cont_road_01"
        assert entries[0].assigned == 2
        assert entries[0].overdue == 1
        assert entries[0].name == "Metro Paving Co."
        by_id = {entry.contractor_id: entry for entry in entries}
        assert by_id["cont_gen_01"].assigned == 0
        assert by_id["cont_water_02"].name == "Unknown Contractor"


class TestFilterIssues:
    """Test in-memory filtering."""

    def test_sorted_newest_first(self, issues):
        """Test sorted newest first."""
        assert [i.submitted_at for i in sort_issues(issues)] == [400, 300, 200, 100]

    def test_filters(self, issues):
        """Test field filters narrow the result."""
        assert len(filter_issues(issues, IssueFilters(zone_id="ward_002"))) == 2
        assert len(filter_issues(issues, IssueFilters(status="resolved"))) == 2
        assert len(filter_issues(issues, IssueFilters(category="water_leak", severity="low"))) == 1

    def test_overdue_only(self, issues):
        """Test overdue only."""
        overdue = filter_issues(issues, IssueFilters(overdue_only=True), now=NOW)
        assert [i.submitted_at for i in overdue] == [100]

    def test_overdue_only_requires_now(self, issues):
        """Test overdue only requires now."""
        with pytest.raises(ValueError):
            filter_issues(issues, IssueFilters(overdue_only=True))

    def test_offset_then_limit(self, issues):
        """Test offset then limit."""
        page = filter_issues(issues, IssueFilters(offset=1, limit=2))
        assert [i.submitted_at for i in page] == [300, 200]


class TestProximity:
    """Test distance helpers."""

    def test_one_degree_of_latitude(self):
        """Test one degree of latitude."""
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)

    def test_same_point(self):
        """Test same point."""
        assert haversine_km(12.0, 77.0, 12.0, 77.0) == 0.0

    def test_issues_near(self, make_issue):
        """Test issues near."""
        close = make_issue(latitude=0.01, longitude=0.0)
        far = make_issue(latitude=1.0, longitude=0.0)

        assert issues_near([far, close], 0.0, 0.0, 5.0) == [close]
        assert issues_near([far, close], 0.0, 0.0, 200.0) == [close, far]
