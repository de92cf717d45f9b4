# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from unittest.mock import MagicMock
from bson import ObjectId

from domain.enrichment import EnrichmentPipeline
from domain.lifecycle import IssueLifecycle
from models.entities import Issue
from models.reference import default_reference_data
from models.requests import IssueSubmission
from services.mongodb import MongoDBService

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['MONGODB_DATABASE'] = 'civic_issues_test'

HOUR_MS = 3_600_000


class FixedClock:
    """Controllable clock returning epoch milliseconds."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += milliseconds


@pytest.fixture
def clock():
    """Clock frozen at t=0."""
    return FixedClock(0)


@pytest.fixture
def reference_data():
    """Built-in reference tables."""
    return default_reference_data()


@pytest.fixture
def pipeline(reference_data, clock):
    """Strict enrichment pipeline on the fixed clock."""
    return EnrichmentPipeline.from_reference_data(reference_data, strict_transitions=True, clock=clock)


@pytest.fixture
def lifecycle(clock):
    """Strict lifecycle on the fixed clock."""
    return IssueLifecycle(strict=True, clock=clock)


@pytest.fixture
def sample_submission_data():
    """Sample submission payload as sent by the reporting client."""
    return {
        "title": "Burst pipe on Main Street",
        "description": "Water flowing across the road since morning",
        "category": "water_leak",
        "severity": "critical",
        "imageRef": "uploads/pipe.jpg",
        "latitude": -5.0,
        "longitude": 40.0,
        "address": "12 Main Street",
        "userId": "user_123",
        "timestamp": 0,
        "aiConfidence": 0.92
    }


@pytest.fixture
def sample_submission(sample_submission_data):
    """Sample validated submission."""
    return IssueSubmission(**sample_submission_data)


@pytest.fixture
def open_issue(pipeline, sample_submission):
    """Routed issue in status open with its creation event."""
    issue = pipeline.enrich(sample_submission).issue
    return issue.model_copy(update={"id": str(ObjectId())})


@pytest.fixture
def make_issue():
    """Factory for routed issues with explicit status and deadline."""

    def _make(status="open", deadline=1000, submitted_at=0, zone_id="ward_001",
              contractor_id="cont_road_01", category="road_damage", severity="medium",
              user_id="user_1", latitude=-5.0, longitude=40.0):
        lifecycle = IssueLifecycle(strict=False, clock=lambda: submitted_at)
        issue = Issue(
            title="Pothole",
            category=category,
            severity=severity,
            latitude=latitude,
            longitude=longitude,
            submitted_at=submitted_at,
            user_id=user_id,
            zone_id=zone_id,
            department="Public Works",
            contractor_id=contractor_id,
            deadline=deadline
        )
        issue = lifecycle.open_issue(issue)
        if status != "open":
            issue = lifecycle.transition(issue, status, f"Moved to {status}", "officer_1")
        return issue.model_copy(update={"id": str(ObjectId())})

    return _make


@pytest.fixture
def mock_collection():
    """Mocked pymongo issues collection."""
    return MagicMock()


@pytest.fixture
def mongodb_service(mock_collection):
    """MongoDB service whose database hands out the mocked collection."""
    service = MongoDBService("mongodb://localhost:27017/civic_issues_test", "civic_issues_test")
    service._database = MagicMock()
    service._database.__getitem__.return_value = mock_collection
    return service
