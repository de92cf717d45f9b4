# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the issue service.
"""

import pytest
from unittest.mock import MagicMock, patch
from bson import ObjectId

from config import Settings
from domain.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from models.enums import IssueStatus
from models.requests import IssueFilters, IssueSubmission, StatusUpdateRequest
from services.issues import IssueService, create_issue_service
from services.mongodb import MongoDBService


@pytest.fixture
def storage():
    """Storage collaborator mock that echoes writes back."""
    storage = MagicMock(spec=MongoDBService)
    storage.create_issue.side_effect = lambda issue: issue.model_copy(update={"id": str(ObjectId())})
    storage.update_issue.side_effect = lambda issue, expected_timeline_length: issue
    return storage


@pytest.fixture
def service(storage, reference_data, clock):
    """Issue service over a mocked storage backend."""
    return IssueService(storage, reference_data, strict_transitions=True, clock=clock)


class TestSubmitIssue:
    """Test issue intake."""

    def test_submit_persists_enriched_issue(self, service, storage, sample_submission):
        """Test submit persists enriched issue."""
        result = service.submit_issue(sample_submission)

        assert result.complete is True
        assert result.issue.id is not None
        assert result.issue.zone_id == "ward_001"
        assert result.issue.deadline == 86_400_000
        storage.create_issue.assert_called_once()

    def test_submit_rejects_incomplete(self, service, storage, sample_submission_data):
        """Test submit rejects incomplete."""
        sample_submission_data["latitude"] = None
        submission = IssueSubmission(**sample_submission_data)

        with pytest.raises(ValidationError) as exc_info:
            service.submit_issue(submission)

        assert "Missing required field: coordinates" in exc_info.value.validation_errors
        storage.create_issue.assert_not_called()

    def test_submit_incomplete_when_allowed(self, service, storage, sample_submission_data):
        """Test submit incomplete when allowed."""
        sample_submission_data["category"] = None
        submission = IssueSubmission(**sample_submission_data)

        result = service.submit_issue(submission, reject_invalid=False)

        assert result.complete is False
        assert result.issue.status is None
        storage.create_issue.assert_called_once()


class TestUpdateStatus:
    """Test status transitions through storage."""

    def test_update_status(self, service, storage, open_issue, clock):
        """Test status update appends a timeline entry."""
        storage.find_issue.return_value = open_issue
        clock.now = 5000

        updated = service.update_status(open_issue.id, "acknowledged", "Crew assigned", "officer_1")

        assert updated.status == "acknowledged"
        assert updated.timeline[-1].timestamp == 5000
        storage.update_issue.assert_called_once_with(updated, 1)

    @pytest.mark.parametrize("status", [IssueStatus.ACKNOWLEDGED, "acknowledged"])
    def test_span_records_status_value(self, service, storage, open_issue, status):
        """Test the span carries the plain status value for enum and string input."""
        storage.find_issue.return_value = open_issue

        with patch("services.issues.tracer") as tracer:
            service.update_status(open_issue.id, status, "Crew assigned", "officer_1")

        attributes = tracer.start_as_current_span.call_args.kwargs["attributes"]
        assert attributes["issue.status"] == "acknowledged"
        assert type(attributes["issue.status"]) is str

    def test_apply_status_update_request(self, service, storage, open_issue):
        """Test apply status update request."""
        storage.find_issue.return_value = open_issue
        request = StatusUpdateRequest(status="resolved", description="Fixed", updated_by="crew_2")

        updated = service.apply_status_update(open_issue.id, request)

        assert updated.status == "resolved"

    def test_missing_issue(self, service, storage):
        """Test missing issue."""
        storage.find_issue.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            service.update_status("missing", "resolved", "Done", "crew_1")

        assert exc_info.value.issue_id == "missing"
        storage.update_issue.assert_not_called()

    def test_illegal_transition(self, service, storage, make_issue):
        """Test illegal transition."""
        issue = make_issue(status="resolved")
        storage.find_issue.return_value = issue

        with pytest.raises(InvalidTransitionError):
            service.update_status(issue.id, "acknowledged", "Back again", "officer_1")

        storage.update_issue.assert_not_called()

    def test_conflict_propagates(self, service, storage, open_issue):
        """Test conflict propagates."""
        storage.find_issue.return_value = open_issue
        storage.update_issue.side_effect = ConflictError("modified concurrently")

        with pytest.raises(ConflictError):
            service.update_status(open_issue.id, "resolved", "Done", "crew_1")

    def test_reopen(self, service, storage, make_issue):
        """Test reopening a resolved issue."""
        issue = make_issue(status="resolved")
        storage.find_issue.return_value = issue

        reopened = service.reopen_issue(issue.id, "Still leaking", "citizen_4")

        assert reopened.status == "open"
        storage.update_issue.assert_called_once_with(reopened, len(issue.timeline))


class TestReads:
    """Test lookups, views and dashboards."""

    def test_get_issue_not_found(self, service, storage):
        """Test get issue not found."""
        storage.find_issue.return_value = None

        with pytest.raises(NotFoundError):
            service.get_issue(str(ObjectId()))

    def test_shared_issue_counts_view(self, service, storage, open_issue):
        """Test shared issue counts view."""
        storage.find_issue_by_share_token.return_value = open_issue
        storage.increment_view_count.return_value = True

        shared = service.get_shared_issue(open_issue.share_token)

        assert shared.view_count == open_issue.view_count + 1
        storage.increment_view_count.assert_called_once_with(open_issue.id)

    def test_shared_issue_not_found(self, service, storage):
        """Test shared issue not found."""
        storage.find_issue_by_share_token.return_value = None

        with pytest.raises(NotFoundError):
            service.get_shared_issue("nope")

    def test_list_issues_uses_clock(self, service, storage, clock):
        """Test list issues uses clock."""
        clock.now = 7000
        storage.query_issues.return_value = []
        filters = IssueFilters(overdue_only=True)

        assert service.list_issues(filters) == []
        storage.query_issues.assert_called_once_with(filters, 7000)

    def test_issue_view(self, service, open_issue):
        """Test issue view."""
        view = service.issue_view(open_issue, now=86_400_001)

        assert view.category_label == "Water Leak"
        assert view.zone_name == "Downtown Central"
        assert view.contractor_name == "AquaFlow Utilities"
        assert view.is_overdue is True
        assert view.acknowledgement_overdue is True
        assert view.sla_state == "overdue"
        assert view.time_remaining_ms == -1
        assert view.allowed_transitions == ["open", "acknowledged", "resolved"]

    def test_issue_view_unrouted(self, service, sample_submission_data):
        """Test issue view unrouted."""
        sample_submission_data["latitude"] = None
        issue = service.pipeline.enrich(IssueSubmission(**sample_submission_data)).issue

        view = service.issue_view(issue, now=0)

        assert view.zone_name is None
        assert view.sla_state == "unrouted"
        assert view.allowed_transitions == ["open"]

    def test_dashboard(self, service, storage, make_issue):
        """Test dashboard aggregates stats and rankings."""
        storage.query_issues.return_value = [
            make_issue(status="open", deadline=1000, zone_id="ward_001", contractor_id="cont_road_01"),
            make_issue(status="resolved", deadline=1000, zone_id="ward_002", contractor_id="cont_road_02"),
        ]

        dashboard = service.dashboard(now=2000)

        assert dashboard.evaluated_at == 2000
        assert dashboard.stats.total_issues == 2
        assert dashboard.stats.overdue_issues == 1
        assert dashboard.ward_rankings[0].zone_id == "ward_002"
        assert dashboard.contractors[0].contractor_id == "cont_road_01"
        assert len(dashboard.contractors) == 11


class TestFactory:
    """Test service construction from settings."""

    @patch("services.issues.MongoDBService")
    def test_create_issue_service(self, storage_class):
        """Test create issue service."""
        settings = Settings(mongodb_uri="mongodb://db:27017", mongodb_database="civic", strict_transitions=False)

        service = create_issue_service(settings)

        storage_class.assert_called_once_with("mongodb://db:27017", "civic")
        assert service.lifecycle.strict is False
        assert service.reference_data.default_zone_id == "ward_001"
