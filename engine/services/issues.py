# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Issue service: wires the storage collaborator to the pure engine.

The engine computes the next state from a snapshot; this service fetches the
snapshot, asks the engine for the next state and hands it back to storage,
which rejects stale snapshots.
"""

import logging
from typing import Callable, List, Optional
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from config import Settings, load_settings
from domain.enrichment import EnrichmentPipeline, EnrichmentResult, validate_submission
from domain.errors import DomainException, NotFoundError, ValidationError
from domain.rankings import compute_stats, contractor_performance, rank_wards
from domain.sla import is_overdue, sla_state, time_remaining_ms
from models.base import current_time_ms
from models.entities import Issue
from models.enums import category_label
from models.reference import ReferenceData
from models.requests import IssueFilters, IssueSubmission, StatusUpdateRequest
from models.responses import DashboardResponse, IssueResponse
from .mongodb import MongoDBService
from .reference_data import load_reference_data

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class IssueService:
    """Issue intake, status updates and read-side views."""

    def __init__(
        self,
        storage: MongoDBService,
        reference_data: ReferenceData,
        strict_transitions: bool = True,
        clock: Callable[[], int] = current_time_ms
    ):
        self.storage = storage
        self.reference_data = reference_data
        self.clock = clock
        self.pipeline = EnrichmentPipeline.from_reference_data(reference_data, strict_transitions, clock)
        self.zone_resolver = self.pipeline.zone_resolver
        self.responsibility_table = self.pipeline.responsibility_table
        self.sla_policy = self.pipeline.sla_policy
        self.lifecycle = self.pipeline.lifecycle
        logger.info("Issue service initialized", extra={"strict_transitions": strict_transitions})

    def submit_issue(self, submission: IssueSubmission, reject_invalid: bool = True) -> EnrichmentResult:
        """
        Enrich and persist a new report.

        Args:
            submission: Raw report fields
            reject_invalid: Raise instead of persisting an incomplete record

        Returns:
            EnrichmentResult whose issue carries the storage-assigned id

        Raises:
            ValidationError: submission is missing coordinates or category
                and reject_invalid is set
        """
        with tracer.start_as_current_span(
            "issue.submit",
            attributes={"user.id": submission.user_id, "issue.category": submission.category or ""}
        ) as span:
            validation = validate_submission(submission)
            if validation.warnings:
                logger.info("Submission accepted with warnings", extra={"warnings": validation.warnings})

            if not validation.is_valid and reject_invalid:
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                logger.warning(
                    "Submission rejected",
                    extra={"user_id": submission.user_id, "validation_errors": validation.errors}
                )
                raise ValidationError("Invalid issue submission", validation.errors)

            result = self.pipeline.enrich(submission)
            result.issue = self.storage.create_issue(result.issue)

            span.set_attributes({
                "issue.id": result.issue.id,
                "issue.complete": result.complete,
                "issue.zone_id": result.issue.zone_id or ""
            })
            logger.info(
                "Issue submitted",
                extra={
                    "issue_id": result.issue.id,
                    "complete": result.complete,
                    "zone_id": result.issue.zone_id,
                    "contractor_id": result.issue.contractor_id
                }
            )
            return result

    def get_issue(self, issue_id: str) -> Issue:
        """Fetch an issue or raise NotFoundError."""
        issue = self.storage.find_issue(issue_id)
        if issue is None:
            raise NotFoundError(f"Issue not found: {issue_id}", issue_id)
        return issue

    def update_status(self, issue_id: str, status, description: str, updated_by: str) -> Issue:
        """
        Transition an issue and persist the appended timeline event.

        Raises:
            NotFoundError: issue does not exist
            InvalidTransitionError: edge rejected by the lifecycle policy
            ConflictError: issue changed since it was read
        """
        with tracer.start_as_current_span(
            "issue.update_status",
            attributes={
                "issue.id": issue_id,
                "issue.status": getattr(status, "value", status),
                "user.id": updated_by
            }
        ) as span:
            try:
                issue = self.get_issue(issue_id)
                updated = self.lifecycle.transition(issue, status, description, updated_by)
                saved = self.storage.update_issue(updated, len(issue.timeline))
            except DomainException as e:
                span.set_status(Status(StatusCode.ERROR, e.error_type))
                logger.warning(
                    f"Status update failed: {e.message}",
                    extra={"issue_id": issue_id, "error_type": e.error_type}
                )
                raise

            logger.info(
                "Issue status updated",
                extra={"issue_id": issue_id, "from_status": issue.status, "to_status": saved.status}
            )
            return saved

    def apply_status_update(self, issue_id: str, request: StatusUpdateRequest) -> Issue:
        """Transition an issue from a validated request model."""
        return self.update_status(issue_id, request.status, request.description, request.updated_by)

    def reopen_issue(self, issue_id: str, description: str, updated_by: str) -> Issue:
        """Move a resolved issue back to open and persist it."""
        with tracer.start_as_current_span(
            "issue.reopen",
            attributes={"issue.id": issue_id, "user.id": updated_by}
        ) as span:
            try:
                issue = self.get_issue(issue_id)
                updated = self.lifecycle.reopen(issue, description, updated_by)
                saved = self.storage.update_issue(updated, len(issue.timeline))
            except DomainException as e:
                span.set_status(Status(StatusCode.ERROR, e.error_type))
                raise

            logger.info("Issue reopened", extra={"issue_id": issue_id, "updated_by": updated_by})
            return saved

    def get_shared_issue(self, share_token: str) -> Issue:
        """Public lookup by share token; counts the view."""
        issue = self.storage.find_issue_by_share_token(share_token)
        if issue is None:
            raise NotFoundError("Shared issue not found")

        if self.storage.increment_view_count(issue.id):
            issue = issue.model_copy(update={"view_count": issue.view_count + 1})
        return issue

    def list_issues(self, filters: Optional[IssueFilters] = None, now: Optional[int] = None) -> List[Issue]:
        """Issues matching filters, newest submissions first."""
        filters = filters or IssueFilters()
        now = self.clock() if now is None else now
        with tracer.start_as_current_span("issue.list") as span:
            issues = self.storage.query_issues(filters, now)
            span.set_attribute("issue.count", len(issues))
            return issues

    def issue_view(self, issue: Issue, now: Optional[int] = None) -> IssueResponse:
        """Display model with lookups and SLA state evaluated at now."""
        now = self.clock() if now is None else now
        return IssueResponse(
            issue=issue,
            category_label=category_label(issue.custom_category or issue.category) if issue.category else "Uncategorized",
            zone_name=self.zone_resolver.zone_name(issue.zone_id) if issue.zone_id else None,
            contractor_name=(
                self.responsibility_table.contractor_name(issue.contractor_id) if issue.contractor_id else None
            ),
            is_overdue=is_overdue(issue, now),
            acknowledgement_overdue=self.sla_policy.is_acknowledgement_overdue(issue, now),
            sla_state=sla_state(issue, now).value,
            time_remaining_ms=time_remaining_ms(issue, now),
            allowed_transitions=[status.value for status in self.lifecycle.allowed_transitions(issue.status)],
            evaluated_at=now
        )

    def dashboard(self, now: Optional[int] = None) -> DashboardResponse:
        """Stats, ward rankings and contractor performance at one instant."""
        now = self.clock() if now is None else now
        with tracer.start_as_current_span("issue.dashboard"):
            issues = self.storage.query_issues(IssueFilters(), now)
            zone_names = {zone.id: zone.name for zone in self.reference_data.zones}
            return DashboardResponse(
                stats=compute_stats(issues, now),
                ward_rankings=rank_wards(issues, zone_names, now),
                contractors=contractor_performance(issues, self.responsibility_table.contractors(), now),
                evaluated_at=now
            )


def create_issue_service(settings: Optional[Settings] = None) -> IssueService:
    """
    Factory function to create the issue service from configuration.

    Returns:
        IssueService: Service backed by MongoDB and the configured reference data
    """
    settings = settings or load_settings()
    reference_data = load_reference_data(settings.reference_data_path)
    storage = MongoDBService(settings.mongodb_uri, settings.mongodb_database)
    return IssueService(storage, reference_data, strict_transitions=settings.strict_transitions)
