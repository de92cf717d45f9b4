# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Submission-time enrichment.

Composes zone resolution, responsibility lookup, SLA deadline and the
lifecycle seed into a fully routed issue record. Pure: persistence is the
caller's concern.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from models.base import current_time_ms
from models.entities import Issue
from models.enums import IssueCategory
from models.reference import ReferenceData
from models.requests import IssueSubmission
from .lifecycle import IssueLifecycle
from .responsibility import ResponsibilityTable
from .sla import SLAPolicy
from .zones import GeoZoneResolver, is_valid_coordinate

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of submission validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []


@dataclass
class EnrichmentResult:
    """
    Outcome of enrichment.

    issue is always present. When complete is False it carries no zone,
    responsibility, deadline, status or timeline, and reason explains why.
    """
    issue: Issue
    complete: bool
    reason: Optional[str] = None
    missing_fields: List[str] = None

    def __post_init__(self):
        if self.missing_fields is None:
            self.missing_fields = []


def validate_submission(submission: IssueSubmission) -> ValidationResult:
    """
    Validate a submission at the ingestion boundary.

    Args:
        submission: Raw report fields

    Returns:
        ValidationResult with validation status, errors and warnings
    """
    errors = []
    warnings = []

    if submission.latitude is None or submission.longitude is None:
        errors.append("Missing required field: coordinates")
    elif not is_valid_coordinate(submission.latitude, submission.longitude):
        errors.append(
            f"Coordinates out of range: ({submission.latitude}, {submission.longitude})"
        )

    if submission.category is None:
        errors.append("Missing required field: category")
    elif not submission.has_known_category():
        warnings.append(f"Unrecognized category '{submission.category}' filed as other")

    if not submission.image_ref:
        warnings.append("Submission has no image")

    if not submission.address.strip():
        warnings.append("Submission has no address")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )


class EnrichmentPipeline:
    """Produces the enriched issue record for a submission."""

    def __init__(
        self,
        zone_resolver: GeoZoneResolver,
        responsibility_table: ResponsibilityTable,
        sla_policy: SLAPolicy,
        lifecycle: IssueLifecycle,
        clock: Callable[[], int] = current_time_ms
    ):
        self.zone_resolver = zone_resolver
        self.responsibility_table = responsibility_table
        self.sla_policy = sla_policy
        self.lifecycle = lifecycle
        self.clock = clock

    @classmethod
    def from_reference_data(
        cls,
        reference_data: ReferenceData,
        strict_transitions: bool = True,
        clock: Callable[[], int] = current_time_ms
    ) -> "EnrichmentPipeline":
        """Build the pipeline and its components from one reference data set."""
        return cls(
            GeoZoneResolver(reference_data),
            ResponsibilityTable(reference_data),
            SLAPolicy(reference_data.sla),
            IssueLifecycle(strict=strict_transitions, clock=clock),
            clock=clock
        )

    def enrich(self, submission: IssueSubmission) -> EnrichmentResult:
        """
        Enrich a submission into an issue record.

        Missing or invalid coordinates and a missing category skip enrichment
        and return a partial record instead of failing.
        """
        submitted_at = submission.timestamp if submission.timestamp is not None else self.clock()

        missing_fields = []
        if submission.latitude is None or submission.longitude is None:
            missing_fields.append("coordinates")
        if submission.category is None:
            missing_fields.append("category")

        coordinates_valid = (
            "coordinates" not in missing_fields
            and is_valid_coordinate(submission.latitude, submission.longitude)
        )

        category, custom_category = _file_category(submission)
        base_fields = dict(
            title=submission.title,
            description=submission.description,
            category=category,
            custom_category=custom_category,
            severity=submission.severity,
            image_ref=submission.image_ref,
            latitude=submission.latitude if coordinates_valid else None,
            longitude=submission.longitude if coordinates_valid else None,
            address=submission.address,
            submitted_at=submitted_at,
            user_id=submission.user_id,
            ai_confidence=submission.ai_confidence,
            view_count=0
        )

        if missing_fields or not coordinates_valid:
            reason = (
                f"Missing required fields: {', '.join(missing_fields)}"
                if missing_fields else "Coordinates out of range"
            )
            logger.debug(
                "Enrichment skipped",
                extra={"reason": reason, "user_id": submission.user_id}
            )
            return EnrichmentResult(
                issue=Issue(**base_fields),
                complete=False,
                reason=reason,
                missing_fields=missing_fields
            )

        zone_id = self.zone_resolver.resolve_zone(submission.latitude, submission.longitude)
        responsibility = self.responsibility_table.resolve_responsibility(zone_id, submission.category)
        deadline = self.sla_policy.compute_deadline(submission.category, submitted_at)

        issue = Issue(
            **base_fields,
            zone_id=zone_id,
            department=responsibility.department,
            contractor_id=responsibility.contractor_id,
            deadline=deadline
        )
        issue = self.lifecycle.open_issue(issue, submitted_at)

        logger.debug(
            "Issue enriched",
            extra={
                "zone_id": zone_id,
                "department": responsibility.department,
                "contractor_id": responsibility.contractor_id,
                "deadline": deadline
            }
        )

        return EnrichmentResult(issue=issue, complete=True)


def _file_category(submission: IssueSubmission):
    """Category to store and the custom label, filing unknown categories as other."""
    if submission.category is None:
        return None, submission.custom_category
    if submission.has_known_category():
        return IssueCategory(submission.category), submission.custom_category
    return IssueCategory.OTHER, submission.custom_category or submission.category[:120]
