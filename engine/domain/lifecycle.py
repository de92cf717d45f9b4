# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Issue lifecycle state machine and append-only timeline.

Transitions never mutate the issue they are given: they return a copy whose
timeline is the previous tuple of events plus one new event. Persisting the
copy, and detecting that the snapshot was stale, belongs to the storage
collaborator.
"""

import logging
from typing import Callable, Optional, Tuple
from models.base import current_time_ms
from models.entities import Issue, TimelineEvent
from models.enums import IssueStatus
from .errors import InvalidTransitionError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CREATION_DESCRIPTION = "Issue reported and filed."
SYSTEM_ACTOR = "system"

# Same-status edges are allowed: they append a confirming note.
VALID_TRANSITIONS = {
    IssueStatus.OPEN: (IssueStatus.OPEN, IssueStatus.ACKNOWLEDGED, IssueStatus.RESOLVED),
    IssueStatus.ACKNOWLEDGED: (IssueStatus.ACKNOWLEDGED, IssueStatus.RESOLVED),
    IssueStatus.RESOLVED: (IssueStatus.RESOLVED,),
}


def parse_status(status) -> IssueStatus:
    """Coerce a status value, raising ValidationError for unknown ones."""
    try:
        return IssueStatus(status)
    except ValueError:
        raise ValidationError(
            f"Unknown issue status: {status}",
            [f"Status must be one of: {', '.join(s.value for s in IssueStatus)}"]
        )


class IssueLifecycle:
    """
    Governs status changes: open -> acknowledged -> resolved.

    With strict=True (the default) the transition graph is enforced and
    resolved is terminal except through reopen(). With strict=False any
    status may follow any other. In both modes an issue that was never
    opened can only move to open, so the first timeline entry is always open.
    """

    def __init__(self, strict: bool = True, clock: Callable[[], int] = current_time_ms):
        self.strict = strict
        self.clock = clock

    def allowed_transitions(self, current_status: Optional[str]) -> Tuple[IssueStatus, ...]:
        """Statuses reachable from current_status under this policy."""
        if current_status is None:
            return (IssueStatus.OPEN,)
        if not self.strict:
            return tuple(IssueStatus)
        return VALID_TRANSITIONS[IssueStatus(current_status)]

    def can_transition(self, current_status: Optional[str], new_status) -> bool:
        """Check if new_status may follow current_status."""
        return parse_status(new_status) in self.allowed_transitions(current_status)

    def open_issue(self, issue: Issue, submitted_at: Optional[int] = None) -> Issue:
        """
        Seed status open and the synthetic creation event.

        Args:
            issue: Issue that has not been opened yet
            submitted_at: Creation event time, defaults to issue.submitted_at

        Returns:
            Copy of the issue with status open and a single timeline entry
        """
        if issue.status is not None or issue.timeline:
            raise InvalidTransitionError(issue.status, IssueStatus.OPEN.value)

        timestamp = issue.submitted_at if submitted_at is None else submitted_at
        event = TimelineEvent(
            status=IssueStatus.OPEN,
            timestamp=timestamp,
            description=CREATION_DESCRIPTION,
            updated_by=SYSTEM_ACTOR
        )
        return issue.model_copy(update={"status": IssueStatus.OPEN.value, "timeline": (event,)})

    def transition(self, issue: Optional[Issue], new_status, description: str, updated_by: str) -> Issue:
        """
        Move an issue to new_status and append one timeline event.

        Args:
            issue: Issue snapshot, None when the caller could not find it
            new_status: Target status
            description: Human-readable note for the timeline, may be empty
            updated_by: Actor identifier, blank values are recorded as system

        Returns:
            New issue whose status is new_status and whose timeline has one
            more event than the input

        Raises:
            NotFoundError: issue is None
            ValidationError: unknown status
            InvalidTransitionError: edge not allowed under this policy
        """
        if issue is None:
            raise NotFoundError("Issue not found")

        target = parse_status(new_status)
        if not self.can_transition(issue.status, target):
            logger.info(
                "Rejected status transition",
                extra={"issue_id": issue.id, "from_status": issue.status, "to_status": target.value}
            )
            raise InvalidTransitionError(issue.status, target.value)

        return self._append(issue, target, description, updated_by)

    def reopen(self, issue: Optional[Issue], description: str, updated_by: str) -> Issue:
        """Explicitly move a resolved issue back to open."""
        if issue is None:
            raise NotFoundError("Issue not found")
        if issue.status != IssueStatus.RESOLVED:
            raise InvalidTransitionError(issue.status, IssueStatus.OPEN.value)

        return self._append(issue, IssueStatus.OPEN, description, updated_by)

    def _append(self, issue: Issue, status: IssueStatus, description: str, updated_by: str) -> Issue:
        now = self.clock()
        last = issue.last_event()
        # Clock skew must not break timeline ordering
        if last is not None and now < last.timestamp:
            now = last.timestamp

        description = (description or "").strip()
        updated_by = (updated_by or "").strip() or SYSTEM_ACTOR

        event = TimelineEvent(
            status=status,
            timestamp=now,
            description=description,
            updated_by=updated_by
        )

        logger.debug(
            "Issue status transition",
            extra={
                "issue_id": issue.id,
                "from_status": issue.status,
                "to_status": status.value,
                "updated_by": updated_by
            }
        )

        return issue.model_copy(update={"status": status.value, "timeline": issue.timeline + (event,)})
