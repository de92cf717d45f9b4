# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
SLA policy: deadlines, acknowledgement window and the overdue predicate.

Overdue is a pure function of (status, deadline, now). It is never stored
or cached, so it always reflects the time of evaluation.
"""

from types import MappingProxyType
from typing import Optional
from models.base import MILLISECONDS_PER_HOUR
from models.entities import Issue
from models.enums import IssueStatus, SLAState
from models.reference import SLAConfig


class SLAPolicy:
    """Per-category resolution windows plus an acknowledgement window."""

    def __init__(self, config: SLAConfig):
        self.acknowledgement_hours = config.acknowledgement_hours
        self.default_resolution_hours = config.default_resolution_hours
        self._resolution_hours = MappingProxyType({
            getattr(category, "value", category): hours
            for category, hours in config.resolution_hours.items()
        })

    def resolution_hours(self, category) -> float:
        """Resolution window for a category, default for unmapped ones."""
        key = getattr(category, "value", category)
        return self._resolution_hours.get(key, self.default_resolution_hours)

    def compute_deadline(self, category, submitted_at: int) -> int:
        """Deadline in epoch milliseconds for an issue submitted at submitted_at."""
        return submitted_at + int(self.resolution_hours(category) * MILLISECONDS_PER_HOUR)

    def acknowledgement_due_at(self, submitted_at: int) -> int:
        """Time by which an open issue should be acknowledged."""
        return submitted_at + int(self.acknowledgement_hours * MILLISECONDS_PER_HOUR)

    def is_acknowledgement_overdue(self, issue: Issue, now: int) -> bool:
        """Check if a routed issue is still open past its acknowledgement window."""
        if issue.status != IssueStatus.OPEN or not issue.is_routed():
            return False
        return now > self.acknowledgement_due_at(issue.submitted_at)


def is_overdue(issue: Issue, now: int) -> bool:
    """
    Check if an issue is overdue at a given time.

    Args:
        issue: Issue snapshot
        now: Evaluation time in epoch milliseconds

    Returns:
        True if not resolved and now is past the deadline
    """
    if issue.status == IssueStatus.RESOLVED or issue.deadline is None:
        return False
    return now > issue.deadline


def time_remaining_ms(issue: Issue, now: int) -> Optional[int]:
    """Milliseconds until the deadline, negative when past it, None if unrouted."""
    if issue.deadline is None:
        return None
    return issue.deadline - now


def sla_state(issue: Issue, now: int) -> SLAState:
    """Display-level SLA condition for status badges."""
    if issue.status == IssueStatus.RESOLVED:
        return SLAState.RESOLVED
    if issue.deadline is None:
        return SLAState.UNROUTED
    if is_overdue(issue, now):
        return SLAState.OVERDUE
    return SLAState.ON_TRACK
