# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Domain exceptions.

Every error raised by the engine is deterministic given its inputs; the core
performs no I/O, so none of these are retryable.
"""

from typing import List, Optional


class DomainException(Exception):
    """Base class for engine exceptions."""

    def __init__(self, message: str, status_code: int = 500, error_type: str = "application-error"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type


class ValidationError(DomainException):
    """Exception for invalid input rejected at the ingestion boundary."""

    def __init__(self, message: str, validation_errors: List[str] = None):
        super().__init__(message, 400, "validation-error")
        self.validation_errors = validation_errors or []


class NotFoundError(DomainException):
    """Exception for operations on issues that do not exist."""

    def __init__(self, message: str, issue_id: Optional[str] = None):
        super().__init__(message, 404, "resource-not-found")
        self.issue_id = issue_id


class InvalidTransitionError(DomainException):
    """Exception for status changes outside the transition graph."""

    def __init__(self, current_status: Optional[str], requested_status: str):
        super().__init__(
            f"Invalid status transition from {current_status} to {requested_status}",
            409,
            "invalid-transition"
        )
        self.current_status = current_status
        self.requested_status = requested_status


class ConflictError(DomainException):
    """Exception for stale snapshots detected by the storage collaborator."""

    def __init__(self, message: str):
        super().__init__(message, 409, "resource-conflict")
