# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity models, identifiers and epoch-millisecond time helpers.
"""

import time
import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict
from bson import ObjectId

MILLISECONDS_PER_HOUR = 60 * 60 * 1000


def generate_object_id() -> str:
    """Generate a new MongoDB ObjectId as string."""
    return str(ObjectId())


def generate_share_token() -> str:
    """Generate an opaque token for unauthenticated public lookup."""
    return uuid.uuid4().hex


def current_time_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def from_datetime(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


class BaseEntity(BaseModel):
    """Base entity with common configuration for all domain objects."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True
    )


class ReferenceEntity(BaseModel):
    """Base model for static, read-only reference data."""

    model_config = ConfigDict(
        use_enum_values=True,
        frozen=True
    )
