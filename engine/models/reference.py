# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Static reference data: zones, contractors, responsibility and SLA tables.

These models are frozen. They are built once at process start and passed
into the resolvers that need them.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import Field, field_validator, model_validator
from .base import ReferenceEntity
from .enums import IssueCategory


class Responsibility(ReferenceEntity):
    """Department and contractor accountable for an issue."""

    department: str = Field(..., min_length=1, description="Department name")
    contractor_id: str = Field(..., min_length=1, description="Contractor identifier")


class ZoneBoundary(ReferenceEntity):
    """
    Region covered by a zone.

    A latitude band (lower bound exclusive, upper bound inclusive), a polygon
    of (latitude, longitude) vertices, or both. A point must satisfy every
    configured part to be inside the boundary.
    """

    min_latitude: Optional[float] = Field(None, ge=-90, le=90, description="Exclusive lower latitude")
    max_latitude: Optional[float] = Field(None, ge=-90, le=90, description="Inclusive upper latitude")
    polygon: Tuple[Tuple[float, float], ...] = Field(default_factory=tuple, description="Polygon vertices")

    @field_validator('polygon')
    @classmethod
    def validate_polygon(cls, v):
        """Validate polygon has enough vertices."""
        if v and len(v) < 3:
            raise ValueError('Polygon must have at least 3 vertices')
        return v

    @model_validator(mode='after')
    def validate_band(self):
        """Validate latitude band ordering."""
        if (self.min_latitude is not None and self.max_latitude is not None
                and self.min_latitude >= self.max_latitude):
            raise ValueError('min_latitude must be lower than max_latitude')
        return self


class Zone(ReferenceEntity):
    """Administrative zone (ward) with its responsibility mappings."""

    id: str = Field(..., min_length=1, description="Zone identifier")
    name: str = Field(..., min_length=1, description="Display name")
    boundary: Optional[ZoneBoundary] = Field(None, description="Covered region")
    department_mappings: Dict[IssueCategory, Responsibility] = Field(
        default_factory=dict, description="Category to responsibility mapping"
    )


class Contractor(ReferenceEntity):
    """Contractor display data."""

    id: str = Field(..., min_length=1, description="Contractor identifier")
    name: str = Field(..., min_length=1, description="Display name")


class SLAConfig(ReferenceEntity):
    """Acknowledgement window and per-category resolution windows, in hours."""

    acknowledgement_hours: float = Field(default=24, gt=0, description="Acknowledgement window")
    resolution_hours: Dict[IssueCategory, float] = Field(
        default_factory=lambda: {
            IssueCategory.ROAD_DAMAGE: 72,
            IssueCategory.GARBAGE: 48,
            IssueCategory.WATER_LEAK: 24,
            IssueCategory.BROKEN_INFRA: 96,
            IssueCategory.OTHER: 72,
        },
        description="Resolution window per category"
    )
    default_resolution_hours: float = Field(default=72, gt=0, description="Window for unmapped categories")

    @field_validator('resolution_hours')
    @classmethod
    def validate_resolution_hours(cls, v):
        """Validate resolution windows are positive."""
        for category, hours in v.items():
            if hours <= 0:
                raise ValueError(f'Resolution hours for {category} must be positive')
        return v


class ReferenceData(ReferenceEntity):
    """All static configuration consumed by the engine."""

    zones: List[Zone] = Field(default_factory=list, description="Zones in resolution order")
    contractors: List[Contractor] = Field(default_factory=list, description="Known contractors")
    sla: SLAConfig = Field(default_factory=SLAConfig, description="SLA table")
    default_zone_id: str = Field(default="ward_001", min_length=1, description="Fallback zone")
    default_responsibility: Responsibility = Field(
        default_factory=lambda: Responsibility(department="General Services", contractor_id="default_contractor"),
        description="Fallback responsibility"
    )

    @model_validator(mode='after')
    def validate_unique_ids(self):
        """Validate identifiers are unique and the default zone is configured."""
        zone_ids = [zone.id for zone in self.zones]
        if len(zone_ids) != len(set(zone_ids)):
            raise ValueError('Zone identifiers must be unique')

        if zone_ids and self.default_zone_id not in zone_ids:
            raise ValueError(f'Default zone {self.default_zone_id} is not a configured zone')

        contractor_ids = [contractor.id for contractor in self.contractors]
        if len(contractor_ids) != len(set(contractor_ids)):
            raise ValueError('Contractor identifiers must be unique')

        return self


def _mappings(suffix: str) -> Dict[IssueCategory, Responsibility]:
    return {
        IssueCategory.ROAD_DAMAGE: Responsibility(department="Public Works", contractor_id=f"cont_road_{suffix}"),
        IssueCategory.GARBAGE: Responsibility(department="Sanitation", contractor_id=f"cont_waste_{suffix}"),
        IssueCategory.WATER_LEAK: Responsibility(department="Water Supply", contractor_id=f"cont_water_{suffix}"),
        IssueCategory.BROKEN_INFRA: Responsibility(department="Urban Development", contractor_id=f"cont_infra_{suffix}"),
        IssueCategory.OTHER: Responsibility(department="General Maintenance", contractor_id=f"cont_gen_{suffix}"),
    }


def default_reference_data() -> ReferenceData:
    """Built-in wards, contractors and SLA table."""
    return ReferenceData(
        zones=[
            # North of the equator line is Suburban North
            Zone(
                id="ward_002",
                name="Suburban North",
                boundary=ZoneBoundary(min_latitude=0, max_latitude=90),
                department_mappings=_mappings("02"),
            ),
            Zone(
                id="ward_001",
                name="Downtown Central",
                department_mappings=_mappings("01"),
            ),
        ],
        contractors=[
            Contractor(id="cont_road_01", name="Metro Paving Co."),
            Contractor(id="cont_waste_01", name="CleanCity Solutions"),
            Contractor(id="cont_water_01", name="AquaFlow Utilities"),
            Contractor(id="cont_infra_01", name="Urban Build Ltd."),
            Contractor(id="cont_gen_01", name="CityCare Services"),
            Contractor(id="cont_road_02", name="North Road Maintenance"),
            Contractor(id="cont_waste_02", name="GreenWaste Management"),
            Contractor(id="cont_water_02", name="PureWater Systems"),
            Contractor(id="cont_infra_02", name="Skyline Construction"),
            Contractor(id="cont_gen_02", name="Regional Maintenance"),
        ],
        sla=SLAConfig(),
        default_zone_id="ward_001",
    )
