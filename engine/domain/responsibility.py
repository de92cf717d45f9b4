# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Responsibility lookup: (zone, category) to department and contractor.
"""

from types import MappingProxyType
from typing import Dict, Tuple
from models.reference import ReferenceData, Responsibility


class ResponsibilityTable:
    """
    Read-only responsibility matrix built once from reference data.

    Unknown zones and unmapped categories resolve to the default
    responsibility so every issue stays routable.
    """

    def __init__(self, reference_data: ReferenceData):
        self.default = reference_data.default_responsibility

        table: Dict[Tuple[str, str], Responsibility] = {}
        for zone in reference_data.zones:
            for category, responsibility in zone.department_mappings.items():
                table[(zone.id, _category_key(category))] = responsibility

        self._table = MappingProxyType(table)
        self._contractors = MappingProxyType(
            {contractor.id: contractor.name for contractor in reference_data.contractors}
        )

    def resolve_responsibility(self, zone_id: str, category: str) -> Responsibility:
        """Department and contractor for a zone and category."""
        return self._table.get((zone_id, _category_key(category)), self.default)

    def contractor_name(self, contractor_id: str) -> str:
        """Display name for a contractor id."""
        return self._contractors.get(contractor_id, "Unknown Contractor")

    def contractors(self) -> Dict[str, str]:
        """Contractor id to display name, including the default contractor."""
        names = dict(self._contractors)
        names.setdefault(self.default.contractor_id, self.contractor_name(self.default.contractor_id))
        return names

    def departments(self) -> Tuple[str, ...]:
        """Distinct department names, sorted."""
        names = {responsibility.department for responsibility in self._table.values()}
        names.add(self.default.department)
        return tuple(sorted(names))


def _category_key(category) -> str:
    return getattr(category, "value", category)
