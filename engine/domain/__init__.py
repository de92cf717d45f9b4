# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the civic issue engine.

This package contains pure business logic with no side effects: zone
resolution, responsibility lookup, SLA policy, the issue lifecycle and
submission enrichment. Reference tables are passed in at construction time.
"""
