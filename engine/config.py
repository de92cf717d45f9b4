# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Environment configuration for the civic issue engine.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class Settings:
    """Engine configuration settings."""
    environment: str = 'development'
    service_name: str = 'civic-issue-engine'
    service_version: str = '1.0.0'
    mongodb_uri: str = 'mongodb://localhost:27017/civic_issues_dev'
    mongodb_database: str = 'civic_issues_dev'
    reference_data_path: Optional[str] = None
    strict_transitions: bool = True
    otel_enabled: bool = True
    otlp_endpoint: Optional[str] = None


def load_settings() -> Settings:
    """
    Build settings from environment variables.

    Returns:
        Settings: Configuration with environment overrides applied
    """
    return Settings(
        environment=os.getenv('ENVIRONMENT', 'development'),
        service_version=os.getenv('SERVICE_VERSION', '1.0.0'),
        mongodb_uri=os.getenv('MONGODB_URI', 'mongodb://localhost:27017/civic_issues_dev'),
        mongodb_database=os.getenv('MONGODB_DATABASE', 'civic_issues_dev'),
        reference_data_path=os.getenv('REFERENCE_DATA_PATH') or None,
        strict_transitions=_env_flag('STRICT_TRANSITIONS', 'true'),
        otel_enabled=_env_flag('OTEL_ENABLED', 'true'),
        otlp_endpoint=os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT') or None
    )
