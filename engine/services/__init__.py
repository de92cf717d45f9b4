# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - Storage, reference data and issue orchestration.
"""

from .mongodb import MongoDBService, get_mongodb_service, close_mongodb_connection
from .reference_data import load_reference_data
from .issues import IssueService, create_issue_service

__all__ = [
    "MongoDBService",
    "get_mongodb_service",
    "close_mongodb_connection",
    "load_reference_data",
    "IssueService",
    "create_issue_service"
]
