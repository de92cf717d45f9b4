# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
MongoDB storage collaborator for issue records with connection pooling.

Documents use the camelCase persisted schema (zoneId, contractorId,
shareToken, submittedAt, ...). Status transitions are written with an
optimistic check on the stored timeline length so that two concurrent
transitions on the same snapshot cannot both succeed.
"""

import os
import logging
from typing import List, Dict, Optional, Any
from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConnectionFailure,
    ServerSelectionTimeoutError,
    DuplicateKeyError,
    PyMongoError
)
from bson import ObjectId
from bson.errors import InvalidId

from models.entities import Issue
from models.enums import IssueStatus
from models.requests import IssueFilters
from domain.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

ISSUES_COLLECTION = "issues"


class MongoDBService:
    """MongoDB service for issue persistence and queries."""

    def __init__(self, connection_string: str = None, database_name: str = None,
                 collection_name: str = ISSUES_COLLECTION):
        """Initialize MongoDB service with connection pooling."""
        self.connection_string = connection_string or os.getenv(
            'MONGODB_URI',
            'mongodb://localhost:27017/civic_issues_dev'
        )
        self.database_name = database_name or os.getenv('MONGODB_DATABASE', 'civic_issues_dev')
        self.collection_name = collection_name
        self._client: Optional[MongoClient] = None
        self._database: Optional[Database] = None

        # Connection pool settings
        self.max_pool_size = int(os.getenv('MONGODB_MAX_POOL_SIZE', '10'))
        self.min_pool_size = int(os.getenv('MONGODB_MIN_POOL_SIZE', '1'))
        self.max_idle_time_ms = int(os.getenv('MONGODB_MAX_IDLE_TIME_MS', '30000'))
        self.server_selection_timeout_ms = int(os.getenv('MONGODB_SERVER_SELECTION_TIMEOUT_MS', '5000'))

        logger.info(f"MongoDB service initialized for database: {self.database_name}")

    @property
    def client(self) -> MongoClient:
        """Get MongoDB client with connection pooling."""
        if self._client is None:
            try:
                self._client = MongoClient(
                    self.connection_string,
                    maxPoolSize=self.max_pool_size,
                    minPoolSize=self.min_pool_size,
                    maxIdleTimeMS=self.max_idle_time_ms,
                    serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                    retryWrites=True,
                    retryReads=True
                )
                # Test connection
                self._client.admin.command('ping')
                logger.info("MongoDB connection established successfully")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                raise

        return self._client

    @property
    def database(self) -> Database:
        """Get MongoDB database."""
        if self._database is None:
            self._database = self.client[self.database_name]
        return self._database

    @property
    def issues(self) -> Collection:
        """Get the issues collection."""
        return self.database[self.collection_name]

    def close_connection(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    def health_check(self) -> Dict[str, Any]:
        """Check MongoDB connection health."""
        try:
            result = self.client.admin.command('ping')
            server_info = self.client.server_info()

            return {
                'status': 'healthy',
                'ping': result.get('ok') == 1,
                'version': server_info.get('version'),
                'database': self.database_name,
                'connection_pool_size': self.max_pool_size
            }
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'database': self.database_name
            }

    def _validate_object_id(self, doc_id: str) -> ObjectId:
        """Validate and convert string ID to ObjectId."""
        # ObjectId(None) would mint a fresh id
        if doc_id is None:
            raise ValueError("Missing ObjectId")
        try:
            return ObjectId(doc_id)
        except (InvalidId, TypeError):
            raise ValueError(f"Invalid ObjectId format: {doc_id}")

    @staticmethod
    def to_document(issue: Issue) -> Dict[str, Any]:
        """Serialize an issue to its persisted camelCase shape, without id."""
        return issue.model_dump(mode="json", by_alias=True, exclude={"id"})

    @staticmethod
    def to_issue(document: Dict[str, Any]) -> Issue:
        """Deserialize a stored document into an Issue."""
        document = dict(document)
        if "_id" in document:
            document["id"] = str(document.pop("_id"))
        return Issue.model_validate(document)

    # Issue operations

    def create_issue(self, issue: Issue) -> Issue:
        """
        Persist a newly enriched issue.

        Returns:
            The issue with its storage-assigned id
        """
        try:
            document = self.to_document(issue)
            document["_id"] = ObjectId()

            result = self.issues.insert_one(document)

            logger.info(
                f"Created issue {result.inserted_id}",
                extra={"zone_id": issue.zone_id, "category": issue.category}
            )
            return issue.model_copy(update={"id": str(result.inserted_id)})

        except DuplicateKeyError as e:
            logger.error(f"Duplicate key error creating issue: {e}")
            raise ConflictError("Issue with this share token already exists")
        except PyMongoError as e:
            logger.error(f"Failed to create issue: {e}")
            raise

    def find_issue(self, issue_id: str) -> Optional[Issue]:
        """Fetch an issue by id, None when absent or the id is malformed."""
        try:
            object_id = self._validate_object_id(issue_id)
        except ValueError as e:
            logger.warning(f"Invalid issue ID {issue_id}: {e}")
            return None

        try:
            document = self.issues.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Failed to find issue {issue_id}: {e}")
            raise

        if document is None:
            logger.debug(f"Issue {issue_id} not found")
            return None

        return self.to_issue(document)

    def find_issue_by_share_token(self, share_token: str) -> Optional[Issue]:
        """Fetch an issue by its public share token."""
        try:
            document = self.issues.find_one({"shareToken": share_token})
        except PyMongoError as e:
            logger.error(f"Failed to find issue by share token: {e}")
            raise

        return self.to_issue(document) if document else None

    def update_issue(self, issue: Issue, expected_timeline_length: int) -> Issue:
        """
        Persist status and timeline of an issue snapshot.

        The write only applies if the stored timeline still has
        expected_timeline_length entries, i.e. nobody else appended an event
        since the snapshot was read.

        Raises:
            NotFoundError: issue does not exist
            ConflictError: stored issue changed since the snapshot was read
        """
        try:
            object_id = self._validate_object_id(issue.id)
        except ValueError:
            raise NotFoundError(f"Issue not found: {issue.id}", issue.id)

        document = self.to_document(issue)
        query = {"_id": object_id, "timeline": {"$size": expected_timeline_length}}
        updates = {"status": document["status"], "timeline": document["timeline"]}

        try:
            result = self.issues.update_one(query, {"$set": updates})
        except PyMongoError as e:
            logger.error(f"Failed to update issue {issue.id}: {e}")
            raise

        if result.matched_count == 0:
            if self.issues.count_documents({"_id": object_id}, limit=1) == 0:
                raise NotFoundError(f"Issue not found: {issue.id}", issue.id)
            logger.warning(
                f"Stale snapshot for issue {issue.id}",
                extra={"expected_timeline_length": expected_timeline_length}
            )
            raise ConflictError(f"Issue {issue.id} was modified concurrently")

        logger.info(f"Updated issue {issue.id}", extra={"status": issue.status})
        return issue

    def increment_view_count(self, issue_id: str) -> bool:
        """Atomically increment the public view counter."""
        try:
            object_id = self._validate_object_id(issue_id)
        except ValueError as e:
            logger.warning(f"Invalid issue ID {issue_id}: {e}")
            return False

        try:
            result = self.issues.update_one({"_id": object_id}, {"$inc": {"viewCount": 1}})
        except PyMongoError as e:
            logger.error(f"Failed to increment view count for {issue_id}: {e}")
            raise

        return result.modified_count > 0

    def build_query(self, filters: IssueFilters, now: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Translate filters into a MongoDB query.

        Returns:
            Query document, or None when the filters cannot match anything
        """
        query: Dict[str, Any] = {}

        if filters.category is not None:
            query["category"] = filters.category

        if filters.severity is not None:
            query["severity"] = filters.severity

        if filters.status is not None:
            query["status"] = filters.status

        if filters.zone_id:
            query["zoneId"] = filters.zone_id

        if filters.overdue_only:
            if now is None:
                raise ValueError("now is required to filter overdue issues")
            if query.get("status") == IssueStatus.RESOLVED.value:
                return None
            query.setdefault("status", {"$ne": IssueStatus.RESOLVED.value})
            query["deadline"] = {"$ne": None, "$lt": now}

        return query

    def query_issues(self, filters: IssueFilters, now: Optional[int] = None) -> List[Issue]:
        """Find issues matching filters, newest submissions first."""
        query = self.build_query(filters, now)
        if query is None:
            return []

        try:
            cursor = self.issues.find(query).sort("submittedAt", DESCENDING)
            if filters.offset:
                cursor = cursor.skip(filters.offset)
            if filters.limit:
                cursor = cursor.limit(filters.limit)
            documents = list(cursor)
        except PyMongoError as e:
            logger.error(f"Failed to query issues: {e}")
            raise

        logger.debug(f"Query returned {len(documents)} issues", extra={"query": str(query)})
        return [self.to_issue(document) for document in documents]

    # Index Management

    def create_indexes(self) -> None:
        """Create indexes backing the issue queries."""
        try:
            logger.info("Creating MongoDB indexes...")

            self.issues.create_index("shareToken", unique=True)
            self.issues.create_index([("submittedAt", DESCENDING)])
            self.issues.create_index([("status", ASCENDING), ("submittedAt", DESCENDING)])
            self.issues.create_index([("category", ASCENDING), ("submittedAt", DESCENDING)])
            self.issues.create_index([("severity", ASCENDING), ("submittedAt", DESCENDING)])
            self.issues.create_index([("zoneId", ASCENDING), ("submittedAt", DESCENDING)])
            self.issues.create_index([("status", ASCENDING), ("deadline", ASCENDING)])
            self.issues.create_index("contractorId")

            logger.info("MongoDB indexes created successfully")

        except PyMongoError as e:
            logger.error(f"Failed to create MongoDB indexes: {e}")
            raise


# Singleton instance for application use
_mongodb_service: Optional[MongoDBService] = None


def get_mongodb_service() -> MongoDBService:
    """Get singleton MongoDB service instance."""
    global _mongodb_service
    if _mongodb_service is None:
        _mongodb_service = MongoDBService()
    return _mongodb_service


def close_mongodb_connection() -> None:
    """Close MongoDB connection (for cleanup)."""
    global _mongodb_service
    if _mongodb_service:
        _mongodb_service.close_connection()
        _mongodb_service = None
