"""
# Database Manager

This module implements the `DatabaseManager` class that owns the **Motor** (async MongoDB) client
for the whole application. It handles connecting with retry, graceful disconnect, health checks,
collection access and index creation.

## Index Catalog

| Collection | Fields | Options | Purpose |
|------------|--------|---------|---------|
| `users` | `username` | unique | Username uniqueness |
| `users` | `email` | unique | Email uniqueness |
| `users` | `role` | | Last-admin checks and role filters |
| `organizations` | `org_name` | unique | Organization name uniqueness |
| `officers` | `user_id`, `org_id` | unique | One officer record per (user, organization) |
| `calendar_entries` | `created_by`, `event_id` | unique | One calendar entry per (user, event) |
| `event_notifications` | `event_id`, `recipient_id` | | Duplicate-recipient detection |
| `school_events` | `date` | | Upcoming/past filtering |
| `reports` | `org_id`, `submitted_date` (-1) | | Organization report history |
| `otps` | `expires_at` | TTL 3600s | Purge stale codes |
| `otps` | `email`, `is_verified` | | Latest unverified code lookup |
| `otps` | `email`, `otp` | | Code verification |
| `audit_logs` | `user_id` | | User activity |
| `audit_logs` | `created_at` (-1) | | Timeline queries |

## Usage

```python
from campushub.database import db_manager

await db_manager.connect()
users = db_manager.get_collection("users")
user = await users.find_one({"username": "alice"})
await db_manager.disconnect()
```
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from campushub.config import settings
from campushub.managers.logging_manager import get_logger

logger = get_logger()
db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")

INDEXES: List[Dict[str, Any]] = [
    {"collection": "users", "index": [("username", ASCENDING)], "options": {"name": "username_idx", "unique": True}},
    {"collection": "users", "index": [("email", ASCENDING)], "options": {"name": "email_idx", "unique": True}},
    {"collection": "users", "index": [("role", ASCENDING)], "options": {"name": "role_idx"}},
    {
        "collection": "organizations",
        "index": [("org_name", ASCENDING)],
        "options": {"name": "org_name_idx", "unique": True},
    },
    {
        "collection": "officers",
        "index": [("user_id", ASCENDING), ("org_id", ASCENDING)],
        "options": {"name": "user_org_idx", "unique": True},
    },
    {
        "collection": "calendar_entries",
        "index": [("created_by", ASCENDING), ("event_id", ASCENDING)],
        "options": {"name": "user_event_idx", "unique": True},
    },
    {
        "collection": "event_notifications",
        "index": [("event_id", ASCENDING), ("recipient_id", ASCENDING)],
        "options": {"name": "event_recipient_idx"},
    },
    {"collection": "school_events", "index": [("date", ASCENDING)], "options": {"name": "date_idx"}},
    {
        "collection": "reports",
        "index": [("org_id", ASCENDING), ("submitted_date", DESCENDING)],
        "options": {"name": "org_submitted_idx"},
    },
    {
        "collection": "otps",
        "index": [("expires_at", ASCENDING)],
        "options": {"name": "expires_at_ttl_idx", "expireAfterSeconds": 3600},
    },
    {
        "collection": "otps",
        "index": [("email", ASCENDING), ("is_verified", ASCENDING)],
        "options": {"name": "email_verified_idx"},
    },
    {
        "collection": "otps",
        "index": [("email", ASCENDING), ("otp", ASCENDING)],
        "options": {"name": "email_otp_idx"},
    },
    {"collection": "audit_logs", "index": [("user_id", ASCENDING)], "options": {"name": "user_idx"}},
    {"collection": "audit_logs", "index": [("created_at", DESCENDING)], "options": {"name": "created_at_desc_idx"}},
]


class DatabaseManager:
    """
    Owner of the MongoDB client and database handle.

    This class is used as a singleton via the `db_manager` global instance. Construction does
    no I/O; the connection is established in `connect()` during application startup.
    """

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3

    async def connect(self):
        """
        Establish connection to MongoDB with exponential backoff retry logic.

        Up to three attempts are made with delays of 1s and 2s between them. The connection
        is verified with a `ping` before the method returns.

        Raises:
            ServerSelectionTimeoutError | ConnectionFailure: If every attempt fails.
        """
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info(
                    "MongoDB connection config - Database: %s, ServerTimeout: %dms, ConnTimeout: %dms",
                    settings.database_name,
                    settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    settings.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    settings.MONGODB_URL,
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                    maxPoolSize=50,
                    minPoolSize=5,
                    tz_aware=True,
                )
                self.database = self.client[settings.database_name]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                total_duration = time.time() - start_time
                perf_logger.info(
                    "MongoDB connection established successfully in %.3fs (ping: %.3fs)", total_duration, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", settings.database_name)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                attempt_duration = time.time() - attempt_start
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, attempt_duration)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise
                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """Close the Motor client and release all pooled connections."""
        start_time = time.time()
        db_logger.info("Starting MongoDB disconnection process")
        if self.client:
            self.client.close()
            perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
            db_logger.info("Successfully disconnected from MongoDB")
        else:
            db_logger.info("No active MongoDB connection to close")

    async def health_check(self) -> bool:
        """
        Ping the server.

        Returns:
            `bool`: `True` if the database is reachable and responding, `False` otherwise.
        """
        try:
            if self.client is None:
                health_logger.warning("Health check failed: No database client available")
                return False
            await self.client.admin.command("ping")
            return True
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            health_logger.error("Database health check failed: %s", e)
            return False
        except PyMongoError as e:
            health_logger.error("Unexpected error during health check: %s", e)
            return False

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Return a Motor collection from the connected database.

        Raises:
            RuntimeError: If called before `connect()`.
        """
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database[collection_name]

    async def create_indexes(self):
        """
        Create every index in `INDEXES`.

        Individual failures are logged as warnings and do not stop the remaining indexes
        from being created.
        """
        start_time = time.time()
        db_logger.info("Starting database index creation process")

        created_count = 0
        for index_spec in INDEXES:
            collection_name = index_spec["collection"]
            options = index_spec.get("options", {})
            try:
                collection = self.get_collection(collection_name)
                await collection.create_index(index_spec["index"], **options)
                created_count += 1
                db_logger.debug("Created index %s on collection %s", options.get("name", "unnamed"), collection_name)
            except PyMongoError as e:
                db_logger.warning(
                    "Failed to create index %s on collection %s: %s", options.get("name", "unnamed"), collection_name, e
                )

        perf_logger.info("Database index creation completed in %.3fs", time.time() - start_time)
        db_logger.info("Database indexes ready: %d/%d", created_count, len(INDEXES))


db_manager = DatabaseManager()
