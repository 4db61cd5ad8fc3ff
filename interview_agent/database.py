"""Database connection and utilities."""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from interview_agent.config import Settings
from interview_agent.errors import DatabaseUnavailableError


logger = logging.getLogger(__name__)


class Database:
    """MongoDB connection manager owned by the application lifespan."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    async def connect(self) -> bool:
        """Connect to MongoDB, retrying a fixed number of times.

        When every attempt fails the application keeps running without a
        database; routes that need one answer with 503 until restart.
        """
        attempts = self.settings.db_connect_retries + 1
        for attempt in range(1, attempts + 1):
            client = AsyncIOMotorClient(
                self.settings.mongodb_url,
                maxPoolSize=self.settings.mongodb_max_pool_size,
                serverSelectionTimeoutMS=self.settings.mongodb_server_selection_timeout_ms,
            )
            try:
                await client.admin.command("ping")
            except PyMongoError as exc:
                client.close()
                remaining = attempts - attempt
                logger.error("❌ MongoDB connection failed (%d retries left): %s", remaining, exc)
                if remaining:
                    logger.info("🔄 Retrying connection in %s seconds...", self.settings.db_connect_retry_delay)
                    await asyncio.sleep(self.settings.db_connect_retry_delay)
                continue

            self.client = client
            self.db = client[self.settings.mongodb_db_name]
            logger.info("✅ Connected to MongoDB: %s", self.settings.mongodb_db_name)
            return True

        logger.error("❌ Failed to connect to MongoDB after multiple attempts. Continuing without database.")
        return False

    async def disconnect(self):
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("📴 Disconnected from MongoDB")
        self.client = None
        self.db = None

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.db is None:
            raise DatabaseUnavailableError()
        return self.db

    async def ensure_indexes(self):
        """Create the secondary indexes the API queries rely on."""
        db = self.get_database()
        await db.interviews.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        await db.interviews.create_index("topic")
        await db.interviews.create_index([("score", DESCENDING)])
        await db.interviews.create_index("session_id")
        await db.users.create_index("email", unique=True)
        await db.users.create_index([("created_at", DESCENDING)])
        await db.users.create_index("is_active")

    async def check_health(self) -> dict:
        timestamp = datetime.utcnow().isoformat()
        if self.client is None or self.db is None:
            return {"status": "unhealthy", "error": "Database not connected", "timestamp": timestamp}
        try:
            await self.db.command("ping")
        except PyMongoError as exc:
            return {"status": "unhealthy", "error": str(exc), "timestamp": timestamp}
        return {"status": "healthy", "timestamp": timestamp}


# Dependency for FastAPI routes
async def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Get database dependency for routes."""
    database: Database = request.app.state.database
    return database.get_database()
