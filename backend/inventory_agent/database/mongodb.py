"""MongoDB connection management."""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure

from inventory_agent.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MongoDB:
    """MongoDB connection manager for the inventory and checkpoint collections."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize MongoDB connection state."""
        self.settings = settings or get_settings()
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                self.settings.mongodb_url,
                maxPoolSize=self.settings.mongodb_max_pool_size,
                minPoolSize=self.settings.mongodb_min_pool_size,
            )
            self.db = self.client[self.settings.mongodb_database]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", self.settings.mongodb_database)

            await self._create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    async def ping(self) -> bool:
        """Return True when the server answers a ping."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except ConnectionFailure:
            return False

    async def _create_indexes(self) -> None:
        """Create database indexes owned by this service.

        The Atlas vector index on the items collection is managed outside the
        service and is never created here.
        """
        await self.checkpoints.create_index(
            [("namespace", ASCENDING), ("thread_id", ASCENDING)],
            unique=True,
            name="namespace_thread_unique",
        )
        logger.info("MongoDB indexes created")

    def _collection(self, name: str) -> AsyncIOMotorCollection:
        if self.db is None:
            raise ConnectionError("Database not connected")
        return self.db[name]

    @property
    def items(self) -> AsyncIOMotorCollection:
        """Inventory items collection."""
        return self._collection(self.settings.mongodb_items_collection)

    @property
    def checkpoints(self) -> AsyncIOMotorCollection:
        """Conversation checkpoint collection."""
        return self._collection(self.settings.mongodb_checkpoint_collection)


# Global MongoDB instance
mongodb = MongoDB()
