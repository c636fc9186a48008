"""Durable conversation checkpoints keyed by thread id."""

import logging
from datetime import UTC, datetime
from typing import Optional, Sequence

from langchain_core.messages import BaseMessage, messages_from_dict, messages_to_dict
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from inventory_agent.errors import PersistenceFailureError

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Stores one ordered message list per ``(namespace, thread_id)``.

    Writes are whole-document upserts: the last writer for a thread wins.
    """

    def __init__(self, collection: AsyncIOMotorCollection, namespace: str) -> None:
        self.collection = collection
        self.namespace = namespace

    def _key(self, thread_id: str) -> dict[str, str]:
        return {"namespace": self.namespace, "thread_id": thread_id}

    async def load(self, thread_id: str) -> Optional[list[BaseMessage]]:
        """Return the saved transcript for ``thread_id``, or None for a new thread."""
        try:
            doc = await self.collection.find_one(self._key(thread_id), {"_id": 0})
        except PyMongoError as e:
            logger.error("Checkpoint read failed for thread %s: %s", thread_id, e)
            raise PersistenceFailureError(f"Failed to load checkpoint for thread {thread_id}") from e

        if doc is None:
            return None

        try:
            messages = messages_from_dict(doc.get("messages", []))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Checkpoint for thread %s is corrupt: %s", thread_id, e)
            raise PersistenceFailureError(f"Checkpoint for thread {thread_id} is unreadable") from e

        logger.debug("Loaded %d messages for thread %s", len(messages), thread_id)
        return messages

    async def save(self, thread_id: str, messages: Sequence[BaseMessage]) -> None:
        """Replace the saved transcript for ``thread_id``."""
        document = {
            **self._key(thread_id),
            "messages": messages_to_dict(list(messages)),
            "message_count": len(messages),
            "updated_at": datetime.now(UTC),
        }
        try:
            await self.collection.replace_one(self._key(thread_id), document, upsert=True)
        except PyMongoError as e:
            logger.error("Checkpoint write failed for thread %s: %s", thread_id, e)
            raise PersistenceFailureError(f"Failed to save checkpoint for thread {thread_id}") from e

        logger.debug("Saved %d messages for thread %s", len(messages), thread_id)

    async def delete(self, thread_id: str) -> None:
        """Remove the checkpoint for ``thread_id`` if present."""
        try:
            await self.collection.delete_one(self._key(thread_id))
        except PyMongoError as e:
            logger.error("Checkpoint delete failed for thread %s: %s", thread_id, e)
            raise PersistenceFailureError(f"Failed to delete checkpoint for thread {thread_id}") from e
