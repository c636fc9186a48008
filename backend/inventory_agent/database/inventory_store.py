"""Read-only queries against the inventory items collection."""

import logging
import re
from typing import Any, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError

from inventory_agent.models.inventory import InventoryItem

logger = logging.getLogger(__name__)


def _parse_item(doc: dict[str, Any]) -> Optional[InventoryItem]:
    """Validate one stored document; malformed documents are skipped."""
    try:
        return InventoryItem.model_validate(doc)
    except ValidationError as e:
        logger.warning("Skipping malformed inventory item %s: %s", doc.get("_id"), e)
        return None


class InventoryStore:
    """Document-store operations used by the item lookup tool.

    Wraps a motor collection holding items with a pre-computed embedding and
    an Atlas ``$vectorSearch`` index over it.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        *,
        index_name: str = "vector_index",
        embedding_key: str = "embedding",
        num_candidates_factor: int = 10,
    ) -> None:
        self.collection = collection
        self.index_name = index_name
        self.embedding_key = embedding_key
        self.num_candidates_factor = num_candidates_factor

    @property
    def _projection(self) -> dict[str, int]:
        return {self.embedding_key: 0}

    async def count(self) -> int:
        """Total number of items in the collection."""
        return await self.collection.count_documents({})

    async def sample(self, limit: int = 3) -> list[InventoryItem]:
        """First ``limit`` items, for diagnostics."""
        cursor = self.collection.find({}, self._projection).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [item for item in map(_parse_item, docs) if item is not None]

    async def similarity_search(
        self,
        embedding: Sequence[float],
        k: int,
    ) -> list[tuple[InventoryItem, float]]:
        """Nearest items to ``embedding`` with their vector search scores."""
        pipeline: list[dict[str, Any]] = [
            {
                "$vectorSearch": {
                    "index": self.index_name,
                    "path": self.embedding_key,
                    "queryVector": list(embedding),
                    "numCandidates": k * self.num_candidates_factor,
                    "limit": k,
                }
            },
            {"$set": {"score": {"$meta": "vectorSearchScore"}}},
            {"$project": self._projection},
        ]
        cursor = self.collection.aggregate(pipeline)
        docs = await cursor.to_list(length=k)

        matches: list[tuple[InventoryItem, float]] = []
        for doc in docs:
            score = float(doc.pop("score", 0.0))
            item = _parse_item(doc)
            if item is not None:
                matches.append((item, score))
        return matches

    async def text_search(
        self,
        pattern: str,
        fields: Sequence[str],
        limit: int,
    ) -> list[InventoryItem]:
        """Items where any of ``fields`` contains ``pattern``, ignoring case.

        ``pattern`` is matched literally; regex metacharacters in user text are
        escaped.
        """
        regex = re.escape(pattern)
        query = {"$or": [{field: {"$regex": regex, "$options": "i"}} for field in fields]}
        cursor = self.collection.find(query, self._projection).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [item for item in map(_parse_item, docs) if item is not None]
