"""Item lookup tool for the inventory agent.

Semantic search first, lexical search when the vector index returns nothing.
The tool reports every outcome, failures included, as a JSON string so the
model always has a result to reason about.
"""

import logging
from typing import Optional

from langchain_core.tools import BaseTool, tool
from pydantic import BaseModel, Field

from inventory_agent.database.inventory_store import InventoryStore
from inventory_agent.models.inventory import LEXICAL_SEARCH_FIELDS
from inventory_agent.models.lookup import (
    EmptyInventoryResult,
    LookupFailure,
    LookupResults,
    SearchType,
)
from inventory_agent.services.model_gateway import EmbedQuery
from inventory_agent.utils.helpers import truncate_text

logger = logging.getLogger(__name__)

DEFAULT_RESULT_COUNT = 10
MAX_RESULT_COUNT = 50
SAMPLE_SIZE = 3


class ItemLookupInput(BaseModel):
    """Arguments the model supplies to ``item_lookup``."""

    query: str = Field(..., description="The search query for items.")
    n: Optional[float] = Field(
        default=DEFAULT_RESULT_COUNT,
        description="Number of results to return (default 10).",
    )


def clamp_result_count(n: Optional[float]) -> int:
    """Result count actually searched for: default when missing, kept within 1..MAX_RESULT_COUNT."""
    if n is None:
        return DEFAULT_RESULT_COUNT
    return max(1, min(int(n), MAX_RESULT_COUNT))


async def lookup_items(
    query: str,
    n: Optional[float],
    *,
    store: InventoryStore,
    embed_query: EmbedQuery,
) -> str:
    """Search the inventory and return a serialised lookup payload."""
    try:
        n = clamp_result_count(n)
        logger.info("item_lookup called with query: %s (n=%d)", truncate_text(query), n)

        total = await store.count()
        logger.info("Inventory holds %d items", total)
        if total == 0:
            logger.warning("Inventory collection is empty")
            return EmptyInventoryResult().to_json()

        if logger.isEnabledFor(logging.DEBUG):
            sample = await store.sample(SAMPLE_SIZE)
            logger.debug("Sample items: %s", [item.item_name for item in sample])

        embedding = await embed_query(query)
        matches = await store.similarity_search(embedding, n)
        logger.info("Vector search returned %d match(es)", len(matches))

        if matches:
            results = [{**item.to_result(), "score": score} for item, score in matches]
            return LookupResults(
                results=results,
                search_type=SearchType.VECTOR,
                query=query,
                count=len(results),
            ).to_json()

        logger.info("Vector search empty, falling back to text search")
        items = await store.text_search(query, LEXICAL_SEARCH_FIELDS, n)
        logger.info("Text search returned %d item(s)", len(items))
        return LookupResults(
            results=[item.to_result() for item in items],
            search_type=SearchType.TEXT,
            query=query,
            count=len(items),
        ).to_json()

    except Exception as e:
        logger.error("item_lookup failed for query %r: %s", query, e, exc_info=True)
        return LookupFailure(details=str(e) or type(e).__name__, query=query).to_json()


def create_item_lookup_tool(
    store: InventoryStore,
    embed_query: EmbedQuery,
) -> BaseTool:
    """Create the item_lookup tool with injected store and embedder.

    Args:
        store: Inventory collection queries.
        embed_query: Coroutine turning the query text into an embedding.

    Returns:
        A LangGraph-compatible BaseTool
    """

    @tool("item_lookup", args_schema=ItemLookupInput)
    async def item_lookup(query: str, n: Optional[float] = DEFAULT_RESULT_COUNT) -> str:
        """Look up furniture items in the store inventory using vector and text search.

        Use this tool for every question about furniture: availability,
        materials, colours, prices, or recommendations.

        Returns a JSON object with the matching items, the search type used
        ("vector" or "text") and the number of matches, or an error object
        when the inventory is empty or the search failed.
        """
        return await lookup_items(query, n, store=store, embed_query=embed_query)

    return item_lookup
