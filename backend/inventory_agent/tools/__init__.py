"""LangGraph agent tools for the inventory agent.

- item_lookup: Search the furniture inventory (vector search with text fallback)
"""

from inventory_agent.tools.item_lookup_tool import (
    ItemLookupInput,
    create_item_lookup_tool,
    lookup_items,
)

__all__ = [
    "ItemLookupInput",
    "create_item_lookup_tool",
    "lookup_items",
]
