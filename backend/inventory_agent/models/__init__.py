"""Data models package."""

from inventory_agent.models.conversation import (
    MessageRole,
    message_role,
    message_text,
    pending_tool_calls,
)
from inventory_agent.models.inventory import LEXICAL_SEARCH_FIELDS, InventoryItem
from inventory_agent.models.lookup import (
    EmptyInventoryResult,
    LookupFailure,
    LookupResults,
    SearchType,
)
from inventory_agent.models.request import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Conversation
    "MessageRole",
    "message_role",
    "message_text",
    "pending_tool_calls",
    # Inventory
    "InventoryItem",
    "LEXICAL_SEARCH_FIELDS",
    # Lookup payloads
    "SearchType",
    "EmptyInventoryResult",
    "LookupResults",
    "LookupFailure",
    # Request/Response models
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
]
