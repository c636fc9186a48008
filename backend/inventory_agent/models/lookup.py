"""Result payloads produced by the item lookup tool.

The tool always answers with exactly one of these shapes, serialised to JSON.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

EMPTY_INVENTORY_ERROR = "No items found in inventory"
EMPTY_INVENTORY_MESSAGE = "The inventory database appears to be empty"
LOOKUP_FAILURE_ERROR = "Failed to search inventory"


class SearchType(str, Enum):
    """Which search path produced the returned items."""

    VECTOR = "vector"
    TEXT = "text"


class _LookupPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    def to_json(self) -> str:
        # default=str covers driver types (ObjectId, Decimal128) kept in item extras
        return json.dumps(self.model_dump(by_alias=True), default=str)


class EmptyInventoryResult(_LookupPayload):
    """The backing collection holds no items; no search was attempted."""

    error: str = EMPTY_INVENTORY_ERROR
    message: str = EMPTY_INVENTORY_MESSAGE
    count: int = 0


class LookupResults(_LookupPayload):
    """Items found by vector or text search."""

    results: list[dict[str, Any]] = Field(default_factory=list)
    search_type: SearchType = Field(alias="searchType")
    query: str
    count: int


class LookupFailure(_LookupPayload):
    """Search failed; ``details`` carries the reason for the model."""

    error: str = LOOKUP_FAILURE_ERROR
    details: str
    query: str
