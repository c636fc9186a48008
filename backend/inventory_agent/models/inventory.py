"""Inventory item data models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Text fields searched by the lexical fallback, in match order
LEXICAL_SEARCH_FIELDS: tuple[str, ...] = (
    "item_name",
    "item_description",
    "categories",
    "embedding_text",
)


class InventoryItem(BaseModel):
    """Inventory item as stored in the ``items`` collection.

    Items are owned by the catalogue loader; the agent only reads them. Any
    additional fields on the stored document (price, dimensions, ...) are kept
    as extras so they reach the model unchanged.
    """

    id: Optional[str] = Field(default=None, alias="_id")
    item_name: Optional[str] = None
    item_description: Optional[str] = None
    categories: Optional[list[str] | str] = None
    embedding_text: Optional[str] = None
    embedding: Optional[list[float]] = Field(default=None, repr=False)

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Optional[str]:
        """ObjectId values are exposed as plain strings."""
        return None if v is None else str(v)

    def to_result(self) -> dict[str, Any]:
        """Item fields as returned to the model, without the embedding vector."""
        return self.model_dump(by_alias=True, exclude={"embedding"}, exclude_none=True)
