"""Database package."""

from inventory_agent.database.checkpoint_store import CheckpointStore
from inventory_agent.database.inventory_store import InventoryStore
from inventory_agent.database.mongodb import MongoDB, mongodb

__all__ = [
    "MongoDB",
    "mongodb",
    "InventoryStore",
    "CheckpointStore",
]
