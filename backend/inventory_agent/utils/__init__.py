"""Utilities package."""

from inventory_agent.utils.helpers import (
    generate_thread_id,
    get_timestamp,
    truncate_text,
)
from inventory_agent.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "generate_thread_id",
    "get_timestamp",
    "truncate_text",
]
