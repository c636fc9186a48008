"""Utility helper functions."""

import uuid
from datetime import UTC, datetime


def generate_thread_id() -> str:
    """Generate a fresh conversation thread identifier."""
    return uuid.uuid4().hex


def get_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(UTC).isoformat()


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
