"""Shared test fixtures for the inventory agent test suite."""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

import pytest
from langchain_core.messages import AIMessage, BaseMessage

from inventory_agent.errors import PersistenceFailureError
from inventory_agent.models.inventory import InventoryItem
from inventory_agent.services.backoff import BackoffPolicy


# ── Fakes ────────────────────────────────────────────────────────────


class ScriptedChatModel:
    """Chat model double replaying a fixed list of assistant replies."""

    def __init__(self, replies: Sequence[AIMessage | Exception] = ()) -> None:
        self.replies = list(replies)
        self.prompts: list[list[BaseMessage]] = []
        self.bound_tools: list[Any] = []

    def bind_tools(self, tools):
        self.bound_tools = list(tools)
        return self

    async def ainvoke(self, messages, config=None, **kwargs):
        self.prompts.append(list(messages))
        await asyncio.sleep(0)
        if not self.replies:
            raise AssertionError("ScriptedChatModel ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class LoopingChatModel(ScriptedChatModel):
    """Chat model that requests the lookup tool forever."""

    async def ainvoke(self, messages, config=None, **kwargs):
        self.prompts.append(list(messages))
        n = len(self.prompts)
        return AIMessage(
            content="",
            tool_calls=[{"name": "item_lookup", "args": {"query": f"chair {n}"}, "id": f"call_{n}"}],
        )


class FakeInventoryStore:
    """In-memory stand-in for ``InventoryStore`` recording each call."""

    def __init__(
        self,
        items: Sequence[InventoryItem] = (),
        vector_matches: Sequence[tuple[InventoryItem, float]] = (),
        text_matches: Optional[Sequence[InventoryItem]] = None,
    ) -> None:
        self.items = list(items)
        self.vector_matches = list(vector_matches)
        self.text_matches = list(text_matches) if text_matches is not None else []
        self.calls: list[tuple[str, tuple]] = []
        self.fail_on: Optional[str] = None

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))
        if self.fail_on == name:
            raise RuntimeError(f"{name} exploded")

    def calls_to(self, name: str) -> list[tuple]:
        return [args for call, args in self.calls if call == name]

    async def count(self) -> int:
        self._record("count")
        return len(self.items)

    async def sample(self, limit: int = 3) -> list[InventoryItem]:
        self._record("sample", limit)
        return self.items[:limit]

    async def similarity_search(self, embedding, k: int):
        self._record("similarity_search", list(embedding), k)
        return self.vector_matches[:k]

    async def text_search(self, pattern: str, fields, limit: int):
        self._record("text_search", pattern, tuple(fields), limit)
        return self.text_matches[:limit]


class FakeCheckpointStore:
    """Dict-backed stand-in for ``CheckpointStore``."""

    def __init__(self) -> None:
        self.threads: dict[str, list[BaseMessage]] = {}
        self.saves: list[tuple[str, int]] = []
        self.fail_save_after: Optional[int] = None

    async def load(self, thread_id: str):
        await asyncio.sleep(0)
        messages = self.threads.get(thread_id)
        return list(messages) if messages is not None else None

    async def save(self, thread_id: str, messages) -> None:
        if self.fail_save_after is not None and len(self.saves) >= self.fail_save_after:
            raise PersistenceFailureError("disk full")
        self.saves.append((thread_id, len(messages)))
        self.threads[thread_id] = list(messages)

    async def delete(self, thread_id: str) -> None:
        self.threads.pop(thread_id, None)


# ── Fixtures ─────────────────────────────────────────────────────────


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def no_sleep_backoff() -> BackoffPolicy:
    """Backoff policy that never actually waits."""
    return BackoffPolicy(max_attempts=3, sleep=_no_sleep)


@pytest.fixture
def fake_embed():
    """Embedder returning a fixed vector and recording queries."""
    queries: list[str] = []

    async def _embed(text: str) -> list[float]:
        queries.append(text)
        return [0.1, 0.2, 0.3]

    _embed.queries = queries
    return _embed


@pytest.fixture
def desk_items() -> list[InventoryItem]:
    return [
        InventoryItem(
            _id="65a1",
            item_name="Oak Writing Desk",
            item_description="Solid oak desk with two drawers",
            categories=["desks", "office"],
            embedding_text="Oak Writing Desk solid oak desk with two drawers",
            price=249.0,
        ),
        InventoryItem(
            _id="65a2",
            item_name="Standing Desk",
            item_description="Height adjustable standing desk",
            categories=["desks"],
            embedding_text="Standing Desk height adjustable",
            price=399.0,
        ),
    ]


@pytest.fixture
def checkpoint_store() -> FakeCheckpointStore:
    return FakeCheckpointStore()
