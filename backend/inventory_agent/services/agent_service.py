"""Turn execution for the furniture inventory agent.

One turn = load the thread's transcript, append the user's message, run the
agent graph until it stops calling tools, and return the last assistant reply.
The transcript is checkpointed after every graph step. If the turn fails the
thread is restored to the transcript it had before the turn started.
"""

import logging
from typing import Any, Optional, Sequence

from langchain_core.messages import BaseMessage, HumanMessage
from langgraph.errors import GraphRecursionError

from inventory_agent.config import Settings, get_settings
from inventory_agent.database.checkpoint_store import CheckpointStore
from inventory_agent.database.inventory_store import InventoryStore
from inventory_agent.database.mongodb import MongoDB
from inventory_agent.errors import (
    AgentError,
    InvalidInputError,
    LoopLimitExceededError,
    PersistenceFailureError,
    UpstreamServiceError,
)
from inventory_agent.graph.builder import build_inventory_graph
from inventory_agent.models.conversation import MessageRole, message_role, message_text
from inventory_agent.services.backoff import BackoffPolicy
from inventory_agent.services.model_gateway import (
    EmbedQuery,
    build_chat_model,
    build_embeddings,
    make_embed_query,
)
from inventory_agent.services.thread_locks import ThreadLockRegistry
from inventory_agent.tools.item_lookup_tool import create_item_lookup_tool
from inventory_agent.utils.helpers import truncate_text

logger = logging.getLogger(__name__)


class InventoryAgentService:
    """Runs conversation turns against explicitly injected collaborators."""

    def __init__(
        self,
        *,
        llm: Any,
        inventory_store: InventoryStore,
        checkpoint_store: CheckpointStore,
        embed_query: EmbedQuery,
        settings: Optional[Settings] = None,
        backoff: Optional[BackoffPolicy] = None,
    ) -> None:
        """Build the tool set and compile the agent graph.

        Args:
            llm: LangChain chat model supporting ``bind_tools``.
            inventory_store: Queries against the items collection.
            checkpoint_store: Transcript persistence.
            embed_query: Coroutine embedding lookup queries.
            settings: Application settings, defaults to the cached instance.
            backoff: Retry policy for model calls, defaults to the configured one.
        """
        self.settings = settings or get_settings()
        self.checkpoint_store = checkpoint_store
        self.backoff = backoff or BackoffPolicy.from_settings(self.settings)
        self.locks = ThreadLockRegistry()

        self.tools = [create_item_lookup_tool(inventory_store, embed_query)]
        self.graph = build_inventory_graph(
            llm.bind_tools(self.tools),
            self.tools,
            self.backoff,
        )

    async def start_turn(self, thread_id: str, user_message: str) -> str:
        """Run one conversation turn and return the assistant's reply text.

        Raises:
            InvalidInputError: empty thread id or message; nothing is touched.
            LoopLimitExceededError: the agent/tools loop exceeded its step budget.
            AgentError: any other fatal failure (rate limits, auth, persistence).
        """
        if not thread_id or not thread_id.strip():
            raise InvalidInputError("Thread id is required")
        if not isinstance(user_message, str) or not user_message.strip():
            raise InvalidInputError("Message is required and must be non-empty text")

        async with self.locks.hold(thread_id):
            history = await self.checkpoint_store.load(thread_id)
            logger.info(
                "Starting turn on thread %s with %d prior message(s): %s",
                thread_id,
                len(history or []),
                truncate_text(user_message),
            )
            try:
                transcript = await self._run_graph(thread_id, [*(history or []), HumanMessage(content=user_message)])
            except AgentError:
                await self._restore(thread_id, history)
                raise
            except Exception as e:
                await self._restore(thread_id, history)
                raise UpstreamServiceError(f"Agent failed: {e}") from e

        reply = transcript[-1]
        if message_role(reply) is not MessageRole.ASSISTANT:
            raise UpstreamServiceError("Turn ended without an assistant reply")
        text = message_text(reply)
        logger.info("Turn on thread %s finished after %d message(s)", thread_id, len(transcript))
        return text

    async def _run_graph(self, thread_id: str, messages: list[BaseMessage]) -> list[BaseMessage]:
        """Stream the graph, checkpointing the transcript after each step."""
        limit = self.settings.agent_recursion_limit
        transcript: list[BaseMessage] = messages
        try:
            async for values in self.graph.astream(
                {"messages": messages},
                config={"recursion_limit": limit},
                stream_mode="values",
            ):
                transcript = values["messages"]
                await self.checkpoint_store.save(thread_id, transcript)
        except GraphRecursionError as e:
            logger.error("Thread %s exceeded the step limit of %d", thread_id, limit)
            raise LoopLimitExceededError(
                f"Agent exceeded {limit} steps without finishing",
                limit=limit,
            ) from e
        return transcript

    async def _restore(self, thread_id: str, history: Optional[Sequence[BaseMessage]]) -> None:
        """Put the thread back to its pre-turn checkpoint."""
        try:
            if history is None:
                await self.checkpoint_store.delete(thread_id)
            else:
                await self.checkpoint_store.save(thread_id, history)
            logger.warning("Rolled thread %s back to %d message(s)", thread_id, len(history or []))
        except PersistenceFailureError:
            logger.exception("Failed to roll back thread %s", thread_id)


def create_agent_service(database: MongoDB, settings: Optional[Settings] = None) -> InventoryAgentService:
    """Wire the production collaborators around a connected MongoDB."""
    settings = settings or get_settings()
    backoff = BackoffPolicy.from_settings(settings)

    inventory_store = InventoryStore(
        database.items,
        index_name=settings.vector_index_name,
        embedding_key=settings.vector_embedding_key,
        num_candidates_factor=settings.vector_num_candidates_factor,
    )
    checkpoint_store = CheckpointStore(database.checkpoints, namespace=settings.checkpoint_ns)
    embed_query = make_embed_query(build_embeddings(settings), backoff)

    return InventoryAgentService(
        llm=build_chat_model(settings),
        inventory_store=inventory_store,
        checkpoint_store=checkpoint_store,
        embed_query=embed_query,
        settings=settings,
        backoff=backoff,
    )
