"""Ollama chat and embedding clients.

Builds the LangChain Ollama clients from settings and wraps the embedding call
so that client failures surface as typed errors and rate limiting is retried.
"""

import logging
from typing import Awaitable, Callable

from langchain_ollama import ChatOllama, OllamaEmbeddings

from inventory_agent.config import Settings
from inventory_agent.errors import classify_external_error
from inventory_agent.services.backoff import BackoffPolicy

logger = logging.getLogger(__name__)

EmbedQuery = Callable[[str], Awaitable[list[float]]]


def build_chat_model(settings: Settings) -> ChatOllama:
    """Chat model used by the agent node (tools are bound by the service)."""
    return ChatOllama(
        base_url=settings.ollama_base_url,
        model=settings.ollama_model,
        temperature=settings.ollama_temperature,
    )


def build_embeddings(settings: Settings) -> OllamaEmbeddings:
    """Embedding model matching the one used to build the vector index."""
    return OllamaEmbeddings(
        base_url=settings.ollama_base_url,
        model=settings.ollama_embedding_model,
    )


def make_embed_query(embeddings: OllamaEmbeddings, backoff: BackoffPolicy) -> EmbedQuery:
    """Return a coroutine function embedding one query with backoff."""

    async def _embed_once(text: str) -> list[float]:
        try:
            return await embeddings.aembed_query(text)
        except Exception as e:
            raise classify_external_error(e, service="embedding model") from e

    async def embed_query(text: str) -> list[float]:
        return await backoff.run(lambda: _embed_once(text), description="embedding model")

    return embed_query
