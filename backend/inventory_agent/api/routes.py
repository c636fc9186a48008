"""API routes for the inventory agent."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from inventory_agent.api.dependencies import get_agent_service
from inventory_agent.config import get_settings
from inventory_agent.database.mongodb import mongodb
from inventory_agent.errors import (
    AgentError,
    ExhaustedRetriesError,
    InvalidInputError,
    RateLimitedError,
)
from inventory_agent.models.request import ChatRequest, ChatResponse, HealthResponse
from inventory_agent.services.agent_service import InventoryAgentService
from inventory_agent.utils.helpers import generate_thread_id

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix=settings.api_prefix)

RATE_LIMIT_DETAIL = "Service temporarily unavailable due to rate limits. Please try again in a minute."
GENERIC_FAILURE_DETAIL = "Failed to process chat request"


async def _run_turn(service: InventoryAgentService, thread_id: str, message: str) -> ChatResponse:
    """Run a turn and translate agent failures into HTTP errors."""
    try:
        response = await service.start_turn(thread_id, message)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (RateLimitedError, ExhaustedRetriesError) as e:
        logger.error("Chat failed on thread %s (%s): %s", thread_id, e.kind.value, e, exc_info=True)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=RATE_LIMIT_DETAIL)
    except AgentError as e:
        logger.error("Chat failed on thread %s (%s): %s", thread_id, e.kind.value, e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=GENERIC_FAILURE_DETAIL,
        )
    return ChatResponse(thread_id=thread_id, response=response)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    mongodb_status = "connected" if await mongodb.ping() else "disconnected"
    return HealthResponse(
        status="healthy" if mongodb_status == "connected" else "degraded",
        version=settings.app_version,
        services={
            "mongodb": mongodb_status,
            "ollama": "configured" if settings.ollama_base_url else "not_configured",
        },
    )


@router.post("/chat", response_model=ChatResponse)
async def start_chat(
    request: ChatRequest,
    service: InventoryAgentService = Depends(get_agent_service),
) -> ChatResponse:
    """Start a new conversation thread.

    Body:
        message: The user's first message
    """
    thread_id = generate_thread_id()
    return await _run_turn(service, thread_id, request.message)


@router.post("/chat/{thread_id}", response_model=ChatResponse)
async def continue_chat(
    thread_id: str,
    request: ChatRequest,
    service: InventoryAgentService = Depends(get_agent_service),
) -> ChatResponse:
    """Continue an existing conversation thread.

    Body:
        message: The user's next message
    """
    return await _run_turn(service, thread_id, request.message)
