"""FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from inventory_agent.services.agent_service import InventoryAgentService


def get_agent_service(request: Request) -> InventoryAgentService:
    """Agent service built during application startup."""
    service = getattr(request.app.state, "agent_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Agent service is not ready",
        )
    return service
