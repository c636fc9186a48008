"""API request and response models."""

from typing import Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Chat request model."""

    message: str = Field(..., min_length=1, max_length=4000, description="User's message")

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "Do you have any red chairs?",
            }
        }
    }


class ChatResponse(BaseModel):
    """Chat response model."""

    thread_id: str = Field(..., description="Conversation thread identifier")
    response: str = Field(..., description="Assistant's reply")

    model_config = {
        "json_schema_extra": {
            "example": {
                "thread_id": "3f0c1b6d2e8a4c0f9d7e5b1a2c3d4e5f",
                "response": "We have two red chairs in stock right now...",
            }
        }
    }


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]
