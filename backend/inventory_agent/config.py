"""Application configuration management using Pydantic Settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where config.py is located
BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Furniture Inventory Agent"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["*"]

    # MongoDB
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = "inventory_database"
    mongodb_items_collection: str = "items"
    mongodb_checkpoint_collection: str = "checkpoints"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 1

    # Atlas vector search (index is built outside this service)
    vector_index_name: str = "vector_index"
    vector_embedding_key: str = "embedding"
    vector_num_candidates_factor: int = Field(default=10, ge=1)

    # Checkpoints are namespaced per application; defaults to the database name
    checkpoint_namespace: str = ""

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "mistral:latest"
    ollama_embedding_model: str = "nomic-embed-text"
    ollama_temperature: float = 0.0

    # Agent loop
    agent_recursion_limit: int = Field(default=15, ge=2)
    backoff_max_attempts: int = Field(default=3, ge=1)
    backoff_base_delay_s: float = Field(default=1.0, ge=0)
    backoff_max_delay_s: float = Field(default=30.0, ge=0)

    # LangSmith
    langsmith_tracing: bool = Field(default=False, description="Enable LangSmith tracing")
    langsmith_endpoint: str = "https://api.smith.langchain.com"
    langsmith_api_key: str = Field(default="", description="LangSmith API key")
    langsmith_project: str = Field(default="furniture-inventory-agent", description="LangSmith project name")

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def checkpoint_ns(self) -> str:
        """Namespace stamped on every checkpoint document."""
        return self.checkpoint_namespace or self.mongodb_database


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
