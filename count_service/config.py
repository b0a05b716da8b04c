"""Application configuration loading via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

BackendName = Literal["memory", "dynamodb", "firestore"]


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    counter_backend: BackendName | None = Field(default=None, alias="COUNTER_BACKEND")
    table_name: str | None = Field(default=None, alias="TABLE_NAME")
    dynamodb_region: str | None = Field(default=None, alias="DYNAMODB_REGION")
    dynamodb_endpoint_url: str | None = Field(default=None, alias="DYNAMODB_ENDPOINT_URL")
    firestore_project: str | None = Field(default=None, alias="FIRESTORE_PROJECT")
    firestore_collection: str = Field(default="count", alias="FIRESTORE_COLLECTION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def backend(self) -> BackendName:
        """Return the configured backend, inferring DynamoDB when a table is named."""

        if self.counter_backend is not None:
            return self.counter_backend
        return "dynamodb" if self.table_name else "memory"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
