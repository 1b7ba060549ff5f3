"""Request and response schemas for the indexing API.

Field names on the wire are camelCase (``fileUrl``, ``chunkCount``) to match
existing callers of the HTTP trigger; Python attributes are snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IndexRequest(BaseModel):
    """Optional JSON body of ``POST /api/v1/index``."""

    model_config = ConfigDict(populate_by_name=True)

    file_url: str | None = Field(default=None, alias="fileUrl")


class IndexResponse(BaseModel):
    """Successful indexing run."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    file_url: str = Field(alias="fileUrl")
    chunk_count: int = Field(alias="chunkCount")


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, str]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str = "Internal Server Error"
    message: str
