"""Pydantic models for API responses."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SearchResponse(BaseModel):
    """Search hits as ``[document, score]`` pairs in engine order."""

    response: list[tuple[dict[str, Any], Optional[float]]] = Field(default_factory=list)
    num_results: int = 0


class HealthResponse(BaseModel):
    status: str
    index: Optional[str] = None
