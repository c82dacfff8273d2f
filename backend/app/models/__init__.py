"""Pydantic models for the sanctions search API."""

from app.models.responses import HealthResponse, SearchResponse

__all__ = ["HealthResponse", "SearchResponse"]
