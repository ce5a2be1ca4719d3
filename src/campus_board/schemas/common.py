"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """Result of a form-style action such as locking a topic."""

    success: bool
    error: str | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Body returned for every failed API request."""

    error: str
    details: list[Any] | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., description="ceil(total / limit)")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> Pagination:
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit))
