"""Pydantic schemas for named counters."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Counter(BaseModel):
    """A named counter and its current value."""

    name: str
    count: int = Field(default=0, ge=0)
