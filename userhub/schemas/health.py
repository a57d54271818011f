"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service status plus database reachability, for load balancers and monitoring."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    service: str = Field(default="userhub", description="Service name")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the user store succeeded",
    )
