"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus user store reachability; carries no auth state."""

    ok: bool = Field(default=True, description="Same envelope flag as every other response")
    status: Literal["ok", "degraded"] = Field(description="'degraded' when the user store is unreachable")
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"]
