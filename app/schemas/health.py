"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field

from app.core.config import APP_VERSION


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    version: str = APP_VERSION
    environment: str = Field(description="dev or prod")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database reachability; None when not checked",
    )
