"""Pydantic schemas for PushShift rate limit data.

These schemas represent the quota advertised by GET /meta.
"""

from pydantic import BaseModel, Field


class PushShiftMeta(BaseModel):
    """Server metadata from GET /meta.

    Only the rate limit is required; other fields are informational.
    """

    server_ratelimit_per_minute: int = Field(gt=0, description="Requests allowed per minute")
    api_version: str | None = Field(default=None, description="Server API version")
    source_ip: str | None = Field(default=None, description="Client IP as seen by the server")

    @property
    def requests_per_second(self) -> float:
        """Sustained request rate allowed by the server."""
        return self.server_ratelimit_per_minute / 60
