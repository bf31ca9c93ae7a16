"""Bodies shared by the probe routes and every error response."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(description="Why the location could not be answered")

    model_config = {
        "json_schema_extra": {"examples": [{"detail": "invalid loc: '51.5'"}]}
    }


class OkResponse(BaseModel):
    ok: bool = Field(description="True when the liveness or readiness check passed")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}
