from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payloads that travel as camelCase JSON (API responses and cache entries)."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
