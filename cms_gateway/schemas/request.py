import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GatewayRequest(BaseModel):
    """The six operation fields the gateway reads from a request body.

    Every field is optional; wrong-typed values degrade to ``None`` (or an
    empty filter object) instead of failing the request.
    """
    model_config = ConfigDict(extra="ignore")

    resource: Optional[str] = Field(None, description="pages, products, blog, forms or submissions")
    action: Optional[str] = Field(None, description="list, get, create, update or submit")
    slug: Optional[str] = None
    id: Optional[str] = None
    data: Optional[Any] = Field(None, description="Record fields or submission payload")
    filters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("resource", "action", mode="before")
    @classmethod
    def _text_or_none(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("slug", "id", mode="before")
    @classmethod
    def _identifier(cls, v):
        if isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return v if isinstance(v, str) else None

    @field_validator("filters", mode="before")
    @classmethod
    def _filters_object(cls, v):
        return v if isinstance(v, dict) else {}

    def data_object(self) -> Dict[str, Any]:
        """``data`` as a dict, for create/update"""
        return dict(self.data) if isinstance(self.data, dict) else {}

    @classmethod
    def from_body(cls, raw: bytes) -> "GatewayRequest":
        """Parse a raw request body; malformed JSON means no fields present"""
        try:
            body = json.loads(raw) if raw else {}
        except (ValueError, UnicodeDecodeError):
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls.model_validate(body)
