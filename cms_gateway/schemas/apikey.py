from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..auth.permissions import DEFAULT_PERMISSIONS


class ApiKeyCreate(BaseModel):
    tenant_id: str = Field(..., max_length=64)
    name: str = Field(..., min_length=1, max_length=128)
    permissions: List[str] = list(DEFAULT_PERMISSIONS)
    expires_at: Optional[datetime] = None


class ApiKeyOut(BaseModel):
    key_id: str
    name: str
    tenant_id: str
    permissions: List[str]
    is_active: bool
    expires_at: Optional[str]
    last_used: Optional[str]
    created_at: Optional[str]


class ApiKeyIssued(ApiKeyOut):
    api_key: str = Field(..., description="Plaintext key, shown once")
