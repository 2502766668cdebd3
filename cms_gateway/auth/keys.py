"""
Out-of-band API key administration.

The gateway only reads keys; issuing, listing and revoking happen here,
driven by ``scripts/manage_keys.py`` or an operator shell.
"""
import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.apikey import ApiKey
from ..utils.crypto import generate_api_key, hash_token
from .permissions import ALL_PERMISSIONS, DEFAULT_PERMISSIONS

log = logging.getLogger("cms.keys")


def validate_permissions(permissions: Iterable[str]) -> List[str]:
    """Dedupe and check permissions against the known catalog"""
    cleaned = []
    for p in permissions:
        p = p.strip()
        if p not in ALL_PERMISSIONS:
            raise ValueError(f"Invalid permission: {p}")
        if p not in cleaned:
            cleaned.append(p)
    return cleaned


def issue_key(
    db: Session,
    tenant_id: str,
    name: str,
    permissions: Optional[Iterable[str]] = None,
    expires_at: Optional[datetime] = None,
    secret: Optional[str] = None,
) -> Tuple[ApiKey, str]:
    """Create a key for ``tenant_id``; returns the record and the plaintext secret"""
    if not tenant_id:
        raise ValueError("tenant_id is required")
    if not name:
        raise ValueError("name is required")
    perms = validate_permissions(DEFAULT_PERMISSIONS if permissions is None else permissions)
    secret = secret or generate_api_key()

    key = ApiKey(
        key_id="key_" + uuid.uuid4().hex[:12],
        name=name,
        tenant_id=tenant_id,
        key_hash=hash_token(secret),
        permissions=perms,
        is_active=True,
        expires_at=expires_at,
    )
    db.add(key)
    db.commit()
    db.refresh(key)
    log.info("API key issued key_id=%s permissions=%s", key.key_id, perms,
             extra={"component": "keys", "tenant_id": tenant_id})
    return key, secret


def set_active(db: Session, key_id: str, tenant_id: str, active: bool) -> Optional[ApiKey]:
    key = db.execute(
        select(ApiKey).where(ApiKey.key_id == key_id, ApiKey.tenant_id == tenant_id)
    ).scalars().first()
    if key is None:
        return None
    key.is_active = active
    db.commit()
    log.info("API key %s key_id=%s", "activated" if active else "revoked", key_id,
             extra={"component": "keys", "tenant_id": tenant_id})
    return key


def revoke_key(db: Session, key_id: str, tenant_id: str) -> bool:
    """Deactivate a key. Records are kept so last_used stays auditable."""
    return set_active(db, key_id, tenant_id, False) is not None


def list_keys(db: Session, tenant_id: str) -> List[dict]:
    rows = db.execute(
        select(ApiKey).where(ApiKey.tenant_id == tenant_id).order_by(ApiKey.created_at)
    ).scalars().all()
    return [k.to_dict() for k in rows]
