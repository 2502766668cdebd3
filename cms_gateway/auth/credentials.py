import logging
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..metrics import record_auth_failure
from ..outcome import ErrorKind, Outcome
from ..store import api_key_store
from ..utils.crypto import hash_token
from .permissions import CallerContext, norm_permissions

log = logging.getLogger("cms.auth")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _reject(kind: ErrorKind, tenant_id: Optional[str]) -> Outcome:
    record_auth_failure(kind.value)
    log.warning("AUTH: rejected reason=%s", kind.value,
                extra={"component": "auth", "tenant_id": tenant_id})
    return Outcome.fail(kind)


def validate_credentials(
    db: Session,
    api_key: Optional[str],
    tenant_id: Optional[str],
    now: Optional[datetime] = None,
) -> Union[CallerContext, Outcome]:
    """Resolve an API key + tenant pair into a caller, or a 401 outcome.

    The lookup is keyed on the tenant as well as the key, so a key issued for
    one tenant never validates under another tenant's identifier. On success
    ``last_used`` is written before the request is routed; that write is
    bookkeeping only and a failure there does not fail the request.
    """
    api_key = (api_key or "").strip()
    tenant_id = (tenant_id or "").strip()
    if not api_key or not tenant_id:
        return _reject(ErrorKind.MISSING_CREDENTIALS, tenant_id or None)

    key = api_key_store.find_active(db, hash_token(api_key), tenant_id)
    if key is None:
        return _reject(ErrorKind.INVALID_KEY, tenant_id)

    now = now or datetime.now(timezone.utc)
    if key.expires_at is not None and _as_utc(key.expires_at) < now:
        return _reject(ErrorKind.EXPIRED_KEY, tenant_id)

    try:
        api_key_store.touch(db, key, now)
    except SQLAlchemyError as e:
        db.rollback()
        log.warning("AUTH: last_used update failed key_id=%s: %s", key.key_id, e,
                    extra={"component": "auth", "tenant_id": tenant_id})

    permissions = norm_permissions(key.permissions)
    log.info("AUTH: key matched key_id=%s permissions=%s", key.key_id, sorted(permissions),
             extra={"component": "auth", "tenant_id": tenant_id})
    return CallerContext(tenant_id=tenant_id, key_id=key.key_id, permissions=permissions)


def anonymous_caller(tenant_id: Optional[str]) -> Union[CallerContext, Outcome]:
    """Caller for public form submissions: a tenant identifier and nothing else"""
    tenant_id = (tenant_id or "").strip()
    if not tenant_id:
        return _reject(ErrorKind.MISSING_CREDENTIALS, None)
    return CallerContext(tenant_id=tenant_id)
