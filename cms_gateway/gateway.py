"""
Request pipeline: credentials, permission gate, routing, handler.

``handle`` is the single place where unexpected exceptions are caught; every
other step reports failure through an ``Outcome``.
"""
import logging
import time
from typing import Optional

from sqlalchemy.orm import Session

from .auth.credentials import anonymous_caller, validate_credentials
from .config import get_expose_internal_errors, get_public_form_submit
from .metrics import record_request
from .outcome import ErrorKind, Outcome
from .routing import lookup, resolve
from .schemas.request import GatewayRequest

logger = logging.getLogger("cms.gateway")


def _authenticate(db: Session, api_key: Optional[str], tenant_id: Optional[str], req: GatewayRequest):
    route = lookup(req.resource, req.action)
    if route is not None and route.is_public and get_public_form_submit() and not api_key:
        return anonymous_caller(tenant_id)
    return validate_credentials(db, api_key, tenant_id)


def handle(db: Session, api_key: Optional[str], tenant_id: Optional[str], req: GatewayRequest) -> Outcome:
    start = time.perf_counter()
    try:
        caller = _authenticate(db, api_key, tenant_id, req)
        if isinstance(caller, Outcome):
            outcome = caller
        else:
            route = resolve(req.resource, req.action, caller)
            if isinstance(route, Outcome):
                logger.warning("route rejected resource=%s action=%s reason=%s",
                               req.resource, req.action, route.error.value,
                               extra={"component": "router", "tenant_id": caller.tenant_id})
                outcome = route
            else:
                outcome = route.handler(db, caller, req)
    except Exception as e:
        db.rollback()
        logger.exception("gateway request failed resource=%s action=%s", req.resource, req.action,
                         extra={"component": "gateway", "tenant_id": tenant_id})
        message = str(e) if get_expose_internal_errors() and str(e) else None
        outcome = Outcome.fail(ErrorKind.INTERNAL, message)

    record_request(req.resource, req.action,
                   "ok" if outcome.is_ok else outcome.error.value,
                   time.perf_counter() - start)
    return outcome
