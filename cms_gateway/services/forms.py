"""
Public form submission
"""
import logging

from sqlalchemy.orm import Session

from .. import config
from ..auth.permissions import CallerContext
from ..outcome import ErrorKind, Outcome
from ..schemas.request import GatewayRequest
from .content import forms, submissions

logger = logging.getLogger("cms.handlers")


def submit_form(db: Session, caller: CallerContext, req: GatewayRequest) -> Outcome:
    """Record a submission against an active form in the caller's tenant.

    Unlike ``get``, an unknown or inactive form is a 404 rather than a null
    payload. The submission keeps whatever ``data`` the visitor sent.
    """
    if req.slug is None:
        return Outcome.fail(ErrorKind.FORM_NOT_FOUND)

    matches = forms.store.filter(db, {
        "tenant_id": caller.tenant_id,
        "slug": req.slug,
        "status": "active",
    })
    if not matches:
        return Outcome.fail(ErrorKind.FORM_NOT_FOUND)

    form = matches[0]
    submission = submissions.store.create(db, {
        "tenant_id": caller.tenant_id,
        "form_id": form.id,
        "form_name": form.name,
        "data": req.data,
        "status": "new",
    })
    logger.info("form submission recorded form_id=%s submission_id=%s", form.id, submission.id,
                extra={"component": "handlers", "tenant_id": caller.tenant_id})
    return Outcome.ok({
        "success": True,
        "message": form.success_message or config.DEFAULT_SUBMIT_MESSAGE,
    })
