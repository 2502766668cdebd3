import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth.permissions import CallerContext
from ..models.content import Page, Product, BlogPost, Form, FormSubmission
from ..outcome import ErrorKind, Outcome
from ..schemas.request import GatewayRequest
from ..store import EntityStore

logger = logging.getLogger("cms.handlers")


class ContentService:
    """list/get/create/update for one content type, always inside the caller's tenant"""

    def __init__(self, model, list_status: Optional[str] = None, list_sort: Optional[str] = None):
        self.model = model
        self.store = EntityStore(model)
        self.list_status = list_status
        self.list_sort = list_sort

    def list(self, db: Session, caller: CallerContext, req: GatewayRequest) -> Outcome:
        criteria = {"status": self.list_status} if self.list_status else {}
        criteria.update(req.filters)
        # applied last so no caller filter can widen the tenant
        criteria["tenant_id"] = caller.tenant_id
        rows = self.store.filter(db, criteria, self.list_sort)
        return Outcome.data([r.to_dict() for r in rows])

    def get(self, db: Session, caller: CallerContext, req: GatewayRequest) -> Outcome:
        if req.slug is None:
            return Outcome.data(None)
        rows = self.store.filter(db, {"tenant_id": caller.tenant_id, "slug": req.slug})
        return Outcome.data(rows[0].to_dict() if rows else None)

    def create(self, db: Session, caller: CallerContext, req: GatewayRequest) -> Outcome:
        data = req.data_object()
        if data.get("tenant_id") not in (None, caller.tenant_id):
            logger.warning("create: ignoring client tenant_id",
                           extra={"component": "handlers", "tenant_id": caller.tenant_id,
                                  "resource": self.model.__tablename__})
        data["tenant_id"] = caller.tenant_id
        record = self.store.create(db, data)
        return Outcome.data(record.to_dict())

    def update(self, db: Session, caller: CallerContext, req: GatewayRequest) -> Outcome:
        if req.id is None:
            return Outcome.fail(ErrorKind.RECORD_NOT_FOUND)
        record = self.store.update(db, req.id, req.data_object(), caller.tenant_id)
        if record is None:
            return Outcome.fail(ErrorKind.RECORD_NOT_FOUND)
        return Outcome.data(record.to_dict())


pages = ContentService(Page, list_status="published")
products = ContentService(Product, list_status="published")
blog = ContentService(BlogPost, list_status="published", list_sort="-publish_date")
forms = ContentService(Form, list_status="active")
submissions = ContentService(FormSubmission, list_sort="-created_date")
